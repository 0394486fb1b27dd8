"""Registry of named genomic ranges to check variants against.

Ranges are 1-based and inclusive on both ends, matching the
coordinates in VCF POS columns. The registry is built once from
configuration and never modified afterwards.
"""
import collections
import re

import toolz as tz

from lynchseq.pipeline.config_utils import ConfigurationError

# Lynch syndrome mismatch repair genes, hg38
DEFAULT_LYNCH_GENES = collections.OrderedDict([
    ("MLH1", "chr3:3702015-3733317"),
    ("MSH2", "chr2:47650919-47674520"),
    ("MSH6", "chr2:48032114-48129989"),
    ("PMS2", "chr7:5985774-6004636"),
    ("EPCAM", "chr2:47472139-47490377"),
])

_REGION_RE = re.compile(r"^(?P<chrom>[^:\s]+):(?P<start>[0-9,]+)-(?P<end>[0-9,]+)$")


class GeneRange(collections.namedtuple("GeneRange", "gene chrom start end")):
    __slots__ = ()

    @property
    def region(self):
        return "%s:%s-%s" % (self.chrom, self.start, self.end)

    def contains(self, chrom, pos):
        return chrom == self.chrom and self.start <= pos <= self.end


def parse_region(region):
    """Parse a `chrom:start-end` string into (chrom, start, end).
    """
    if not isinstance(region, str):
        raise ConfigurationError("Expected a chrom:start-end region string, got %r" % (region,))
    match = _REGION_RE.match(region.strip())
    if not match:
        raise ConfigurationError("Could not parse region %r, expected chrom:start-end" % region)
    start = int(match.group("start").replace(",", ""))
    end = int(match.group("end").replace(",", ""))
    if start < 1:
        raise ConfigurationError("Region %r has a start below 1; coordinates are 1-based" % region)
    if start > end:
        raise ConfigurationError("Region %r has start greater than end" % region)
    return match.group("chrom"), start, end


class GeneRegistry(object):
    """Read-only mapping of gene symbol to GeneRange, in configuration order.
    """
    def __init__(self, genes):
        ranges = collections.OrderedDict()
        items = genes.items() if hasattr(genes, "items") else genes
        for gene, region in items:
            gene = str(gene).strip() if gene is not None else ""
            if not gene:
                raise ConfigurationError("Empty gene symbol in gene ranges")
            if gene in ranges:
                raise ConfigurationError("Duplicate gene symbol in gene ranges: %s" % gene)
            if isinstance(region, GeneRange):
                chrom, start, end = region.chrom, region.start, region.end
                if start < 1 or start > end:
                    raise ConfigurationError("Invalid range for %s: %s" % (gene, region.region))
            else:
                try:
                    chrom, start, end = parse_region(region)
                except ConfigurationError as e:
                    raise ConfigurationError("Gene %s: %s" % (gene, e))
            ranges[gene] = GeneRange(gene, chrom, start, end)
        self._ranges = ranges
        self._by_chrom = tz.groupby(lambda r: r.chrom, ranges.values())

    def lookup(self, gene):
        return self._ranges.get(gene)

    def all(self):
        return list(self._ranges.items())

    def by_chrom(self, chrom):
        return self._by_chrom.get(chrom, [])

    def __iter__(self):
        return iter(self._ranges.values())

    def __len__(self):
        return len(self._ranges)

    def __contains__(self, gene):
        return gene in self._ranges

    def __repr__(self):
        return "GeneRegistry(%s)" % ", ".join("%s=%s" % (g, r.region) for g, r in self._ranges.items())
