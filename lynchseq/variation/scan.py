"""Find which configured gene ranges contain variants from a VCF file.

A record at (chrom, pos) falls in a gene when the chromosome names are
identical and start <= pos <= end, with 1-based inclusive coordinates.
"""
import collections
import zlib

from lynchseq import utils


class ScanError(IOError):
    """A variant file could not be read or contained a malformed record.
    """
    pass

VariantRecord = collections.namedtuple("VariantRecord", "chrom pos")


def read_variants(vcf_file):
    """Stream (chrom, pos) records from a plain or gzipped VCF, skipping headers.
    """
    try:
        with utils.open_gzipsafe(vcf_file) as in_handle:
            for i, line in enumerate(in_handle):
                if line.startswith("#") or not line.strip():
                    continue
                parts = line.rstrip("\r\n").split("\t", 2)
                if len(parts) < 2:
                    raise ScanError("Malformed VCF record at line %s of %s" % (i + 1, vcf_file))
                try:
                    pos = int(parts[1])
                except ValueError:
                    raise ScanError("Non-integer position %r at line %s of %s" % (parts[1], i + 1, vcf_file))
                yield VariantRecord(parts[0], pos)
    except (IOError, OSError, EOFError, UnicodeDecodeError, zlib.error) as e:
        if isinstance(e, ScanError):
            raise
        raise ScanError("Could not read variant file %s: %s" % (vcf_file, e))

def record_matches(record, gene_range):
    return gene_range.contains(record.chrom, record.pos)

def scan(vcf_file, registry):
    """Return the set of gene symbols with at least one variant inside their range.
    """
    found = set()
    for record in read_variants(vcf_file):
        for gene_range in registry.by_chrom(record.chrom):
            if gene_range.gene not in found and record_matches(record, gene_range):
                found.add(gene_range.gene)
    return found
