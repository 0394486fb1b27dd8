"""Per-sample text reports of variants falling in Lynch syndrome genes.
"""
import collections
import glob
import os

from lynchseq import utils
from lynchseq.distributed.transaction import file_transaction
from lynchseq.log import logger
from lynchseq.variation import scan

REPORT_SUFFIX = "_lynch_report.txt"

ReportEntry = collections.namedtuple("ReportEntry", "gene region found")


def report_entries(vcf_file, registry):
    found = scan.scan(vcf_file, registry)
    return [ReportEntry(gene_range.gene, gene_range.region, gene_range.gene in found)
            for gene_range in registry]

def format_report(sample_id, entries):
    lines = ["Checking Lynch syndrome regions in %s..." % sample_id]
    for entry in entries:
        if entry.found:
            lines.append("Found variant in %s (%s)" % (entry.gene, entry.region))
        else:
            lines.append("No variant in %s (%s)" % (entry.gene, entry.region))
    if not any(entry.found for entry in entries):
        lines.append("No Lynch syndrome variants found in %s" % sample_id)
    return "\n".join(lines) + "\n"

def generate(sample_id, vcf_file, registry):
    """Produce the report text for one sample's variant file.
    """
    return format_report(sample_id, report_entries(vcf_file, registry))

def report_file(sample_id, report_dir):
    return os.path.join(report_dir, "%s%s" % (sample_id, REPORT_SUFFIX))

def write_report(sample_id, vcf_file, registry, report_dir, config=None):
    """Write a sample report, returning its path or None when the scan failed.

    A failed scan removes any report left from a previous run so the
    report directory only holds reports matching current variant files.
    """
    out_file = report_file(sample_id, report_dir)
    try:
        text = generate(sample_id, vcf_file, registry)
    except scan.ScanError as e:
        logger.error("Report failed for %s: %s" % (sample_id, e))
        utils.remove_safe(out_file)
        return None
    utils.safe_makedir(report_dir)
    with file_transaction(config, out_file) as tx_out_file:
        with open(tx_out_file, "w") as out_handle:
            out_handle.write(text)
    logger.info("Report saved: %s" % out_file)
    return out_file

def generate_reports(items, registry, report_dir, config=None):
    """Write reports for (sample_id, vcf_file) pairs, independently of each other.
    """
    out = collections.OrderedDict()
    for sample_id, vcf_file in items:
        out[sample_id] = write_report(sample_id, vcf_file, registry, report_dir, config)
    return out

def find_variant_files(vcf_dir):
    """Retrieve (sample_id, vcf_file) for all compressed VCFs in a directory.
    """
    vcf_files = sorted(glob.glob(os.path.join(vcf_dir, "*.vcf.gz")))
    return [(os.path.basename(f)[:-len(".vcf.gz")], f) for f in vcf_files]
