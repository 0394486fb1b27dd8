"""Conversion, sorting and indexing of alignments with samtools.
"""
import os

from lynchseq import utils
from lynchseq.pipeline import config_utils
from lynchseq.provenance import do


def is_bam(in_file):
    return os.path.splitext(in_file)[-1] == ".bam"

def is_sam(in_file):
    return os.path.splitext(in_file)[-1] == ".sam"

def sam_to_bam(in_sam, config, out_dir=None, cancel=None):
    assert is_sam(in_sam), "%s is not a SAM file" % in_sam
    out_dir = utils.safe_makedir(out_dir or os.path.dirname(in_sam))
    out_file = os.path.join(out_dir, os.path.splitext(os.path.basename(in_sam))[0] + ".bam")
    samtools = config_utils.get_program("samtools", config)
    cmd = [samtools, "view", "-@", config.threads, "-S", "-b", in_sam, "-o", out_file]
    do.run(cmd, "Convert SAM to BAM: %s to %s" % (os.path.basename(in_sam), os.path.basename(out_file)),
           None, [do.file_nonempty(out_file)], cancel=cancel)
    return out_file

def sort(in_bam, config, out_dir=None, cancel=None):
    """Coordinate sort a BAM file into `<name>.sorted.bam`.
    """
    assert is_bam(in_bam), "%s in not a BAM file" % in_bam
    out_dir = utils.safe_makedir(out_dir or os.path.dirname(in_bam))
    sort_stem = os.path.join(out_dir, os.path.splitext(os.path.basename(in_bam))[0] + ".sorted")
    sort_file = sort_stem + ".bam"
    samtools = config_utils.get_program("samtools", config)
    cmd = [samtools, "sort", "-@", config.threads, "-O", "BAM",
           "-T", sort_stem + "-tmp", "-o", sort_file, in_bam]
    do.run(cmd, "Sort BAM file: %s to %s" % (os.path.basename(in_bam), os.path.basename(sort_file)),
           None, [do.file_nonempty(sort_file)], cancel=cancel)
    return sort_file

def index(in_bam, config, cancel=None):
    """Index a BAM file, replacing any existing index.
    """
    assert is_bam(in_bam), "%s in not a BAM file" % in_bam
    index_file = "%s.bai" % in_bam
    utils.remove_safe(index_file)
    samtools = config_utils.get_program("samtools", config)
    cmd = [samtools, "index", "-@", config.threads, in_bam, index_file]
    do.run(cmd, "Index BAM file: %s" % os.path.basename(in_bam), None,
           [do.file_nonempty(index_file)], cancel=cancel)
    return index_file
