"""Next-gen alignments with BWA (http://bio-bwa.sourceforge.net/)
"""
import os

from lynchseq import utils
from lynchseq.pipeline import config_utils
from lynchseq.provenance import do


def align(fastq_files, ref_file, sample_id, config, cancel=None):
    """Align one or two trimmed fastq files with bwa mem, producing a SAM file.

    Two inputs are aligned as read pairs; a single input as single end reads.
    """
    assert 1 <= len(fastq_files) <= 2, fastq_files
    out_dir = utils.safe_makedir(config.dirs["aligned"])
    out_file = os.path.join(out_dir, "%s.sam" % sample_id)
    bwa = config_utils.get_program("bwa", config)
    cmd = ([bwa, "mem", "-t", config.threads] + config_utils.get_options("bwa", config) +
           [ref_file] + list(fastq_files))
    do.run(cmd, "bwa mem alignment: %s" % sample_id, None, [do.file_nonempty(out_file)],
           cancel=cancel, stdout_file=out_file)
    return out_file
