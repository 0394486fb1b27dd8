"""Compress and index VCF files with bgzip and tabix.
"""
import os

from lynchseq import utils
from lynchseq.pipeline import config_utils
from lynchseq.provenance import do


def bgzip_and_index(in_file, config, cancel=None):
    """bgzip and tabix index a VCF file, replacing the uncompressed input.
    """
    out_file = in_file if in_file.endswith(".gz") else in_file + ".gz"
    if not in_file.endswith(".gz"):
        if not os.path.exists(in_file):
            raise IOError("Input file %s not found" % in_file)
        bgzip = config_utils.get_program("bgzip", config)
        do.run([bgzip, "-f", in_file], "bgzip %s" % os.path.basename(in_file), None,
               [do.file_nonempty(out_file)], cancel=cancel)
    tabix_index(out_file, config, cancel=cancel)
    return out_file

def tabix_index(in_file, config, preset="vcf", cancel=None):
    """Index a file using tabix.
    """
    out_file = in_file + ".tbi"
    utils.remove_safe(out_file)
    tabix = config_utils.get_program("tabix", config)
    do.run([tabix, "-f", "-p", preset, in_file], "tabix index %s" % os.path.basename(in_file),
           None, [do.file_nonempty(out_file)], cancel=cancel)
    return out_file
