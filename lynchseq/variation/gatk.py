"""GATK variant calling -- HaplotypeCaller.
"""
import os

from lynchseq import utils
from lynchseq.broad import get_java_opts
from lynchseq.pipeline import config_utils
from lynchseq.provenance import do


def haplotype_caller(align_bam, ref_file, sample_id, config, out_dir=None, cancel=None):
    """Call variation with GATK's HaplotypeCaller, writing an uncompressed VCF.
    """
    out_dir = utils.safe_makedir(out_dir or config.dirs["vcf"])
    out_file = os.path.join(out_dir, "%s.vcf" % sample_id)
    gatk = config_utils.get_program("gatk", config)
    java_opts = get_java_opts("gatk", config, default=["-Xmx16G"])
    cmd = [gatk, "--java-options", " ".join(java_opts), "HaplotypeCaller",
           "-R", ref_file, "-I", align_bam, "-O", out_file]
    cmd += config_utils.get_options("gatk-haplotype", config)
    do.run(cmd, "GATK: HaplotypeCaller: %s" % sample_id, None,
           [do.file_exists(out_file)], cancel=cancel)
    return out_file
