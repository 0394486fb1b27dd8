"""Convenience functions for running common Picard utilities.
"""
import os

from lynchseq import utils
from lynchseq.broad import get_java_opts
from lynchseq.pipeline import config_utils
from lynchseq.provenance import do


def add_read_groups(in_bam, sample_id, config, out_dir=None, cancel=None):
    """Add or replace read group information, tagging reads with the sample name.
    """
    out_dir = utils.safe_makedir(out_dir or os.path.dirname(in_bam))
    out_file = os.path.join(out_dir, "%s.rg.bam" % sample_id)
    rg = config.read_group
    opts = [("I", in_bam),
            ("O", out_file),
            ("RGID", sample_id),
            ("RGLB", rg["library"]),
            ("RGPL", rg["platform"]),
            ("RGPU", rg["unit"]),
            ("RGSM", sample_id)]
    run(config, "AddOrReplaceReadGroups", opts, "Add read groups: %s" % sample_id,
        [do.file_nonempty(out_file)], cancel=cancel)
    return out_file

def run(config, command, options, descr, checks=None, cancel=None):
    """Run a Picard command with KEY=value options.
    """
    picard = config_utils.get_program("picard", config)
    jvm_opts = get_java_opts("picard", config)
    cmd = [picard] + jvm_opts + [command] + ["%s=%s" % (k, v) for k, v in options]
    do.run(cmd, descr, None, checks, cancel=cancel)
