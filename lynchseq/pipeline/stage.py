"""Uniform invocation of the external tools making up each pipeline stage.

Stages run in a fixed order; each reads artifacts produced by earlier
stages from the sample unit and returns the artifact paths it produced.
An ordinary tool failure becomes a failed StageResult instead of an
exception so the orchestrator can abandon just that sample.
"""
import collections
import os
import subprocess

from lynchseq import bam
from lynchseq.bam import trim
from lynchseq.broad import picardrun
from lynchseq.log import logger
from lynchseq.ngsalign import bwa
from lynchseq.provenance import do
from lynchseq.variation import annotation, gatk, vcfutils

# stage name, state reached once it succeeds
STAGES = [("trim", "trimmed"),
          ("align", "aligned"),
          ("sort", "sorted"),
          ("tag", "tagged"),
          ("call", "called"),
          ("compress", "compressed"),
          ("annotate", "annotated")]

StageResult = collections.namedtuple("StageResult", "stage ok artifacts error")


class PipelineCancelled(Exception):
    pass


class StageRunner(object):
    """Interface for running pipeline stages on a sample unit.

    Each method takes (unit, config, cancel) and returns a dictionary of
    produced artifact paths, raising on failure.
    """
    def trim(self, unit, config, cancel=None):
        raise NotImplementedError

    def align(self, unit, config, cancel=None):
        raise NotImplementedError

    def sort(self, unit, config, cancel=None):
        raise NotImplementedError

    def tag(self, unit, config, cancel=None):
        raise NotImplementedError

    def call(self, unit, config, cancel=None):
        raise NotImplementedError

    def compress(self, unit, config, cancel=None):
        raise NotImplementedError

    def annotate(self, unit, config, cancel=None):
        raise NotImplementedError


class ToolStageRunner(StageRunner):
    """Run stages with fastp, bwa, samtools, picard, GATK, bgzip/tabix and ANNOVAR.
    """
    def trim(self, unit, config, cancel=None):
        return trim.fastp_trim(unit, config, cancel=cancel)

    def align(self, unit, config, cancel=None):
        sam_file = bwa.align(_require(unit, "trimmed"), config.ref_file, unit.sample_id, config,
                             cancel=cancel)
        return {"sam": sam_file}

    def sort(self, unit, config, cancel=None):
        out_dir = config.dirs["processed"]
        bam_file = bam.sam_to_bam(_require(unit, "sam"), config, out_dir=out_dir, cancel=cancel)
        sorted_bam = bam.sort(bam_file, config, out_dir=out_dir, cancel=cancel)
        return {"bam": bam_file, "sorted_bam": sorted_bam,
                "sorted_bai": bam.index(sorted_bam, config, cancel=cancel)}

    def tag(self, unit, config, cancel=None):
        rg_bam = picardrun.add_read_groups(_require(unit, "sorted_bam"), unit.sample_id, config,
                                           out_dir=config.dirs["processed"], cancel=cancel)
        return {"rg_bam": rg_bam, "rg_bai": bam.index(rg_bam, config, cancel=cancel)}

    def call(self, unit, config, cancel=None):
        vcf_file = gatk.haplotype_caller(_require(unit, "rg_bam"), config.ref_file, unit.sample_id,
                                         config, cancel=cancel)
        return {"vcf": vcf_file}

    def compress(self, unit, config, cancel=None):
        vcf_gz = vcfutils.bgzip_and_index(_require(unit, "vcf"), config, cancel=cancel)
        return {"vcf_gz": vcf_gz, "vcf_tbi": vcf_gz + ".tbi"}

    def annotate(self, unit, config, cancel=None):
        return annotation.annovar_annotate(_require(unit, "vcf_gz"), unit.sample_id, config,
                                           cancel=cancel)


def _require(unit, key):
    """Retrieve an artifact from an earlier stage, checking it is on disk.
    """
    fnames = unit.artifacts.get(key)
    if not fnames:
        raise IOError("Missing %s input for %s" % (key, unit.sample_id))
    for fname in (fnames if isinstance(fnames, (list, tuple)) else [fnames]):
        if not os.path.exists(fname):
            raise IOError("Input file for %s not found: %s" % (unit.sample_id, fname))
    return fnames

def run_stage(stage, runner, unit, config, cancel=None):
    """Run a single stage for a sample, reporting tool failures as a failed StageResult.
    """
    fn = getattr(runner, stage)
    try:
        artifacts = fn(unit, config, cancel=cancel)
    except do.CommandCancelled:
        raise PipelineCancelled("%s cancelled for %s" % (stage, unit.sample_id))
    except subprocess.CalledProcessError as e:
        reason = "exit status %s" % e.returncode
        logger.error("%s failed for %s: %s" % (stage, unit.sample_id, reason))
        logger.debug(str(e.cmd))
        return StageResult(stage, False, {}, reason)
    except (IOError, OSError, ValueError) as e:
        logger.error("%s failed for %s: %s" % (stage, unit.sample_id, e))
        return StageResult(stage, False, {}, str(e))
    return StageResult(stage, True, artifacts or {}, None)
