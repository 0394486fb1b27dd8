"""Pytest fixtures and test helper functions"""
import gzip
import os
import subprocess
import threading

import pytest

from lynchseq.pipeline import config_utils
from lynchseq.pipeline.genes import GeneRegistry
from lynchseq.pipeline.stage import StageRunner

VCF_HEADER = ("##fileformat=VCFv4.2\n"
              "##source=HaplotypeCaller\n"
              "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO\tFORMAT\tS1\n")


def write_vcf(fname, records, compress=None):
    """Write a minimal VCF with (chrom, pos) records, gzipped for .gz names."""
    lines = [VCF_HEADER] + ["%s\t%s\t.\tA\tG\t50\tPASS\tDP=10\tGT\t0/1\n" % (c, p)
                            for c, p in records]
    if compress is None:
        compress = fname.endswith(".gz")
    if compress:
        with gzip.open(fname, "wt") as out_handle:
            out_handle.writelines(lines)
    else:
        with open(fname, "w") as out_handle:
            out_handle.writelines(lines)
    return fname


def touch(fname, content="x"):
    os.makedirs(os.path.dirname(fname), exist_ok=True)
    with open(fname, "w") as out_handle:
        out_handle.write(content)
    return fname


class FakeStageRunner(StageRunner):
    """Stage runner producing small placeholder files instead of calling tools.

    failures -- set of (sample_id, stage) pairs that fail with a non-zero exit.
    variants -- per sample (chrom, pos) records written to the compressed VCF.
    """
    def __init__(self, failures=None, variants=None):
        self.failures = set(failures or [])
        self.variants = variants or {}
        self.calls = []
        self.active = set()
        self.overlaps = []
        self._lock = threading.Lock()

    def _run(self, stage, unit, config, outputs):
        with self._lock:
            if unit.sample_id in self.active:
                self.overlaps.append((unit.sample_id, stage))
            self.active.add(unit.sample_id)
            self.calls.append((unit.sample_id, stage))
        try:
            if (unit.sample_id, stage) in self.failures:
                raise subprocess.CalledProcessError(1, "%s %s" % (stage, unit.sample_id))
            for fname in outputs.values():
                for f in (fname if isinstance(fname, list) else [fname]):
                    touch(f)
            return outputs
        finally:
            with self._lock:
                self.active.discard(unit.sample_id)

    def _path(self, config, dname, fname):
        return os.path.join(config.dirs[dname], fname)

    def trim(self, unit, config, cancel=None):
        names = (["%s_R%s_trimmed.fastq.gz" % (unit.sample_id, i + 1) for i in range(2)]
                 if unit.paired else ["%s_trimmed.fastq.gz" % unit.sample_id])
        return self._run("trim", unit, config,
                         {"trimmed": [self._path(config, "fastp", x) for x in names]})

    def align(self, unit, config, cancel=None):
        assert unit.artifacts["trimmed"]
        return self._run("align", unit, config,
                         {"sam": self._path(config, "aligned", "%s.sam" % unit.sample_id)})

    def sort(self, unit, config, cancel=None):
        assert unit.artifacts["sam"]
        return self._run("sort", unit, config,
                         {"sorted_bam": self._path(config, "processed", "%s.sorted.bam" % unit.sample_id)})

    def tag(self, unit, config, cancel=None):
        assert unit.artifacts["sorted_bam"]
        return self._run("tag", unit, config,
                         {"rg_bam": self._path(config, "processed", "%s.rg.bam" % unit.sample_id)})

    def call(self, unit, config, cancel=None):
        assert unit.artifacts["rg_bam"]
        return self._run("call", unit, config,
                         {"vcf": self._path(config, "vcf", "%s.vcf" % unit.sample_id)})

    def compress(self, unit, config, cancel=None):
        assert unit.artifacts["vcf"]
        vcf_gz = self._path(config, "vcf", "%s.vcf.gz" % unit.sample_id)
        out = self._run("compress", unit, config, {})
        write_vcf(vcf_gz, self.variants.get(unit.sample_id, []))
        out["vcf_gz"] = vcf_gz
        return out

    def annotate(self, unit, config, cancel=None):
        assert unit.artifacts["vcf_gz"]
        return self._run("annotate", unit, config,
                         {"lynch_annotated": self._path(config, "annotated", "%s.lynch.txt" % unit.sample_id)})


@pytest.fixture
def registry():
    return GeneRegistry([("GENE_A", "chr1:100-200"),
                         ("GENE_B", "chr2:1000-2000")])


@pytest.fixture
def project_dir(tmp_path):
    fastq_dir = tmp_path / "Data_Folder"
    fastq_dir.mkdir()
    return tmp_path


@pytest.fixture
def run_config(project_dir):
    config = config_utils.load_run_config(None, project_dir=str(project_dir),
                                          genes={"GENE_A": "chr1:100-200",
                                                 "GENE_B": "chr2:1000-2000"})
    config_utils.create_dirs(config)
    return config


@pytest.fixture
def add_fastqs(project_dir):
    """Create fastq inputs: add_fastqs("S1_1", "S1_2") -> paths."""
    def _add(*stems):
        return [touch(str(project_dir / "Data_Folder" / ("%s.fastq.gz" % s))) for s in stems]
    return _add


@pytest.fixture
def fake_runner():
    return FakeStageRunner


@pytest.fixture
def vcf_writer():
    return write_vcf
