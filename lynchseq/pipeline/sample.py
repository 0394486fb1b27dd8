"""Group input fastq files into sample units for processing.

A `<sample>_1.fastq.gz` file defines a sample; a matching
`<sample>_2.fastq.gz` in the same directory makes it paired-end.
"""
import os

from lynchseq.log import logger
from lynchseq.pipeline.config_utils import ConfigurationError

READ1_SUFFIX = "_1.fastq.gz"
READ2_SUFFIX = "_2.fastq.gz"


class SampleUnit(object):
    """Single-end sample: one read file plus the artifacts produced from it.
    """
    paired = False

    def __init__(self, sample_id, read1):
        self.sample_id = sample_id
        self.read1 = read1
        self.artifacts = {}
        self.state = "discovered"

    @property
    def fastq_files(self):
        return [self.read1]

    def __repr__(self):
        return "%s(%r, %s)" % (self.__class__.__name__, self.sample_id,
                               ", ".join(repr(x) for x in self.fastq_files))


class PairedSampleUnit(SampleUnit):
    paired = True

    def __init__(self, sample_id, read1, read2):
        super(PairedSampleUnit, self).__init__(sample_id, read1)
        self.read2 = read2

    @property
    def fastq_files(self):
        return [self.read1, self.read2]


def discover_samples(fastq_dir, read1_suffix=READ1_SUFFIX, read2_suffix=READ2_SUFFIX):
    """Lazily produce sample units from a directory of fastq files, sorted by identifier.
    """
    if not os.path.isdir(fastq_dir):
        raise ConfigurationError("Input fastq directory not found: %s" % fastq_dir)
    fnames = sorted(os.listdir(fastq_dir))
    read1s = [x for x in fnames if x.endswith(read1_suffix) and len(x) > len(read1_suffix)]
    sample_ids = set(x[:-len(read1_suffix)] for x in read1s)
    for fname in fnames:
        if fname.endswith(read2_suffix) and fname[:-len(read2_suffix)] not in sample_ids:
            logger.warning("Skipping %s: no matching %s file" % (fname, read1_suffix))
    for fname in read1s:
        sample_id = fname[:-len(read1_suffix)]
        read1 = os.path.join(fastq_dir, fname)
        read2 = os.path.join(fastq_dir, sample_id + read2_suffix)
        if os.path.isfile(read2):
            yield PairedSampleUnit(sample_id, read1, read2)
        else:
            yield SampleUnit(sample_id, read1)
