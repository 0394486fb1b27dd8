"""Work with Broad's Java tools from Python.

  Picard -- BAM manipulation, used here to add read groups.
  GATK -- variant calling with HaplotypeCaller.
"""
from lynchseq.pipeline import config_utils


def get_default_jvm_opts(tmp_dir=None):
    """Retrieve default JVM tuning options

    Serial GC avoids multiple spun up Java processes grabbing all cores
    on big machines.
    """
    opts = ["-XX:+UseSerialGC"]
    if tmp_dir:
        opts.append("-Djava.io.tmpdir=%s" % tmp_dir)
    return opts

def get_java_opts(name, config, default=None, tmp_dir=None):
    """JVM options for a Broad tool, from its resources or the provided default.
    """
    return config_utils.get_jvm_opts(name, config, default) + get_default_jvm_opts(tmp_dir)
