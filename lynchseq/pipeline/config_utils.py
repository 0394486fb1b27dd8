"""Loads configurations from .yaml files and expands environment variables.

The configuration yaml has the structure

project_dir:
fastq_dir:
ref_file:
annovar_dir:
threads:
cores:
dirs:
	fastp:
	aligned:
	...
resources:
	program1:
		cmd:
		jvm_opts:
		options:
genes:
	GENE: chrom:start-end

Values support environment variables and ~ expansion.
"""
import collections
import copy
import os

import toolz as tz
import yaml

from lynchseq import utils


class ConfigurationError(ValueError):
    """Invalid or incomplete configuration, fatal before any sample runs.
    """
    pass

class CmdNotFound(ConfigurationError):
    pass

DEFAULT_PROJECT_DIR = os.path.join("~", "NILES3")

# directory keys with their default names inside the project directory
DIRS = collections.OrderedDict([
    ("fastq", "Data_Folder"),
    ("fastp", "DNA_Fastp"),
    ("aligned", "DNA_Aligned"),
    ("processed", "DNA_Processed"),
    ("vcf", "DNA_VCF"),
    ("annotated", "DNA_Annotated"),
    ("report", "DNA_Annotated_Report"),
])

TOOLS = ["fastp", "bwa", "samtools", "picard", "gatk", "bgzip", "tabix", "perl"]

DEFAULTS = {
    "ref_file": os.path.join("Alignment", "Homo_sapiens_assembly38.fasta"),
    "annovar_dir": os.path.join("annovar.latest", "annovar"),
    "annovar_db": None,
    "buildver": "hg38",
    "threads": 20,
    "cores": 1,
    "min_read_length": 30,
    "read1_suffix": "_1.fastq.gz",
    "read2_suffix": "_2.fastq.gz",
    "read_group": {"library": "lib1", "platform": "illumina", "unit": "unit1"},
    "resources": {"gatk": {"cmd": os.path.join("gatk-4.1.8.1", "gatk"),
                           "jvm_opts": ["-Xmx16G"]}},
    "genes": None,
    "log_dir": None,
    "tmp_dir": None,
}

RunConfig = collections.namedtuple(
    "RunConfig",
    ["project_dir", "dirs", "ref_file", "annovar_dir", "annovar_db", "buildver",
     "threads", "cores", "min_read_length", "read1_suffix", "read2_suffix",
     "read_group", "resources", "genes", "log_dir", "tmp_dir", "config_file"])

# ## Loading

def load_config(config_file):
    """Load YAML config file, replacing environmental variables.
    """
    with open(config_file) as in_handle:
        config = yaml.safe_load(in_handle) or {}
    if not isinstance(config, dict):
        raise ConfigurationError("Configuration file %s does not contain a mapping" % config_file)
    return _expand_paths(config)

def _expand_paths(config):
    for field, setting in config.items():
        if isinstance(config[field], dict):
            config[field] = _expand_paths(config[field])
        else:
            config[field] = expand_path(setting)
    return config

def expand_path(path):
    """ Combines os.path.expandvars with replacing ~ with $HOME.
    """
    try:
        return os.path.expandvars(path.replace("~", "$HOME"))
    except AttributeError:
        return path

def _merge(base, update):
    """Merge configuration dictionaries, preferring definitions in update.
    """
    out = copy.deepcopy(base)
    for k, v in update.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _merge(out[k], v)
        else:
            out[k] = v
    return out

def load_run_config(config_file=None, **overrides):
    """Build the immutable run configuration from defaults, a YAML file and overrides.

    Relative paths resolve against the project directory. Gene ranges
    are parsed here so malformed entries fail before any processing.
    """
    from lynchseq.pipeline import genes

    raw = copy.deepcopy(DEFAULTS)
    if config_file:
        if not os.path.exists(config_file):
            raise ConfigurationError("Could not find input configuration file %s" % config_file)
        raw = _merge(raw, load_config(config_file))
    raw = _merge(raw, {k: v for k, v in overrides.items() if v is not None})

    project_dir = utils.get_abspath(expand_path(raw.get("project_dir") or DEFAULT_PROJECT_DIR))
    dirs = {}
    for key, default in DIRS.items():
        dirs[key] = utils.get_abspath(tz.get_in(["dirs", key], raw) or default, project_dir)
    if raw.get("fastq_dir"):
        dirs["fastq"] = utils.get_abspath(raw["fastq_dir"], project_dir)
    annovar_dir = utils.get_abspath(raw["annovar_dir"], project_dir)
    resources = raw.get("resources") or {}
    gatk_cmd = tz.get_in(["gatk", "cmd"], resources)
    if gatk_cmd and os.path.dirname(gatk_cmd):
        resources["gatk"]["cmd"] = utils.get_abspath(gatk_cmd, project_dir)
    registry = genes.GeneRegistry(raw["genes"] if raw.get("genes") else genes.DEFAULT_LYNCH_GENES)
    for int_key in ["threads", "cores", "min_read_length"]:
        try:
            raw[int_key] = int(raw[int_key])
        except (TypeError, ValueError):
            raise ConfigurationError("Expected an integer for %s, got %r" % (int_key, raw[int_key]))
        if raw[int_key] < 1:
            raise ConfigurationError("%s must be at least 1, got %s" % (int_key, raw[int_key]))
    return RunConfig(
        project_dir=project_dir,
        dirs=dirs,
        ref_file=utils.get_abspath(raw["ref_file"], project_dir),
        annovar_dir=annovar_dir,
        annovar_db=utils.get_abspath(raw["annovar_db"], project_dir) if raw.get("annovar_db")
                   else os.path.join(annovar_dir, "humandb"),
        buildver=raw["buildver"],
        threads=raw["threads"],
        cores=raw["cores"],
        min_read_length=raw["min_read_length"],
        read1_suffix=raw["read1_suffix"],
        read2_suffix=raw["read2_suffix"],
        read_group=dict(DEFAULTS["read_group"], **(raw.get("read_group") or {})),
        resources=resources,
        genes=registry,
        log_dir=utils.get_abspath(raw["log_dir"], project_dir) if raw.get("log_dir")
                else os.path.join(project_dir, "log"),
        tmp_dir=utils.get_abspath(raw["tmp_dir"], project_dir) if raw.get("tmp_dir") else None,
        config_file=os.path.abspath(config_file) if config_file else None)

# ## Retrieval functions

def get_resources(name, config):
    """Retrieve resources for a program, pulling from multiple config sources.
    """
    resources = config.resources if hasattr(config, "resources") else config.get("resources", {})
    return tz.get_in([name], resources, tz.get_in(["default"], resources, {}))

def get_program(name, config, default=None):
    """Retrieve the command for a program from the configuration.

    Looks at `resources: {name: {cmd: ...}}` first, then conda and PATH.
    """
    pconfig = get_resources(name, config)
    if isinstance(pconfig, str):
        program = pconfig
    elif pconfig.get("cmd"):
        program = pconfig["cmd"]
    elif default is not None:
        program = default
    else:
        program = name
    found = utils.which(expand_path(program))
    if not found:
        raise CmdNotFound("Could not find program %s (configured as %s)" % (name, program))
    return found

def get_jvm_opts(name, config, default=None):
    return [str(x) for x in get_resources(name, config).get("jvm_opts", default or [])]

def get_options(name, config):
    return [str(x) for x in get_resources(name, config).get("options", [])]

def create_dirs(config, names=None):
    if names is None:
        names = config.dirs.keys()
    for dname in names:
        utils.safe_makedir(config.dirs[dname])

def check_requirements(config):
    """Validate inputs and programs needed before processing any samples.
    """
    if not os.path.isdir(config.dirs["fastq"]):
        raise ConfigurationError("Input fastq directory not found: %s" % config.dirs["fastq"])
    if not utils.file_exists(config.ref_file):
        raise ConfigurationError("Reference genome not found: %s" % config.ref_file)
    for script in ["convert2annovar.pl", "annotate_variation.pl"]:
        if not os.path.exists(os.path.join(config.annovar_dir, script)):
            raise ConfigurationError("ANNOVAR script %s not found in %s" % (script, config.annovar_dir))
    return {name: get_program(name, config) for name in TOOLS}
