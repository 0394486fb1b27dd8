"""Main entry point for Lynch syndrome variant screening of a sample cohort.

Each sample goes through trimming, alignment, BAM preparation, read
group tagging, variant calling, compression and annotation. A failing
stage abandons only that sample. Reports are written afterwards for
every sample with a compressed variant file.
"""
import argparse
import collections
import sys
import threading

from lynchseq import log, utils
from lynchseq.distributed import multi
from lynchseq.log import logger
from lynchseq.pipeline import config_utils, report, sample, stage
from lynchseq.pipeline.stage import PipelineCancelled

SampleOutcome = collections.namedtuple("SampleOutcome",
                                       "sample_id state reached failed_stage error vcf_file")


def process_sample(unit, config, runner, cancel=None):
    """Run all stages in order for one sample, stopping at the first failure.
    """
    logger.info("Processing %s sample: %s" % ("Paired-End" if unit.paired else "Single-End",
                                              unit.sample_id))
    for stage_name, state in stage.STAGES:
        if cancel is not None and cancel.is_set():
            raise PipelineCancelled("%s cancelled before %s" % (unit.sample_id, stage_name))
        result = stage.run_stage(stage_name, runner, unit, config, cancel=cancel)
        if not result.ok:
            logger.warning("Abandoning %s at %s; artifacts so far are left in place"
                           % (unit.sample_id, stage_name))
            return _outcome(unit, "abandoned", stage_name, result.error)
        unit.artifacts.update(result.artifacts)
        unit.state = state
    logger.info("Finished processing: %s" % unit.sample_id)
    return _outcome(unit, unit.state, None, None)

def _outcome(unit, state, failed_stage, error):
    return SampleOutcome(unit.sample_id, state, unit.state, failed_stage, error,
                         unit.artifacts.get("vcf_gz"))

def _next_stage(unit):
    states = [x[1] for x in stage.STAGES]
    if unit.state in states:
        return stage.STAGES[states.index(unit.state) + 1][0] if unit.state != states[-1] else None
    return stage.STAGES[0][0]

def _process_isolated(unit, config, runner, cancel):
    try:
        return process_sample(unit, config, runner, cancel)
    except PipelineCancelled as e:
        logger.warning(str(e))
        return _outcome(unit, "cancelled", _next_stage(unit), str(e))
    except Exception as e:
        logger.exception("Unexpected error processing %s" % unit.sample_id)
        return _outcome(unit, "abandoned", _next_stage(unit), str(e))

def run_samples(units, config, runner, cores=1, cancel=None):
    """Process every sample unit, returning outcomes in input order.

    Samples run independently, in parallel when cores > 1. All stages of
    one sample run within a single worker.
    """
    if cancel is None:
        cancel = threading.Event()
    return multi.run_multicore(lambda unit: _process_isolated(unit, config, runner, cancel),
                               units, cores, cancel=cancel)

def exit_status(outcomes, strict=False):
    """Determine the run exit code from per-sample outcomes.

    0 -- completed, possibly with abandoned samples
    1 -- samples were present but none produced variant calls, or any
         sample failed in strict mode
    """
    if not outcomes:
        return 0
    if not any(o.vcf_file for o in outcomes):
        return 1
    if strict and any(o.state != "annotated" for o in outcomes):
        return 1
    return 0

def _log_summary(outcomes):
    for o in outcomes:
        if o.state == "annotated":
            logger.info("%s: complete" % o.sample_id)
        else:
            logger.info("%s: %s at %s (%s)" % (o.sample_id, o.state, o.failed_stage, o.error))
    done = len([o for o in outcomes if o.state == "annotated"])
    logger.info("%s of %s samples completed all stages" % (done, len(outcomes)))

def run_main(config, runner=None, strict=False, cancel=None):
    """Run the pipeline and reports for all samples in the configured input directory.
    """
    if runner is None:
        runner = stage.ToolStageRunner()
        config_utils.check_requirements(config)
    logger.info("Starting pipeline in: %s" % config.project_dir)
    config_utils.create_dirs(config)
    units = list(sample.discover_samples(config.dirs["fastq"], config.read1_suffix,
                                         config.read2_suffix))
    if not units:
        logger.warning("No *%s files found in %s" % (config.read1_suffix, config.dirs["fastq"]))
    outcomes = run_samples(units, config, runner, config.cores, cancel)
    logger.info("Generating Lynch gene position reports...")
    for o in outcomes:
        if not o.vcf_file:
            utils.remove_safe(report.report_file(o.sample_id, config.dirs["report"]))
    report.generate_reports([(o.sample_id, o.vcf_file) for o in outcomes if o.vcf_file],
                            config.genes, config.dirs["report"], config)
    _log_summary(outcomes)
    logger.info("All done. Check results in:")
    logger.info("- %s" % config.dirs["annotated"])
    logger.info("- %s" % config.dirs["report"])
    return exit_status(outcomes, strict)

def run_report(config):
    """Write reports for every compressed VCF in the variant directory.
    """
    items = report.find_variant_files(config.dirs["vcf"])
    if not items:
        logger.warning("No compressed VCF files found in %s" % config.dirs["vcf"])
    reports = report.generate_reports(items, config.genes, config.dirs["report"], config)
    return 1 if reports and not any(reports.values()) else 0

def list_samples(config):
    for unit in sample.discover_samples(config.dirs["fastq"], config.read1_suffix,
                                        config.read2_suffix):
        print("%s\t%s\t%s" % (unit.sample_id, "paired" if unit.paired else "single",
                              "\t".join(unit.fastq_files)))
    return 0

# ## Command line

def parse_cl_args(in_args):
    """Parse input commandline arguments into a sub-command and options.
    """
    description = "Screen sequencing reads for variants in Lynch syndrome genes."
    parser = argparse.ArgumentParser(description=description)
    subparsers = parser.add_subparsers(dest="command")
    subparsers.required = True
    for name, help_str in [("run", "Process all samples and write reports"),
                           ("report", "Write reports from existing compressed VCF files"),
                           ("samples", "List discovered samples and their pairing")]:
        sub = subparsers.add_parser(name, help=help_str)
        sub.add_argument("config_file", nargs="?",
                         help="YAML configuration file (optional, uses built in defaults)")
        sub.add_argument("-p", "--project_dir",
                         help="Project directory containing inputs and outputs")
        if name == "run":
            sub.add_argument("-n", "--numcores", type=int, default=None,
                             help="Number of samples to process at the same time")
            sub.add_argument("-t", "--threads", type=int, default=None,
                             help="Threads passed to each external tool")
            sub.add_argument("--strict", action="store_true", default=False,
                             help="Exit with an error if any sample is abandoned")
    args = parser.parse_args(in_args)
    overrides = {"project_dir": args.project_dir}
    if args.command == "run":
        overrides["cores"] = args.numcores
        overrides["threads"] = args.threads
    return args, overrides

def main(in_args=None):
    args, overrides = parse_cl_args(sys.argv[1:] if in_args is None else in_args)
    try:
        config = config_utils.load_run_config(args.config_file, **overrides)
    except config_utils.ConfigurationError as e:
        sys.stderr.write("Configuration error: %s\n" % e)
        return 2
    handler = log.setup_local_logging(config._asdict() if args.command != "samples"
                                      else {"log_dir": None})
    try:
        if args.command == "run":
            return run_main(config, strict=args.strict)
        elif args.command == "report":
            return run_report(config)
        else:
            return list_samples(config)
    except config_utils.ConfigurationError as e:
        logger.error("Configuration error: %s" % e)
        return 2
    except KeyboardInterrupt:
        logger.warning("Run cancelled")
        return 130
    finally:
        handler.pop_application()
        handler.close()
