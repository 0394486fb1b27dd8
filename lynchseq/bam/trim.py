"""fastp quality and adapter trimming of input reads (https://github.com/OpenGene/fastp)
"""
import os

from lynchseq import utils
from lynchseq.log import logger
from lynchseq.pipeline import config_utils
from lynchseq.provenance import do


def trimmed_files(unit, out_dir):
    """Output names for trimmed reads; paired reads get R1/R2 labels.
    """
    if unit.paired:
        return [os.path.join(out_dir, "%s_R%s_trimmed.fastq.gz" % (unit.sample_id, i + 1))
                for i in range(len(unit.fastq_files))]
    else:
        return [os.path.join(out_dir, "%s_trimmed.fastq.gz" % unit.sample_id)]

def fastp_trim(unit, config, cancel=None):
    """Trim reads with fastp, writing json and html quality reports alongside.
    """
    out_dir = utils.safe_makedir(config.dirs["fastp"])
    out_files = trimmed_files(unit, out_dir)
    report_base = (os.path.join(out_dir, unit.sample_id) if unit.paired
                   else out_files[0])
    json_file = "%s.json" % report_base
    html_file = "%s.html" % report_base
    logger.info("Trimming %s in %s mode with fastp" % (unit.sample_id,
                                                       "paired end" if unit.paired else "single end"))
    cmd = [config_utils.get_program("fastp", config), "--thread", config.threads]
    for i, (inf, outf) in enumerate(zip(unit.fastq_files, out_files)):
        if i == 0:
            cmd += ["-i", inf, "-o", outf]
        else:
            cmd += ["-I", inf, "-O", outf]
    cmd += ["--length_required", str(config.min_read_length)]
    cmd += config_utils.get_options("fastp", config)
    cmd += ["--json", json_file, "--html", html_file]
    do.run(cmd, "Trimming with fastp", unit, [do.file_nonempty(f) for f in out_files],
           cancel=cancel)
    return {"trimmed": out_files, "trim_report": json_file}
