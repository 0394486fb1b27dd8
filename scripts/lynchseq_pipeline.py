#!/usr/bin/env python -Es
"""Screen a cohort of sequencing samples for variants in Lynch syndrome genes.

Reads `<sample>_1.fastq.gz` (and optional `<sample>_2.fastq.gz`) files from
the project input directory, runs trimming, alignment, variant calling and
annotation per sample, then writes `<sample>_lynch_report.txt` reports.

Usage:
  lynchseq_pipeline.py run [<config_file>] [-p project_dir] [-n cores] [-t threads] [--strict]
  lynchseq_pipeline.py report [<config_file>] [-p project_dir]
  lynchseq_pipeline.py samples [<config_file>] [-p project_dir]
"""
import sys

from lynchseq.pipeline.main import main

if __name__ == "__main__":
    sys.exit(main())
