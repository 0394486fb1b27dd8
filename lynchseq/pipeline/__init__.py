"""High level code for driving the Lynch syndrome screening pipeline.

This structures processing into the following modules:

  - sample.py: Group input fastq files into single or paired sample units.
  - stage.py: Run each external tool stage for a sample.
  - main.py: Drive samples through all stages, isolating failures.
  - genes.py: Registry of gene coordinate ranges to check.
  - report.py: Per-sample reports of variants in those ranges.
"""
