#!/usr/bin/env python

"""Setup file and install script for Lynch syndrome variant screening"""

import os
import subprocess

import setuptools

VERSION = '0.1.0'

# add version number and git commit hash of the current revision to version.py
try:
    git_run = subprocess.run(['git', 'rev-parse', '--short', 'HEAD'], stdout=subprocess.PIPE,
                             stderr=subprocess.DEVNULL)
    git_run.check_returncode()
except (OSError, subprocess.SubprocessError):
    commit_hash = ''
else:
    commit_hash = git_run.stdout.strip().decode()

here = os.path.dirname(os.path.abspath(__file__))
with open(os.path.join(here, 'lynchseq', 'pipeline', 'version.py'), 'w') as version_file:
    version_file.writelines([f'__version__ = "{VERSION}"\n',
                             f'__git_revision__ = "{commit_hash}"\n'])

# external tools (fastp, bwa, samtools, picard, gatk, htslib, perl) are installed
# via bioconda; ANNOVAR is installed separately
setuptools.setup(
    name='lynchseq',
    version=VERSION,
    description='Per-sample screening of sequencing reads for variants in Lynch syndrome genes',
    packages=setuptools.find_packages(exclude=['tests', 'tests.*']),
    scripts=['scripts/lynchseq_pipeline.py'],
    entry_points={'console_scripts': ['lynchseq = lynchseq.pipeline.main:main']},
    python_requires='>=3.7',
    install_requires=['logbook', 'PyYAML', 'toolz'],
    extras_require={'test': ['pytest', 'pytest-mock', 'mock']},
)
