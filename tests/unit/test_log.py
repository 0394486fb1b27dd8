import os

from lynchseq import log
from lynchseq.log import logger, logger_cl


def test_local_logging_writes_log_files(tmp_path):
    log_dir = str(tmp_path / 'log')
    handler = log.setup_local_logging({'log_dir': log_dir})
    try:
        logger.info('Processing Paired-End sample: S1')
        logger.debug('fastp finished')
        logger_cl.debug('bwa mem -t 20 ref.fa S1_R1_trimmed.fastq.gz')
    finally:
        handler.pop_application()
        handler.close()
    with open(os.path.join(log_dir, 'lynchseq.log')) as in_handle:
        main_log = in_handle.read()
    with open(os.path.join(log_dir, 'lynchseq-debug.log')) as in_handle:
        debug_log = in_handle.read()
    with open(os.path.join(log_dir, 'lynchseq-commands.log')) as in_handle:
        commands_log = in_handle.read()
    assert 'Processing Paired-End sample: S1' in main_log
    assert 'fastp finished' not in main_log
    assert 'fastp finished' in debug_log
    assert 'bwa mem' in commands_log
    assert 'bwa mem' not in main_log


def test_no_log_dir(tmp_path):
    handler = log.setup_local_logging({'log_dir': None})
    try:
        logger.info('stream only')
    finally:
        handler.pop_application()
        handler.close()
    assert log.get_log_dir({}) == log.DEFAULT_LOG_DIR
