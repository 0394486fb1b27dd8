"""Run tasks in parallel on a single machine using a bounded pool of workers.

Work items here shell out to long running external programs, so threads
are sufficient: each worker spends its time blocked on a subprocess.
"""
from concurrent import futures

from lynchseq.log import logger


def run_multicore(fn, items, cores=1, cancel=None):
    """Apply fn to each item, returning results in input order.

    With a single core this runs sequentially in the calling thread.
    Setting `cancel` stops new items from starting; items already
    running are expected to check it themselves.
    """
    items = list(items)
    if len(items) == 0:
        return []
    cores = max(1, min(int(cores), len(items)))
    if cores == 1:
        return [fn(x) for x in items]
    logger.info("Running %s items on %s workers" % (len(items), cores))
    with futures.ThreadPoolExecutor(max_workers=cores) as pool:
        jobs = [pool.submit(fn, x) for x in items]
        try:
            return [job.result() for job in jobs]
        except BaseException:
            if cancel is not None:
                cancel.set()
            for job in jobs:
                job.cancel()
            raise
