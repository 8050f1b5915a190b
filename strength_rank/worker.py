"""RQ worker for the PR view refresh queue.

Run with `python -m strength_rank.worker`. Set RQ_BURST=1 to drain the
queue and exit instead of waiting for new jobs.
"""

import logging
import os

from rq import Worker
from rq.registry import FailedJobRegistry

from .tasks import queue, redis_conn

logger = logging.getLogger(__name__)


def requeue_failed_jobs(job_queue=queue, connection=redis_conn) -> int:
    """Puts every failed refresh back on the queue. Returns how many were requeued."""
    registry = FailedJobRegistry(job_queue.name, connection=connection)
    job_ids = registry.get_job_ids()
    for job_id in job_ids:
        logger.info("Requeuing failed current_prs refresh %s", job_id)
        registry.requeue(job_id)
    return len(job_ids)


def run_worker(burst: bool = False) -> None:
    requeued = requeue_failed_jobs()
    if requeued:
        logger.info("Requeued %s failed job(s) before starting", requeued)
    worker = Worker([queue], connection=redis_conn)
    worker.work(with_scheduler=True, burst=burst)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    run_worker(burst=os.getenv("RQ_BURST", "0") == "1")
