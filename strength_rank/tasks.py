import os
import logging
import psycopg2
from redis import Redis
from rq import Queue, Retry, get_current_job

from .db import get_db_connection, release_db_connection

logger = logging.getLogger(__name__)

# Redis connection for RQ
redis_url = os.getenv("REDIS_URL", "redis://redis:6379/0")
redis_conn = Redis.from_url(redis_url)

# Default queue used by the API and worker
queue = Queue("strength_rank", connection=redis_conn)

DEFAULT_RETRY = Retry(max=3, interval=[10, 30, 60])


def enqueue_current_prs_refresh():
    """Enqueue a refresh of the current_prs view with retry strategy."""
    return queue.enqueue(
        refresh_current_prs,
        retry=DEFAULT_RETRY,
    )


def refresh_current_prs():
    """Rebuild the current_prs materialized view (best-scoring set per user and lift)."""
    job = get_current_job()
    if job and job.meta.get("retry_count", 0) > 0:
        logger.info(
            "Retry attempt %s for job %s", job.meta["retry_count"], job.id
        )

    conn = None
    try:
        conn = get_db_connection()
        with conn.cursor() as cur:
            cur.execute("REFRESH MATERIALIZED VIEW CONCURRENTLY current_prs;")
        conn.commit()
        logger.info("Refreshed current_prs materialized view")
    except psycopg2.Error as e:
        logger.error("Database error refreshing current_prs: %s", e)
        if conn:
            conn.rollback()
        raise
    finally:
        if conn:
            release_db_connection(conn)
