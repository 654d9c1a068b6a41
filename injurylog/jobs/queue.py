"""Redis Queue setup and helpers."""
from functools import lru_cache
from typing import Optional, Any, Dict

import redis
from rq import Queue
from rq.job import Job

from injurylog.config import settings
from injurylog.app_logging import get_logger

logger = get_logger(__name__)

QUEUE_NAMES = ('high', 'default', 'low')


@lru_cache()
def get_redis() -> redis.Redis:
    """Redis connection, created on first use."""
    if not settings.REDIS_URL:
        raise RuntimeError("REDIS_URL is not configured")
    return redis.from_url(settings.REDIS_URL)


def get_queue(queue_name: str = 'default') -> Queue:
    if queue_name not in QUEUE_NAMES:
        queue_name = 'default'
    return Queue(queue_name, connection=get_redis())


def enqueue_job(
    func,
    *args,
    queue_name: str = 'default',
    job_timeout: int = 300,
    **kwargs
) -> Job:
    """Enqueue a job to the specified queue."""
    queue = get_queue(queue_name)

    job = queue.enqueue(
        func,
        *args,
        job_timeout=job_timeout,
        **kwargs
    )

    logger.info(f"Enqueued job {job.id} to {queue.name} queue")
    return job


def get_job_status(job_id: str) -> Optional[Dict[str, Any]]:
    """Get the status of a job."""
    try:
        job = Job.fetch(job_id, connection=get_redis())
    except Exception as e:
        logger.error(f"Error fetching job {job_id}: {e}")
        return None
    return {
        'id': job.id,
        'status': job.get_status(),
        'result': job.return_value(),
        'error': job.exc_info,
        'created_at': job.created_at,
        'started_at': job.started_at,
        'ended_at': job.ended_at
    }
