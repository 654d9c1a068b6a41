"""RQ Worker process."""
from rq import Worker

from injurylog.jobs.queue import QUEUE_NAMES, get_queue, get_redis
from injurylog.app_logging import setup_logging, get_logger

setup_logging()
logger = get_logger(__name__)


def run_worker():
    """Run the RQ worker."""
    queues = [get_queue(name) for name in QUEUE_NAMES]

    worker = Worker(queues, connection=get_redis())
    logger.info(f"Starting worker for queues: {[q.name for q in queues]}")
    worker.work()


if __name__ == '__main__':
    run_worker()
