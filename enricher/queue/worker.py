"""Worker for enrichment queues."""

import logging
from typing import Any, Optional

import redis
from rq import Queue, Worker

from enricher.core.config import settings
from enricher.queue.models import QueueName
from enricher.queue.queues import get_queue, get_redis_connection

logger = logging.getLogger(__name__)


def get_worker_config() -> dict[str, Any]:
    """Get worker configuration from settings."""
    return {
        "queues": [name.value for name in QueueName],
        "max_jobs": settings.WORKER_MAX_JOBS,
        "log_level": settings.LOG_LEVEL,
    }


class EnrichmentWorker:
    """RQ worker listening on the enrichment queues.

    RQ owns signal handling, job timeouts and failure bookkeeping; this class
    only resolves the queues and the Redis connection from settings.
    """

    def __init__(self, config: Optional[dict[str, Any]] = None) -> None:
        self.config = {**get_worker_config(), **(config or {})}
        self.queues: list[Queue] = []
        self.redis_conn: Optional[redis.Redis] = None
        self.rq_worker: Optional[Worker] = None

    def setup(self) -> None:
        """Resolve queues and connect to Redis.

        Raises:
            RuntimeError: If a queue or the Redis connection is unavailable
        """
        try:
            self.queues = [get_queue(QueueName(name)) for name in self.config["queues"]]
            self.redis_conn = get_redis_connection()
        except Exception as e:
            logger.error(f"Worker setup failed: {e}")
            raise RuntimeError(f"Worker setup failed: {e}") from e

        self.rq_worker = Worker(
            queues=self.queues,
            connection=self.redis_conn,
            log_job_description=self.config["log_level"].upper() == "DEBUG",
        )
        logger.info(f"Listening on {', '.join(q.name for q in self.queues)}")

    def work(self, burst: bool = False, max_jobs: Optional[int] = None) -> None:
        """Process jobs until stopped, or until the queues drain in burst mode.

        Args:
            burst: Exit once every queue is empty
            max_jobs: Exit after this many jobs, defaults to ``WORKER_MAX_JOBS``
        """
        if self.rq_worker is None:
            self.setup()

        try:
            self.rq_worker.work(
                burst=burst,
                max_jobs=max_jobs or self.config["max_jobs"],
            )
        finally:
            if self.redis_conn is not None:
                self.redis_conn.close()
            logger.info("Enrichment worker stopped")
