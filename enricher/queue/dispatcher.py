"""Job submission to RQ."""

import logging
from collections.abc import Callable

from rq import Queue

from enricher.core.config import settings
from enricher.queue.models import JOBS_TO_QUEUE, JobItem, QueueName
from enricher.queue.queues import get_queue

logger = logging.getLogger(__name__)

# Entry point executed by workers for every enrichment job
PROCESS_JOB_FUNC = "enricher.queue.processor.process_job"


class JobRepository:
    """Submits named jobs to the queue that serves them.

    Submission is fire-and-forget: delivery and retries belong to RQ.
    """

    def __init__(
        self, queue_factory: Callable[[QueueName], Queue] = get_queue
    ) -> None:
        """Initialize the repository.

        Args:
            queue_factory: Returns the RQ queue for a queue name
        """
        self.queue_factory = queue_factory

    def submit(self, item: JobItem) -> None:
        """Enqueue a job.

        Args:
            item: Job name and payload

        Raises:
            Exception: If enqueueing fails
        """
        queue = self.queue_factory(JOBS_TO_QUEUE[item.name])
        try:
            job = queue.enqueue_call(
                func=PROCESS_JOB_FUNC,
                args=(item.name.value, item.data),
                timeout=settings.JOB_TIMEOUT,
                result_ttl=settings.REDIS_TTL_SECONDS,
                failure_ttl=settings.REDIS_TTL_SECONDS,
                meta={"source": "enricher", "job_name": item.name.value},
            )
        except Exception as e:
            logger.error(f"Failed to enqueue {item.name.value} job: {e}")
            raise

        logger.debug(f"Enqueued {item.name.value} job {job.id} on {queue.name}")
