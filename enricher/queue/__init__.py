"""Queue system for enrichment jobs."""

from enricher.queue.dispatcher import JobRepository
from enricher.queue.models import (
    JOBS_TO_QUEUE,
    BaseJob,
    EntityJob,
    JobItem,
    JobName,
    QueueName,
)
from enricher.queue.queues import get_queue

__all__ = [
    "JOBS_TO_QUEUE",
    "BaseJob",
    "EntityJob",
    "JobItem",
    "JobName",
    "JobRepository",
    "QueueName",
    "get_queue",
]
