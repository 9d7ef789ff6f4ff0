"""Job and queue models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class QueueName(str, Enum):
    """RQ queues served by enrichment workers."""

    OBJECT_TAGGING = "object-tagging"
    CLIP_ENCODING = "clip-encoding"


class JobName(str, Enum):
    """Named commands understood by the job processor."""

    # backfill triggers
    QUEUE_OBJECT_TAGGING = "queue-object-tagging"
    QUEUE_ENCODE_CLIP = "queue-clip-encode"

    # per-asset work
    CLASSIFY_IMAGE = "classify-image"
    ENCODE_CLIP = "clip-encode"


JOBS_TO_QUEUE: dict[JobName, QueueName] = {
    JobName.QUEUE_OBJECT_TAGGING: QueueName.OBJECT_TAGGING,
    JobName.CLASSIFY_IMAGE: QueueName.OBJECT_TAGGING,
    JobName.QUEUE_ENCODE_CLIP: QueueName.CLIP_ENCODING,
    JobName.ENCODE_CLIP: QueueName.CLIP_ENCODING,
}


class BaseJob(BaseModel):
    """Payload of a backfill trigger."""

    force: bool = False


class EntityJob(BaseModel):
    """Payload of a per-asset job."""

    id: str


class JobItem(BaseModel):
    """A job as handed to the dispatcher."""

    name: JobName
    data: dict[str, Any] = Field(default_factory=dict)
