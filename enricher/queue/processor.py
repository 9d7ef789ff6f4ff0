"""Job processor: the function RQ workers execute for every enrichment job."""

from collections.abc import Callable
from typing import Any

from rq import get_current_job
from sqlalchemy.orm import Session
from structlog.contextvars import bind_contextvars, unbind_contextvars

from enricher.core.db import get_db_session
from enricher.core.logging import get_logger
from enricher.database.repositories import (
    AssetRepository,
    SmartInfoRepository,
    SystemConfigRepository,
)
from enricher.machine_learning.client import get_machine_learning_repository
from enricher.queue.dispatcher import JobRepository
from enricher.queue.models import BaseJob, EntityJob, JobName
from enricher.smart_info.service import SmartInfoService
from enricher.system_config.core import SystemConfigCore

logger = get_logger()

JobHandler = Callable[[dict[str, Any]], bool]


def build_smart_info_service(session: Session) -> SmartInfoService:
    """Wire a service to repositories bound to ``session``.

    Args:
        session: Database session owned by the current job

    Returns:
        Ready to use service
    """
    return SmartInfoService(
        asset_repository=AssetRepository(session),
        config_core=SystemConfigCore(SystemConfigRepository(session)),
        job_repository=JobRepository(),
        smart_info_repository=SmartInfoRepository(session),
        machine_learning=get_machine_learning_repository(),
    )


def get_job_handlers(service: SmartInfoService) -> dict[JobName, JobHandler]:
    """Map each job name to the service call that handles its payload."""
    return {
        JobName.QUEUE_OBJECT_TAGGING: lambda data: service.handle_queue_object_tagging(
            BaseJob.model_validate(data)
        ),
        JobName.CLASSIFY_IMAGE: lambda data: service.handle_classify_image(
            EntityJob.model_validate(data)
        ),
        JobName.QUEUE_ENCODE_CLIP: lambda data: service.handle_queue_encode_clip(
            BaseJob.model_validate(data)
        ),
        JobName.ENCODE_CLIP: lambda data: service.handle_encode_clip(
            EntityJob.model_validate(data)
        ),
    }


def process_job(job_name: str, data: dict[str, Any]) -> bool:
    """Process one enrichment job.

    This is the entry point for RQ workers. Every call opens its own database
    session; errors propagate so RQ records the job as failed.

    Args:
        job_name: Value of a :class:`JobName`
        data: Job payload

    Returns:
        Handler result

    Raises:
        ValueError: If ``job_name`` is unknown
        pydantic.ValidationError: If ``data`` does not match the job payload
    """
    try:
        name = JobName(job_name)
    except ValueError:
        raise ValueError(f"Unknown job name: {job_name}") from None

    rq_job = get_current_job()
    bind_contextvars(job_name=name.value, job_id=rq_job.id if rq_job else None)
    try:
        logger.info("Processing job")
        with get_db_session() as session:
            service = build_smart_info_service(session)
            handler = get_job_handlers(service)[name]
            result = handler(data)
        logger.info("Finished job", result=result)
        return result
    finally:
        unbind_contextvars("job_name", "job_id")
