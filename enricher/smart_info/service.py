"""Smart info enrichment workflows.

Two kinds of entry points, each run as one queue job:

- backfills (``handle_queue_*``) walk the asset library and submit one
  per-asset job for every asset that needs work
- per-asset jobs (``handle_classify_image``, ``handle_encode_clip``) call the
  inference service and overwrite the stored result

Config is read at the start of every call and never kept between calls.
"""

import logging
from dataclasses import dataclass

from enricher.database.pagination import JOBS_ASSET_PAGINATION_SIZE, paginate
from enricher.database.repositories import (
    AssetRepository,
    SmartInfoRepository,
    WithoutProperty,
)
from enricher.machine_learning.client import MachineLearningRepository
from enricher.machine_learning.types import ModelType, VisionModelInput
from enricher.queue.dispatcher import JobRepository
from enricher.queue.models import BaseJob, EntityJob, JobItem, JobName
from enricher.smart_info.metrics import (
    ENRICHMENT_JOBS_QUEUED,
    ENRICHMENT_JOBS_SKIPPED,
    ENRICHMENT_RESULTS_SAVED,
    INFERENCE_DURATION,
)
from enricher.smart_info.models import ClipEmbeddingUpdate, TagsUpdate
from enricher.system_config.core import SystemConfigCore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MissingPropertyJob:
    """What a backfill looks for and which job it submits per asset."""

    missing_property: WithoutProperty
    job_name: JobName


OBJECT_TAGGING = MissingPropertyJob(WithoutProperty.OBJECT_TAGS, JobName.CLASSIFY_IMAGE)
CLIP_ENCODING = MissingPropertyJob(WithoutProperty.CLIP_ENCODING, JobName.ENCODE_CLIP)


class SmartInfoService:
    """Decides which assets need smart info and fills it in."""

    def __init__(
        self,
        asset_repository: AssetRepository,
        config_core: SystemConfigCore,
        job_repository: JobRepository,
        smart_info_repository: SmartInfoRepository,
        machine_learning: MachineLearningRepository,
    ) -> None:
        self.asset_repository = asset_repository
        self.config_core = config_core
        self.job_repository = job_repository
        self.smart_info_repository = smart_info_repository
        self.machine_learning = machine_learning

    def handle_queue_object_tagging(self, job: BaseJob) -> bool:
        """Submit a classify job for every asset that needs tags."""
        machine_learning = self.config_core.get_config().machine_learning
        if not machine_learning.enabled or not machine_learning.classification.enabled:
            self._skipped(OBJECT_TAGGING.job_name, "disabled")
            return True

        self._queue_assets(job, OBJECT_TAGGING)
        return True

    def handle_queue_encode_clip(self, job: BaseJob) -> bool:
        """Submit a CLIP encode job for every asset that needs an embedding."""
        machine_learning = self.config_core.get_config().machine_learning
        if not machine_learning.enabled or not machine_learning.clip.enabled:
            self._skipped(CLIP_ENCODING.job_name, "disabled")
            return True

        self._queue_assets(job, CLIP_ENCODING)
        return True

    def _queue_assets(self, job: BaseJob, target: MissingPropertyJob) -> int:
        """Walk the library page by page, submitting one job per asset.

        ``force`` walks every asset; otherwise only assets missing
        ``target.missing_property`` are returned by the repository.

        Returns:
            Number of jobs submitted
        """
        if job.force:
            fetch = self.asset_repository.get_all
        else:

            def fetch(pagination):
                return self.asset_repository.get_without(
                    pagination, target.missing_property
                )

        queued = 0
        for assets in paginate(fetch, take=JOBS_ASSET_PAGINATION_SIZE):
            for asset in assets:
                self.job_repository.submit(
                    JobItem(name=target.job_name, data={"id": asset.id})
                )
                queued += 1

        ENRICHMENT_JOBS_QUEUED.labels(job_name=target.job_name.value).inc(queued)
        logger.info(
            f"Queued {queued} {target.job_name.value} jobs (force={job.force})"
        )
        return queued

    def handle_classify_image(self, job: EntityJob) -> bool:
        """Tag one asset and overwrite its stored tags.

        An empty tag list is saved too: it clears tags left by an older model.

        Returns:
            True when tags were saved or the feature is off, False when the
            asset could not be processed
        """
        machine_learning = self.config_core.get_config().machine_learning
        if not machine_learning.enabled or not machine_learning.classification.enabled:
            self._skipped(JobName.CLASSIFY_IMAGE, "disabled")
            return True

        asset = self._get_renderable_asset(job.id, JobName.CLASSIFY_IMAGE)
        if asset is None:
            return False

        with INFERENCE_DURATION.labels(
            model_type=ModelType.IMAGE_CLASSIFICATION.value
        ).time():
            tags = self.machine_learning.classify_image(
                machine_learning.url,
                VisionModelInput(image_path=asset.resize_path),
                machine_learning.classification,
            )

        self.smart_info_repository.upsert(TagsUpdate(asset_id=asset.id, tags=tags))
        ENRICHMENT_RESULTS_SAVED.labels(field="tags").inc()
        logger.debug(f"Saved {len(tags)} tags for asset {asset.id}")
        return True

    def handle_encode_clip(self, job: EntityJob) -> bool:
        """Embed one asset and overwrite its stored CLIP embedding."""
        machine_learning = self.config_core.get_config().machine_learning
        if not machine_learning.enabled or not machine_learning.clip.enabled:
            self._skipped(JobName.ENCODE_CLIP, "disabled")
            return True

        asset = self._get_renderable_asset(job.id, JobName.ENCODE_CLIP)
        if asset is None:
            return False

        with INFERENCE_DURATION.labels(model_type=ModelType.CLIP.value).time():
            clip_embedding = self.machine_learning.encode_image(
                machine_learning.url,
                VisionModelInput(image_path=asset.resize_path),
                machine_learning.clip,
            )

        self.smart_info_repository.upsert(
            ClipEmbeddingUpdate(asset_id=asset.id, clip_embedding=clip_embedding)
        )
        ENRICHMENT_RESULTS_SAVED.labels(field="clip_embedding").inc()
        return True

    def _get_renderable_asset(self, asset_id: str, job_name: JobName):
        """Look up one asset, or None if it is gone or has no thumbnail yet."""
        assets = self.asset_repository.get_by_ids({asset_id})
        if not assets:
            logger.warning(f"Asset {asset_id} not found, skipping {job_name.value}")
            self._skipped(job_name, "asset_not_found")
            return None

        asset = assets[0]
        if not asset.resize_path:
            logger.debug(f"Asset {asset_id} has no resize path, skipping {job_name.value}")
            self._skipped(job_name, "no_resize_path")
            return None

        return asset

    @staticmethod
    def _skipped(job_name: JobName, reason: str) -> None:
        ENRICHMENT_JOBS_SKIPPED.labels(job_name=job_name.value, reason=reason).inc()
