"""HTTP client for the machine learning inference service."""

import json
import logging
from pathlib import Path
from typing import Any

import httpx

from enricher.core.config import settings
from enricher.machine_learning.types import (
    CLIPMode,
    ModelInput,
    ModelType,
    TextModelInput,
    VisionModelInput,
)
from enricher.system_config.core import ClassificationConfig, CLIPConfig

logger = logging.getLogger(__name__)


class MachineLearningRepository:
    """Calls the inference service's ``/predict`` endpoint.

    The service URL is passed on every call because it is part of the system
    config and may change between jobs. Request failures are raised as-is.
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the repository.

        Args:
            client: Optional preconfigured HTTP client
            timeout: Request timeout in seconds when creating a client
        """
        self.client = client or httpx.Client(
            timeout=timeout if timeout is not None else settings.MACHINE_LEARNING_TIMEOUT
        )

    def classify_image(
        self, url: str, input: VisionModelInput, config: ClassificationConfig
    ) -> list[str]:
        """Tag an image with object labels scoring at least ``config.min_score``."""
        return self._predict(
            url,
            input,
            model_name=config.model_name,
            model_type=ModelType.IMAGE_CLASSIFICATION,
            options={"minScore": config.min_score},
        )

    def encode_image(
        self, url: str, input: VisionModelInput, config: CLIPConfig
    ) -> list[float]:
        """Embed an image into CLIP space."""
        return self._predict(
            url,
            input,
            model_name=config.model_name,
            model_type=ModelType.CLIP,
            options={"mode": CLIPMode.VISION.value},
        )

    def encode_text(
        self, url: str, input: TextModelInput, config: CLIPConfig
    ) -> list[float]:
        """Embed a text query into CLIP space."""
        return self._predict(
            url,
            input,
            model_name=config.model_name,
            model_type=ModelType.CLIP,
            options={"mode": CLIPMode.TEXT.value},
        )

    def _predict(
        self,
        url: str,
        input: ModelInput,
        model_name: str,
        model_type: ModelType,
        options: dict[str, Any],
    ) -> Any:
        data = {
            "modelName": model_name,
            "modelType": model_type.value,
            "options": json.dumps(options),
        }
        files = None
        if isinstance(input, VisionModelInput):
            image = Path(input.image_path).read_bytes()
            files = {"image": (Path(input.image_path).name, image)}
        else:
            data["text"] = input.text

        endpoint = f"{url.rstrip('/')}/predict"
        logger.debug(f"Requesting {model_type.value} prediction from {endpoint}")

        response = self.client.post(endpoint, data=data, files=files)
        response.raise_for_status()
        return response.json()

    def close(self) -> None:
        self.client.close()


# Shared client, created on first use by a worker process
_machine_learning_repository: MachineLearningRepository | None = None


def get_machine_learning_repository() -> MachineLearningRepository:
    """Get the process-wide machine learning repository."""
    global _machine_learning_repository

    if _machine_learning_repository is None:
        _machine_learning_repository = MachineLearningRepository()
        logger.debug("Created machine learning HTTP client")

    return _machine_learning_repository
