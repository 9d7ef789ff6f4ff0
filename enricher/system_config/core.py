"""System config snapshot: application defaults overlaid with stored overrides."""

import copy
import logging
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from enricher.core.config import Settings, settings as default_settings
from enricher.database.repositories import SystemConfigRepository

logger = logging.getLogger(__name__)


class SystemConfigKey(str, Enum):
    """Dotted keys accepted in the system config table."""

    MACHINE_LEARNING_ENABLED = "machineLearning.enabled"
    MACHINE_LEARNING_URL = "machineLearning.url"
    MACHINE_LEARNING_CLASSIFICATION_ENABLED = "machineLearning.classification.enabled"
    MACHINE_LEARNING_CLASSIFICATION_MODEL_NAME = (
        "machineLearning.classification.modelName"
    )
    MACHINE_LEARNING_CLASSIFICATION_MIN_SCORE = "machineLearning.classification.minScore"
    MACHINE_LEARNING_CLIP_ENABLED = "machineLearning.clip.enabled"
    MACHINE_LEARNING_CLIP_MODEL_NAME = "machineLearning.clip.modelName"


class _ConfigModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )


class ClassificationConfig(_ConfigModel):
    """Image classification model parameters."""

    enabled: bool = True
    model_name: str = "microsoft/resnet-50"
    min_score: float = Field(default=0.9, ge=0, le=1)


class CLIPConfig(_ConfigModel):
    """CLIP embedding model parameters."""

    enabled: bool = True
    model_name: str = "ViT-B-32::openai"


class MachineLearningConfig(_ConfigModel):
    enabled: bool = True
    url: str = "http://machine-learning:3003"
    classification: ClassificationConfig = ClassificationConfig()
    clip: CLIPConfig = CLIPConfig()


class SystemConfig(_ConfigModel):
    """Immutable config snapshot for one workflow invocation."""

    machine_learning: MachineLearningConfig = MachineLearningConfig()


def get_default_config(settings: Settings | None = None) -> dict[str, Any]:
    """Build the default config tree from application settings.

    Args:
        settings: Settings to read, defaults to the module settings

    Returns:
        Nested dictionary keyed like the dotted config keys
    """
    settings = settings or default_settings
    return {
        "machineLearning": {
            "enabled": settings.MACHINE_LEARNING_ENABLED,
            "url": settings.MACHINE_LEARNING_URL,
            "classification": {
                "enabled": settings.CLASSIFICATION_ENABLED,
                "modelName": settings.CLASSIFICATION_MODEL_NAME,
                "minScore": settings.CLASSIFICATION_MIN_SCORE,
            },
            "clip": {
                "enabled": settings.CLIP_ENABLED,
                "modelName": settings.CLIP_MODEL_NAME,
            },
        }
    }


def _set_path(tree: dict[str, Any], key: str, value: Any) -> None:
    *parents, leaf = key.split(".")
    node = tree
    for part in parents:
        node = node.setdefault(part, {})
    node[leaf] = value


class SystemConfigCore:
    """Reads the effective system config.

    Every call to :meth:`get_config` loads the overrides again, so a toggle
    flipped between two jobs is seen by the second one.
    """

    def __init__(
        self,
        repository: SystemConfigRepository,
        settings: Settings | None = None,
    ) -> None:
        self.repository = repository
        self.settings = settings or default_settings

    def get_config(self) -> SystemConfig:
        """Load overrides and merge them onto the defaults.

        Returns:
            Validated config snapshot

        Raises:
            pydantic.ValidationError: If an override has an invalid value
        """
        config = copy.deepcopy(get_default_config(self.settings))
        known_keys = {key.value for key in SystemConfigKey}

        for entry in self.repository.load():
            if entry.key not in known_keys:
                logger.warning(f"Ignoring unknown system config key: {entry.key}")
                continue
            _set_path(config, entry.key, entry.value)

        return SystemConfig.model_validate(config)
