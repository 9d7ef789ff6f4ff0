"""Client for the external machine learning inference service."""

from enricher.machine_learning.client import (
    MachineLearningRepository,
    get_machine_learning_repository,
)
from enricher.machine_learning.types import (
    CLIPMode,
    ModelType,
    TextModelInput,
    VisionModelInput,
)

__all__ = [
    "CLIPMode",
    "MachineLearningRepository",
    "ModelType",
    "TextModelInput",
    "VisionModelInput",
    "get_machine_learning_repository",
]
