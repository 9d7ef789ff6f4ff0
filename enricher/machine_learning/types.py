"""Type definitions for the machine learning service."""

from dataclasses import dataclass
from enum import Enum


class ModelType(str, Enum):
    """Model families served by the inference service."""

    IMAGE_CLASSIFICATION = "image-classification"
    CLIP = "clip"


class CLIPMode(str, Enum):
    VISION = "vision"
    TEXT = "text"


@dataclass(frozen=True)
class VisionModelInput:
    """Image input, referenced by a path readable by the worker."""

    image_path: str


@dataclass(frozen=True)
class TextModelInput:
    text: str


ModelInput = VisionModelInput | TextModelInput
