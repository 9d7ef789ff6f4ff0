"""Smart info value types."""

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class TagsUpdate:
    """Replace the object tags of an asset."""

    asset_id: str
    tags: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ClipEmbeddingUpdate:
    """Replace the CLIP image embedding of an asset."""

    asset_id: str
    clip_embedding: list[float] = field(default_factory=list)


# Exactly one derived field per write
SmartInfoUpdate = Union[TagsUpdate, ClipEmbeddingUpdate]
