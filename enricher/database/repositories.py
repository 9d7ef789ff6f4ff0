"""Repository pattern for database operations."""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session
from sqlalchemy.orm.util import identity_key

from enricher.smart_info.models import (
    ClipEmbeddingUpdate,
    SmartInfoUpdate,
    TagsUpdate,
)

from .models import AssetModel, SmartInfoModel, SystemConfigModel
from .pagination import Paginated, PaginationOptions, paginate_rows

logger = logging.getLogger(__name__)

# Dialects with INSERT ... ON CONFLICT support
UPSERT_INSERTS = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}


class WithoutProperty(str, Enum):
    """Derived properties an asset can be missing."""

    OBJECT_TAGS = "object-tags"
    CLIP_ENCODING = "clip-embedding"


class AssetRepository:
    """Read access to the asset library."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_ids(self, ids: Iterable[str]) -> Sequence[AssetModel]:
        """Get assets by ID. Unknown IDs are silently absent."""
        id_list = list(ids)
        if not id_list:
            return []
        query = select(AssetModel).filter(AssetModel.id.in_(id_list))
        result = self.session.execute(query)
        return result.scalars().all()

    def get_all(self, pagination: PaginationOptions) -> Paginated[AssetModel]:
        """Get a page of every asset."""
        query = (
            select(AssetModel)
            .order_by(AssetModel.created_at, AssetModel.id)
            .offset(pagination.skip)
            .limit(pagination.take + 1)
        )
        result = self.session.execute(query)
        return paginate_rows(result.scalars().all(), pagination)

    def get_without(
        self, pagination: PaginationOptions, property: WithoutProperty
    ) -> Paginated[AssetModel]:
        """Get a page of visible, thumbnailed assets missing a derived property."""
        if property == WithoutProperty.OBJECT_TAGS:
            missing = SmartInfoModel.tags.is_(None)
        elif property == WithoutProperty.CLIP_ENCODING:
            missing = SmartInfoModel.clip_embedding.is_(None)
        else:
            raise ValueError(f"Invalid getWithout property: {property}")

        query = (
            select(AssetModel)
            .outerjoin(SmartInfoModel, SmartInfoModel.asset_id == AssetModel.id)
            .filter(
                AssetModel.resize_path.is_not(None),
                AssetModel.is_visible.is_(True),
                missing,
            )
            .order_by(AssetModel.created_at, AssetModel.id)
            .offset(pagination.skip)
            .limit(pagination.take + 1)
        )
        result = self.session.execute(query)
        return paginate_rows(result.scalars().all(), pagination)


class SmartInfoRepository:
    """Write access to derived smart info."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_asset_id(self, asset_id: str) -> SmartInfoModel | None:
        return self.session.get(SmartInfoModel, asset_id)

    def upsert(self, update: SmartInfoUpdate) -> None:
        """Overwrite one derived field of an asset, creating the row if needed.

        Runs as a single ``INSERT ... ON CONFLICT DO UPDATE`` so concurrent
        jobs for the same asset never collide on the primary key. The targeted
        field is replaced wholesale; the other field is left untouched.

        Raises:
            TypeError: If ``update`` is not a known update variant
            RuntimeError: If the session is bound to an unsupported database
        """
        if isinstance(update, TagsUpdate):
            values = {"tags": list(update.tags)}
        elif isinstance(update, ClipEmbeddingUpdate):
            values = {"clip_embedding": list(update.clip_embedding)}
        else:
            raise TypeError(f"Unsupported smart info update: {type(update).__name__}")

        dialect = self.session.get_bind().dialect.name
        insert = UPSERT_INSERTS.get(dialect)
        if insert is None:
            raise RuntimeError(f"Smart info upsert not supported on {dialect}")

        stmt = insert(SmartInfoModel).values(asset_id=update.asset_id, **values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[SmartInfoModel.asset_id],
            set_={key: stmt.excluded[key] for key in values},
        )
        self.session.execute(stmt)
        self.session.commit()

        # The statement bypasses the identity map; drop any stale copy
        cached = self.session.identity_map.get(
            identity_key(SmartInfoModel, update.asset_id)
        )
        if cached is not None:
            self.session.expire(cached)

        logger.debug(f"Saved {type(update).__name__} for asset {update.asset_id}")


@dataclass(frozen=True)
class SystemConfigEntry:
    """Stored override for one system config key."""

    key: str
    value: Any


class SystemConfigRepository:
    """Read access to system config overrides."""

    def __init__(self, session: Session):
        self.session = session

    def load(self) -> list[SystemConfigEntry]:
        """Load every stored override. Never cached."""
        result = self.session.execute(
            select(SystemConfigModel).order_by(SystemConfigModel.key)
        )
        return [
            SystemConfigEntry(key=row.key, value=row.value)
            for row in result.scalars().all()
        ]
