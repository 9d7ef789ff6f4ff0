"""Tests for asset, smart info and system config repositories."""

from datetime import datetime

import pytest
from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from enricher.database.models import AssetModel, SmartInfoModel, SystemConfigModel
from enricher.database.pagination import PaginationOptions
from enricher.database.repositories import (
    AssetRepository,
    SmartInfoRepository,
    SystemConfigEntry,
    SystemConfigRepository,
    WithoutProperty,
)
from enricher.smart_info.models import ClipEmbeddingUpdate, TagsUpdate

CREATED_AT = datetime(2024, 1, 1, 12, 0, 0)


def add_asset(
    session: Session,
    id: str,
    resize_path: str | None = "thumbs/x.jpg",
    is_visible: bool = True,
    tags: list[str] | None = None,
    clip_embedding: list[float] | None = None,
) -> AssetModel:
    asset = AssetModel(
        id=id,
        original_path=f"upload/{id}.jpg",
        resize_path=resize_path,
        is_visible=is_visible,
        created_at=CREATED_AT,
        updated_at=CREATED_AT,
    )
    session.add(asset)
    if tags is not None or clip_embedding is not None:
        session.add(
            SmartInfoModel(asset_id=id, tags=tags, clip_embedding=clip_embedding)
        )
    session.commit()
    return asset


@pytest.fixture
def other_session(db_engine: Engine):
    """Second session on the same database, as used by a concurrent job."""
    session = sessionmaker(bind=db_engine, expire_on_commit=False)()
    try:
        yield session
    finally:
        session.close()


class TestAssetRepository:
    """Test asset enumeration and lookup."""

    def test_get_by_ids(self, db_session: Session):
        add_asset(db_session, "a1")
        add_asset(db_session, "a2")
        repo = AssetRepository(db_session)

        assets = repo.get_by_ids({"a2", "missing"})

        assert [asset.id for asset in assets] == ["a2"]

    def test_get_by_ids_with_no_ids(self, db_session: Session):
        assert AssetRepository(db_session).get_by_ids([]) == []

    def test_get_all_paginates(self, db_session: Session):
        for i in range(5):
            add_asset(db_session, f"a{i}")
        repo = AssetRepository(db_session)

        first = repo.get_all(PaginationOptions(skip=0, take=2))
        last = repo.get_all(PaginationOptions(skip=4, take=2))

        assert [asset.id for asset in first.items] == ["a0", "a1"]
        assert first.has_next_page is True
        assert [asset.id for asset in last.items] == ["a4"]
        assert last.has_next_page is False

    def test_get_all_exact_page_has_no_next_page(self, db_session: Session):
        add_asset(db_session, "a0")
        add_asset(db_session, "a1")

        page = AssetRepository(db_session).get_all(PaginationOptions(skip=0, take=2))

        assert len(page.items) == 2
        assert page.has_next_page is False

    def test_get_all_includes_assets_with_data(self, db_session: Session):
        add_asset(db_session, "tagged", tags=["dog"], clip_embedding=[0.1])
        add_asset(db_session, "no-thumb", resize_path=None)

        page = AssetRepository(db_session).get_all(PaginationOptions())

        assert {asset.id for asset in page.items} == {"tagged", "no-thumb"}

    def test_get_without_object_tags(self, db_session: Session):
        add_asset(db_session, "no-info")
        add_asset(db_session, "tagged", tags=["dog"])
        add_asset(db_session, "empty-tags", tags=[])
        add_asset(db_session, "clip-only", clip_embedding=[0.1, 0.2])
        add_asset(db_session, "no-thumb", resize_path=None)
        add_asset(db_session, "hidden", is_visible=False)

        page = AssetRepository(db_session).get_without(
            PaginationOptions(), WithoutProperty.OBJECT_TAGS
        )

        assert [asset.id for asset in page.items] == ["clip-only", "no-info"]
        assert page.has_next_page is False

    def test_get_without_clip_encoding(self, db_session: Session):
        add_asset(db_session, "no-info")
        add_asset(db_session, "tagged", tags=["dog"])
        add_asset(db_session, "encoded", clip_embedding=[0.1, 0.2])

        page = AssetRepository(db_session).get_without(
            PaginationOptions(), WithoutProperty.CLIP_ENCODING
        )

        assert [asset.id for asset in page.items] == ["no-info", "tagged"]

    def test_get_without_paginates(self, db_session: Session):
        for i in range(3):
            add_asset(db_session, f"a{i}")
        repo = AssetRepository(db_session)

        page = repo.get_without(
            PaginationOptions(skip=1, take=1), WithoutProperty.OBJECT_TAGS
        )

        assert [asset.id for asset in page.items] == ["a1"]
        assert page.has_next_page is True


class TestSmartInfoRepository:
    """Test smart info upserts."""

    def test_upsert_creates_record(self, db_session: Session):
        add_asset(db_session, "a1")
        repo = SmartInfoRepository(db_session)

        repo.upsert(TagsUpdate(asset_id="a1", tags=["cat", "sofa"]))

        record = repo.get_by_asset_id("a1")
        assert record is not None
        assert record.tags == ["cat", "sofa"]
        assert record.clip_embedding is None

    def test_upsert_replaces_tags(self, db_session: Session):
        add_asset(db_session, "a1", tags=["old", "stale"])
        repo = SmartInfoRepository(db_session)

        repo.upsert(TagsUpdate(asset_id="a1", tags=["new"]))

        assert repo.get_by_asset_id("a1").tags == ["new"]

    def test_empty_tags_clear_old_tags(self, db_session: Session):
        add_asset(db_session, "a1", tags=["old"])
        repo = SmartInfoRepository(db_session)

        repo.upsert(TagsUpdate(asset_id="a1", tags=[]))

        assert repo.get_by_asset_id("a1").tags == []
        # Cleared tags still count as computed
        page = AssetRepository(db_session).get_without(
            PaginationOptions(), WithoutProperty.OBJECT_TAGS
        )
        assert page.items == []

    def test_embedding_update_keeps_tags(self, db_session: Session):
        add_asset(db_session, "a1", tags=["dog"])
        repo = SmartInfoRepository(db_session)

        repo.upsert(ClipEmbeddingUpdate(asset_id="a1", clip_embedding=[0.01, 0.02]))

        record = repo.get_by_asset_id("a1")
        assert record.tags == ["dog"]
        assert record.clip_embedding == [0.01, 0.02]

    def test_upsert_rejects_unknown_update(self, db_session: Session):
        with pytest.raises(TypeError):
            SmartInfoRepository(db_session).upsert({"assetId": "a1"})  # type: ignore[arg-type]

    def test_first_writes_from_two_sessions(
        self, db_session: Session, other_session: Session
    ):
        add_asset(db_session, "a1")
        tags_repo = SmartInfoRepository(db_session)
        clip_repo = SmartInfoRepository(other_session)

        # Both jobs look before either writes
        assert tags_repo.get_by_asset_id("a1") is None
        assert clip_repo.get_by_asset_id("a1") is None

        clip_repo.upsert(ClipEmbeddingUpdate(asset_id="a1", clip_embedding=[0.1]))
        tags_repo.upsert(TagsUpdate(asset_id="a1", tags=["cat"]))

        record = other_session.get(SmartInfoModel, "a1", populate_existing=True)
        assert record.tags == ["cat"]
        assert record.clip_embedding == [0.1]

    def test_last_write_wins_across_sessions(
        self, db_session: Session, other_session: Session
    ):
        add_asset(db_session, "a1")

        SmartInfoRepository(db_session).upsert(TagsUpdate(asset_id="a1", tags=["cat"]))
        SmartInfoRepository(other_session).upsert(
            TagsUpdate(asset_id="a1", tags=["dog"])
        )

        assert SmartInfoRepository(db_session).get_by_asset_id("a1").tags == ["dog"]


class TestSystemConfigRepository:
    """Test system config loading."""

    def test_load_returns_all_entries(self, db_session: Session):
        db_session.add_all(
            [
                SystemConfigModel(key="machineLearning.enabled", value=False),
                SystemConfigModel(key="machineLearning.url", value="http://ml:3003"),
            ]
        )
        db_session.commit()

        entries = SystemConfigRepository(db_session).load()

        assert entries == [
            SystemConfigEntry("machineLearning.enabled", False),
            SystemConfigEntry("machineLearning.url", "http://ml:3003"),
        ]

    def test_load_empty(self, db_session: Session):
        assert SystemConfigRepository(db_session).load() == []
