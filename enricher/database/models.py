"""SQLAlchemy models for assets, derived smart info and system config."""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship

from .base import Base


class AssetModel(Base):
    """Media asset. Owned by the asset library, read-only for enrichment."""

    __tablename__ = "assets"

    id = Column(
        Text,
        primary_key=True,
        default=lambda: str(uuid4()),
        nullable=False,
    )
    original_path = Column(Text, nullable=False)
    # Thumbnail used as inference input; NULL until it has been generated
    resize_path = Column(Text, nullable=True)
    is_visible = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    smart_info = relationship(
        "SmartInfoModel", back_populates="asset", uselist=False
    )


class SmartInfoModel(Base):
    """Derived machine learning metadata for one asset."""

    __tablename__ = "smart_info"

    asset_id = Column(
        Text,
        ForeignKey("assets.id", ondelete="CASCADE"),
        primary_key=True,
        nullable=False,
    )
    # none_as_null keeps "never computed" as SQL NULL rather than JSON null
    tags = Column(JSON(none_as_null=True), nullable=True)
    clip_embedding = Column(JSON(none_as_null=True), nullable=True)

    asset = relationship("AssetModel", back_populates="smart_info")


class SystemConfigModel(Base):
    """Single system config override, keyed by dotted config path."""

    __tablename__ = "system_config"

    key = Column(Text, primary_key=True, nullable=False)
    value = Column(JSON, nullable=True)
