"""Prompt asset, asset version and asset translation models."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from promptops.persistence.database import Base
from promptops.persistence.models.marketplace import MarketplaceMixin


class PromptAsset(Base):
    """A named, versioned content unit scoped to a prompt."""

    __tablename__ = "prompt_assets"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    prompt_id = Column(Integer, ForeignKey("prompts.id"), nullable=False, index=True)
    key = Column(String(255), nullable=False)
    name = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    prompt = relationship("Prompt")
    versions = relationship(
        "PromptAssetVersion", back_populates="asset", cascade="all, delete-orphan",
        order_by="PromptAssetVersion.id",
    )

    __table_args__ = (
        UniqueConstraint("project_id", "prompt_id", "key", name="uq_prompt_asset_key"),
    )

    def __repr__(self) -> str:
        return f"<PromptAsset(id={self.id}, prompt_id={self.prompt_id}, key={self.key})>"


class PromptAssetVersion(MarketplaceMixin, Base):
    """Immutable snapshot of an asset's value, keyed by a client-supplied tag."""

    __tablename__ = "prompt_asset_versions"

    id = Column(Integer, primary_key=True, index=True)
    asset_id = Column(Integer, ForeignKey("prompt_assets.id"), nullable=False, index=True)
    version_tag = Column(String(50), nullable=False)
    value = Column(Text, nullable=False)
    change_message = Column(Text, nullable=True)
    language_code = Column(String(20), nullable=False, default="en")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    asset = relationship("PromptAsset", back_populates="versions")
    translations = relationship(
        "AssetTranslation", back_populates="version", cascade="all, delete-orphan",
        order_by="AssetTranslation.language_code", lazy="selectin",
    )

    __table_args__ = (
        UniqueConstraint("asset_id", "version_tag", name="uq_asset_version_tag"),
    )

    def __repr__(self) -> str:
        return f"<PromptAssetVersion(id={self.id}, asset_id={self.asset_id}, version_tag={self.version_tag})>"


class AssetTranslation(Base):
    """Translated value of an asset version."""

    __tablename__ = "asset_translations"

    id = Column(Integer, primary_key=True, index=True)
    version_id = Column(
        Integer, ForeignKey("prompt_asset_versions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    language_code = Column(String(20), nullable=False)
    value = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    version = relationship("PromptAssetVersion", back_populates="translations")

    __table_args__ = (
        UniqueConstraint("version_id", "language_code", name="uq_asset_translation_language"),
    )

    def __repr__(self) -> str:
        return f"<AssetTranslation(id={self.id}, version_id={self.version_id}, language_code={self.language_code})>"
