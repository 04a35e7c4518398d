"""Prompt asset and asset version repositories."""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from promptops.persistence.models.asset import AssetTranslation, PromptAsset, PromptAssetVersion
from promptops.persistence.repositories.base import BaseRepository


class PromptAssetRepository(BaseRepository[PromptAsset]):
    """Repository for PromptAsset entities, scoped to a project."""

    scope_field = "project_id"

    def __init__(self, session: AsyncSession):
        """Initialize prompt asset repository."""
        super().__init__(PromptAsset, session)

    async def get_by_key(self, project_id: int, prompt_id: int, key: str) -> PromptAsset | None:
        """Resolve an asset by its (project, prompt, key) identity."""
        stmt = select(PromptAsset).where(
            PromptAsset.project_id == project_id,
            PromptAsset.prompt_id == prompt_id,
            PromptAsset.key == key,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()


class AssetVersionRepository(BaseRepository[PromptAssetVersion]):
    """Repository for PromptAssetVersion entities."""

    def __init__(self, session: AsyncSession):
        """Initialize asset version repository."""
        super().__init__(PromptAssetVersion, session)

    async def get_by_tag(self, asset_id: int, version_tag: str) -> PromptAssetVersion | None:
        """Get a version by its unique (asset, tag) key."""
        stmt = select(PromptAssetVersion).where(
            PromptAssetVersion.asset_id == asset_id,
            PromptAssetVersion.version_tag == version_tag,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_in_project(self, project_id: int, version_id: int) -> PromptAssetVersion | None:
        """Get a version by id, only if its asset belongs to the project."""
        stmt = (
            select(PromptAssetVersion)
            .join(PromptAsset, PromptAsset.id == PromptAssetVersion.asset_id)
            .where(
                PromptAssetVersion.id == version_id,
                PromptAsset.project_id == project_id,
            )
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_tag_with_translation(
        self, asset_id: int, version_tag: str, language_code: str
    ) -> PromptAssetVersion | None:
        """Get a version by tag, only if it has a translation in the given language."""
        stmt = (
            select(PromptAssetVersion)
            .join(AssetTranslation, AssetTranslation.version_id == PromptAssetVersion.id)
            .where(
                PromptAssetVersion.asset_id == asset_id,
                PromptAssetVersion.version_tag == version_tag,
                AssetTranslation.language_code == language_code,
            )
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_asset(
        self, asset_id: int, language_code: str | None = None
    ) -> list[PromptAssetVersion]:
        """List an asset's versions, newest first, optionally by the version's own language."""
        stmt = select(PromptAssetVersion).where(PromptAssetVersion.asset_id == asset_id)
        if language_code:
            stmt = stmt.where(PromptAssetVersion.language_code == language_code)
        stmt = stmt.order_by(PromptAssetVersion.created_at.desc(), PromptAssetVersion.id.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete_by_id(self, version_id: int) -> int:
        """Delete a version and its translations, then commit.

        Returns the number of version rows removed.
        """
        await self.session.execute(
            delete(AssetTranslation).where(AssetTranslation.version_id == version_id)
        )
        result = await self.session.execute(
            delete(PromptAssetVersion).where(PromptAssetVersion.id == version_id)
        )
        await self.session.commit()
        return result.rowcount
