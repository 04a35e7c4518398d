"""Version store for prompt assets."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from promptops.core.context import RequestContext
from promptops.domain.exceptions import ConflictError, NotFoundError
from promptops.domain.models.deletion import AlreadyAbsent, Deleted, DeleteResult
from promptops.domain.models.version import AssetVersionDraft, AssetVersionPatch
from promptops.domain.services.audit_service import AuditService
from promptops.domain.services.marketplace_service import MarketplaceService
from promptops.persistence.models.asset import AssetTranslation, PromptAsset, PromptAssetVersion
from promptops.persistence.models.audit_log import AuditAction
from promptops.persistence.repositories.asset_repository import (
    AssetVersionRepository,
    PromptAssetRepository,
)

logger = logging.getLogger(__name__)

_PATCHABLE_FIELDS = ("value", "change_message", "language_code")


class AssetVersionService:
    """Create, read, update and delete asset versions, and route them through the marketplace."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize asset version service."""
        self.session = session
        self.asset_repo = PromptAssetRepository(session)
        self.version_repo = AssetVersionRepository(session)
        self.marketplace = MarketplaceService(session)
        self.audit = AuditService(session)

    async def get_parent_asset(
        self, ctx: RequestContext, prompt_id: int, asset_key: str
    ) -> PromptAsset:
        """Resolve the asset by (project, prompt, key) or raise NotFoundError."""
        asset = await self.asset_repo.get_by_key(ctx.project_id, prompt_id, asset_key)
        if asset is None:
            raise NotFoundError(
                f'PromptAsset with key "{asset_key}" for prompt "{prompt_id}" '
                f'not found in project "{ctx.project_id}".'
            )
        return asset

    async def create(
        self,
        ctx: RequestContext,
        prompt_id: int,
        asset_key: str,
        draft: AssetVersionDraft,
    ) -> PromptAssetVersion:
        """Create a version under an asset.

        Raises:
            NotFoundError: If the asset does not exist in the project
            ConflictError: If the version tag already exists for the asset
        """
        asset = await self.get_parent_asset(ctx, prompt_id, asset_key)
        asset_id = asset.id

        version = PromptAssetVersion(
            asset_id=asset_id,
            version_tag=draft.version_tag,
            value=draft.value,
            change_message=draft.change_message,
            language_code=draft.language_code,
            translations=[
                AssetTranslation(language_code=t.language_code, value=t.value)
                for t in draft.translations
            ],
        )
        self.session.add(version)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise ConflictError(
                f'Version tag "{draft.version_tag}" already exists for asset "{asset_key}" (ID: {asset_id}).'
            )

        logger.info(f"Created asset version {draft.version_tag!r} for asset {asset_id}")
        await self.audit.log(
            ctx,
            AuditAction.VERSION_CREATED,
            "prompt_asset_version",
            version.id,
            {
                "asset_key": asset_key,
                "prompt_id": prompt_id,
                "version_tag": version.version_tag,
                "language_code": version.language_code,
            },
        )
        return version

    async def list_for_asset(
        self,
        ctx: RequestContext,
        prompt_id: int,
        asset_key: str,
        language_code: str | None = None,
    ) -> list[PromptAssetVersion]:
        """List an asset's versions, newest first.

        ``language_code`` filters on the version's own language.
        """
        asset = await self.get_parent_asset(ctx, prompt_id, asset_key)
        return await self.version_repo.list_for_asset(asset.id, language_code)

    async def find_by_tag(
        self,
        ctx: RequestContext,
        prompt_id: int,
        asset_key: str,
        version_tag: str,
        language_code: str | None = None,
    ) -> PromptAssetVersion:
        """Get a version by tag.

        With ``language_code``, only a version that has a translation in that
        language matches; the version's own ``language_code`` is not consulted.

        Raises:
            NotFoundError: If the asset or the version does not exist
        """
        asset = await self.get_parent_asset(ctx, prompt_id, asset_key)
        if language_code:
            version = await self.version_repo.get_by_tag_with_translation(
                asset.id, version_tag, language_code
            )
        else:
            version = await self.version_repo.get_by_tag(asset.id, version_tag)

        if version is None:
            language_part = f' and languageCode "{language_code}"' if language_code else ""
            raise NotFoundError(
                f'PromptAssetVersion with tag "{version_tag}"{language_part} '
                f'not found for asset "{asset_key}" (ID: {asset.id}).'
            )
        return version

    async def update(
        self, ctx: RequestContext, version_id: int, patch: AssetVersionPatch
    ) -> PromptAssetVersion:
        """Apply a partial update to value, change message or language code.

        Raises:
            NotFoundError: If the version no longer exists in the project
        """
        version = await self.version_repo.get_in_project(ctx.project_id, version_id)
        if version is None:
            raise NotFoundError(f"Version with ID {version_id} not found in project {ctx.project_id}")

        changes = patch.model_dump(exclude_unset=True, include=set(_PATCHABLE_FIELDS))
        for key, value in changes.items():
            setattr(version, key, value)
        await self.session.commit()

        await self.audit.log(
            ctx,
            AuditAction.VERSION_UPDATED,
            "prompt_asset_version",
            version.id,
            {"version_tag": version.version_tag, "fields": sorted(changes)},
        )
        return version

    async def remove(
        self,
        ctx: RequestContext,
        prompt_id: int,
        asset_key: str,
        version_tag: str,
    ) -> DeleteResult:
        """Delete a version. Idempotent: a missing version is reported, not raised.

        Returns:
            ``Deleted`` with the last known record, or ``AlreadyAbsent``.

        Raises:
            ConflictError: If the version is still referenced elsewhere
        """
        try:
            existing = await self.find_by_tag(ctx, prompt_id, asset_key, version_tag)
        except NotFoundError:
            logger.info(
                f'Version "{version_tag}" not found for asset "{asset_key}" - already deleted or never existed'
            )
            return AlreadyAbsent(version_tag=version_tag, parent=asset_key)

        try:
            removed = await self.version_repo.delete_by_id(existing.id)
        except IntegrityError:
            await self.session.rollback()
            raise ConflictError(
                f'Cannot delete PromptAssetVersion "{version_tag}" because it is still '
                "referenced by other entities (e.g., deployments, environments)."
            )

        if removed == 0:
            # Deleted by someone else between the lookup and our delete
            logger.info(f'Version "{version_tag}" was already deleted by another process during deletion attempt')
            return Deleted(existing)

        logger.info(f'Deleted version "{version_tag}" (ID: {existing.id}) from asset "{asset_key}"')
        await self.audit.log(
            ctx,
            AuditAction.VERSION_DELETED,
            "prompt_asset_version",
            existing.id,
            {"asset_key": asset_key, "prompt_id": prompt_id, "version_tag": version_tag},
        )
        return Deleted(existing)

    async def request_publish(
        self, ctx: RequestContext, prompt_id: int, asset_key: str, version_tag: str
    ) -> PromptAssetVersion:
        version = await self.find_by_tag(ctx, prompt_id, asset_key, version_tag)
        return await self.marketplace.request_publish(ctx, version)

    async def approve_publish(
        self, ctx: RequestContext, prompt_id: int, asset_key: str, version_tag: str
    ) -> PromptAssetVersion:
        version = await self.find_by_tag(ctx, prompt_id, asset_key, version_tag)
        return await self.marketplace.approve_publish(ctx, version)

    async def reject_publish(
        self, ctx: RequestContext, prompt_id: int, asset_key: str, version_tag: str, reason: str
    ) -> PromptAssetVersion:
        version = await self.find_by_tag(ctx, prompt_id, asset_key, version_tag)
        return await self.marketplace.reject_publish(ctx, version, reason)

    async def unpublish(
        self, ctx: RequestContext, prompt_id: int, asset_key: str, version_tag: str
    ) -> PromptAssetVersion:
        version = await self.find_by_tag(ctx, prompt_id, asset_key, version_tag)
        return await self.marketplace.unpublish(ctx, version)
