"""Version store for prompts."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from promptops.core.context import RequestContext
from promptops.domain.exceptions import BadRequestError, ConflictError, NotFoundError
from promptops.domain.models.deletion import AlreadyAbsent, Deleted, DeleteResult
from promptops.domain.models.version import PromptVersionDraft, PromptVersionPatch
from promptops.domain.services.audit_service import AuditService
from promptops.domain.services.marketplace_service import MarketplaceService
from promptops.persistence.models.audit_log import AuditAction
from promptops.persistence.models.prompt import Prompt, PromptVersion
from promptops.persistence.repositories.prompt_repository import (
    PromptRepository,
    PromptVersionRepository,
)

logger = logging.getLogger(__name__)

# Reserved tag resolving to the most recently created version
LATEST_TAG = "latest"

_PATCHABLE_FIELDS = ("prompt_text", "change_message", "language_code")


class PromptVersionService:
    """Prompt versions: same store contract as asset versions, plus the ``latest`` tag."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize prompt version service."""
        self.session = session
        self.prompt_repo = PromptRepository(session)
        self.version_repo = PromptVersionRepository(session)
        self.marketplace = MarketplaceService(session)
        self.audit = AuditService(session)

    async def get_prompt(self, ctx: RequestContext, prompt_id: int) -> Prompt:
        """Resolve a prompt inside the project or raise NotFoundError."""
        prompt = await self.prompt_repo.get_by_id(ctx.project_id, prompt_id)
        if prompt is None:
            raise NotFoundError(f'Prompt with ID "{prompt_id}" not found in project "{ctx.project_id}".')
        return prompt

    async def create(
        self, ctx: RequestContext, prompt_id: int, draft: PromptVersionDraft
    ) -> PromptVersion:
        """Create a version under a prompt.

        Raises:
            NotFoundError: If the prompt does not exist in the project
            BadRequestError: If the tag is the reserved ``latest``
            ConflictError: If the version tag already exists for the prompt
        """
        await self.get_prompt(ctx, prompt_id)
        if draft.version_tag == LATEST_TAG:
            raise BadRequestError(f'"{LATEST_TAG}" is reserved and cannot be used as a version tag.')

        version = PromptVersion(
            prompt_id=prompt_id,
            version_tag=draft.version_tag,
            prompt_text=draft.prompt_text,
            change_message=draft.change_message,
            language_code=draft.language_code,
        )
        self.session.add(version)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise ConflictError(
                f'Version tag "{draft.version_tag}" already exists for prompt "{prompt_id}".'
            )

        logger.info(f"Created prompt version {draft.version_tag!r} for prompt {prompt_id}")
        await self.audit.log(
            ctx,
            AuditAction.VERSION_CREATED,
            "prompt_version",
            version.id,
            {"prompt_id": prompt_id, "version_tag": version.version_tag},
        )
        return version

    async def list_for_prompt(self, ctx: RequestContext, prompt_id: int) -> list[PromptVersion]:
        """List a prompt's versions, newest first."""
        await self.get_prompt(ctx, prompt_id)
        return await self.version_repo.list_for_prompt(prompt_id)

    async def find_by_tag(
        self, ctx: RequestContext, prompt_id: int, version_tag: str
    ) -> PromptVersion:
        """Get a version by tag, or the newest one for ``latest``.

        Raises:
            NotFoundError: If the prompt or the version does not exist
        """
        await self.get_prompt(ctx, prompt_id)
        if version_tag == LATEST_TAG:
            version = await self.version_repo.get_latest(prompt_id)
        else:
            version = await self.version_repo.get_by_tag(prompt_id, version_tag)

        if version is None:
            raise NotFoundError(
                f'Version "{version_tag}" not found for prompt "{prompt_id}" in project "{ctx.project_id}".'
            )
        return version

    async def update(
        self, ctx: RequestContext, version_id: int, patch: PromptVersionPatch
    ) -> PromptVersion:
        """Apply a partial update to prompt text, change message or language code.

        Raises:
            NotFoundError: If the version no longer exists in the project
        """
        version = await self.version_repo.get_in_project(ctx.project_id, version_id)
        if version is None:
            raise NotFoundError(f"PromptVersion with ID {version_id} not found in project {ctx.project_id}")

        changes = patch.model_dump(exclude_unset=True, include=set(_PATCHABLE_FIELDS))
        for key, value in changes.items():
            setattr(version, key, value)
        await self.session.commit()

        await self.audit.log(
            ctx,
            AuditAction.VERSION_UPDATED,
            "prompt_version",
            version.id,
            {"version_tag": version.version_tag, "fields": sorted(changes)},
        )
        return version

    async def remove(self, ctx: RequestContext, prompt_id: int, version_tag: str) -> DeleteResult:
        """Delete a version. Idempotent: a missing version is reported, not raised.

        Raises:
            ConflictError: If the version is still referenced elsewhere
        """
        logger.info(
            f'Attempting to delete version "{version_tag}" from prompt "{prompt_id}" in project "{ctx.project_id}"'
        )
        try:
            existing = await self.find_by_tag(ctx, prompt_id, version_tag)
        except NotFoundError:
            logger.info(
                f'Version "{version_tag}" not found for prompt "{prompt_id}" - already deleted or never existed'
            )
            return AlreadyAbsent(version_tag=version_tag, parent=str(prompt_id))

        try:
            removed = await self.version_repo.delete_by_id(existing.id)
        except IntegrityError:
            await self.session.rollback()
            raise ConflictError(
                f'Cannot delete PromptVersion "{version_tag}" because it is still referenced '
                "by other entities (e.g., deployments, environments)."
            )

        if removed == 0:
            logger.info(f'Version "{version_tag}" was already deleted by another process during deletion attempt')
            return Deleted(existing)

        logger.info(f'Deleted version "{version_tag}" (ID: {existing.id}) from prompt "{prompt_id}"')
        await self.audit.log(
            ctx,
            AuditAction.VERSION_DELETED,
            "prompt_version",
            existing.id,
            {"prompt_id": prompt_id, "version_tag": version_tag},
        )
        return Deleted(existing)

    async def request_publish(self, ctx: RequestContext, prompt_id: int, version_tag: str) -> PromptVersion:
        version = await self.find_by_tag(ctx, prompt_id, version_tag)
        return await self.marketplace.request_publish(ctx, version)

    async def approve_publish(self, ctx: RequestContext, prompt_id: int, version_tag: str) -> PromptVersion:
        version = await self.find_by_tag(ctx, prompt_id, version_tag)
        return await self.marketplace.approve_publish(ctx, version)

    async def reject_publish(
        self, ctx: RequestContext, prompt_id: int, version_tag: str, reason: str
    ) -> PromptVersion:
        version = await self.find_by_tag(ctx, prompt_id, version_tag)
        return await self.marketplace.reject_publish(ctx, version, reason)

    async def unpublish(self, ctx: RequestContext, prompt_id: int, version_tag: str) -> PromptVersion:
        version = await self.find_by_tag(ctx, prompt_id, version_tag)
        return await self.marketplace.unpublish(ctx, version)
