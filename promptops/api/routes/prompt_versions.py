"""Prompt version routes."""

from fastapi import APIRouter, status

from promptops.api.deps import Context, DbSession
from promptops.api.schemas.versions import (
    DeleteResponse,
    PromptVersionResponse,
    RejectPublishRequest,
    delete_response,
)
from promptops.domain.models.version import PromptVersionDraft, PromptVersionPatch
from promptops.domain.services.prompt_version_service import PromptVersionService

router = APIRouter()

VERSIONS_PATH = "/prompts/{prompt_id}/versions"


@router.post(VERSIONS_PATH, response_model=PromptVersionResponse, status_code=status.HTTP_201_CREATED)
async def create_prompt_version(
    prompt_id: int,
    draft: PromptVersionDraft,
    ctx: Context,
    db: DbSession,
) -> PromptVersionResponse:
    version = await PromptVersionService(db).create(ctx, prompt_id, draft)
    return PromptVersionResponse.model_validate(version)


@router.get(VERSIONS_PATH, response_model=list[PromptVersionResponse])
async def list_prompt_versions(prompt_id: int, ctx: Context, db: DbSession) -> list[PromptVersionResponse]:
    versions = await PromptVersionService(db).list_for_prompt(ctx, prompt_id)
    return [PromptVersionResponse.model_validate(v) for v in versions]


@router.get(VERSIONS_PATH + "/{version_tag}", response_model=PromptVersionResponse)
async def get_prompt_version(
    prompt_id: int,
    version_tag: str,
    ctx: Context,
    db: DbSession,
) -> PromptVersionResponse:
    """Get a version by tag; ``latest`` resolves to the newest version."""
    version = await PromptVersionService(db).find_by_tag(ctx, prompt_id, version_tag)
    return PromptVersionResponse.model_validate(version)


@router.patch(VERSIONS_PATH + "/{version_tag}", response_model=PromptVersionResponse)
async def update_prompt_version(
    prompt_id: int,
    version_tag: str,
    patch: PromptVersionPatch,
    ctx: Context,
    db: DbSession,
) -> PromptVersionResponse:
    service = PromptVersionService(db)
    version = await service.find_by_tag(ctx, prompt_id, version_tag)
    version = await service.update(ctx, version.id, patch)
    return PromptVersionResponse.model_validate(version)


@router.delete(VERSIONS_PATH + "/{version_tag}", response_model=DeleteResponse)
async def delete_prompt_version(
    prompt_id: int,
    version_tag: str,
    ctx: Context,
    db: DbSession,
) -> DeleteResponse:
    outcome = await PromptVersionService(db).remove(ctx, prompt_id, version_tag)
    return delete_response(outcome)


@router.post(VERSIONS_PATH + "/{version_tag}/publish", response_model=PromptVersionResponse)
async def request_prompt_version_publish(
    prompt_id: int, version_tag: str, ctx: Context, db: DbSession
) -> PromptVersionResponse:
    version = await PromptVersionService(db).request_publish(ctx, prompt_id, version_tag)
    return PromptVersionResponse.model_validate(version)


@router.post(VERSIONS_PATH + "/{version_tag}/approve", response_model=PromptVersionResponse)
async def approve_prompt_version_publish(
    prompt_id: int, version_tag: str, ctx: Context, db: DbSession
) -> PromptVersionResponse:
    version = await PromptVersionService(db).approve_publish(ctx, prompt_id, version_tag)
    return PromptVersionResponse.model_validate(version)


@router.post(VERSIONS_PATH + "/{version_tag}/reject", response_model=PromptVersionResponse)
async def reject_prompt_version_publish(
    prompt_id: int,
    version_tag: str,
    body: RejectPublishRequest,
    ctx: Context,
    db: DbSession,
) -> PromptVersionResponse:
    version = await PromptVersionService(db).reject_publish(ctx, prompt_id, version_tag, body.reason)
    return PromptVersionResponse.model_validate(version)


@router.post(VERSIONS_PATH + "/{version_tag}/unpublish", response_model=PromptVersionResponse)
async def unpublish_prompt_version(
    prompt_id: int, version_tag: str, ctx: Context, db: DbSession
) -> PromptVersionResponse:
    version = await PromptVersionService(db).unpublish(ctx, prompt_id, version_tag)
    return PromptVersionResponse.model_validate(version)
