"""Asset version routes: version store and marketplace publication."""

from typing import Annotated

from fastapi import APIRouter, Query, status

from promptops.api.deps import Context, DbSession
from promptops.api.schemas.versions import (
    AssetVersionResponse,
    DeleteResponse,
    RejectPublishRequest,
    delete_response,
)
from promptops.domain.models.version import AssetVersionDraft, AssetVersionPatch
from promptops.domain.services.asset_version_service import AssetVersionService

router = APIRouter()

VERSIONS_PATH = "/prompts/{prompt_id}/assets/{asset_key}/versions"


@router.post(VERSIONS_PATH, response_model=AssetVersionResponse, status_code=status.HTTP_201_CREATED)
async def create_asset_version(
    prompt_id: int,
    asset_key: str,
    draft: AssetVersionDraft,
    ctx: Context,
    db: DbSession,
) -> AssetVersionResponse:
    """Create a version under an asset with a client-chosen tag."""
    version = await AssetVersionService(db).create(ctx, prompt_id, asset_key, draft)
    return AssetVersionResponse.model_validate(version)


@router.get(VERSIONS_PATH, response_model=list[AssetVersionResponse])
async def list_asset_versions(
    prompt_id: int,
    asset_key: str,
    ctx: Context,
    db: DbSession,
    language_code: Annotated[str | None, Query(alias="languageCode")] = None,
) -> list[AssetVersionResponse]:
    """List an asset's versions, newest first."""
    versions = await AssetVersionService(db).list_for_asset(ctx, prompt_id, asset_key, language_code)
    return [AssetVersionResponse.model_validate(v) for v in versions]


@router.get(VERSIONS_PATH + "/{version_tag}", response_model=AssetVersionResponse)
async def get_asset_version(
    prompt_id: int,
    asset_key: str,
    version_tag: str,
    ctx: Context,
    db: DbSession,
    language_code: Annotated[str | None, Query(alias="languageCode")] = None,
) -> AssetVersionResponse:
    """Get a version by tag, optionally requiring a translation in ``languageCode``."""
    version = await AssetVersionService(db).find_by_tag(
        ctx, prompt_id, asset_key, version_tag, language_code
    )
    return AssetVersionResponse.model_validate(version)


@router.patch(VERSIONS_PATH + "/{version_tag}", response_model=AssetVersionResponse)
async def update_asset_version(
    prompt_id: int,
    asset_key: str,
    version_tag: str,
    patch: AssetVersionPatch,
    ctx: Context,
    db: DbSession,
) -> AssetVersionResponse:
    service = AssetVersionService(db)
    version = await service.find_by_tag(ctx, prompt_id, asset_key, version_tag)
    version = await service.update(ctx, version.id, patch)
    return AssetVersionResponse.model_validate(version)


@router.delete(VERSIONS_PATH + "/{version_tag}", response_model=DeleteResponse)
async def delete_asset_version(
    prompt_id: int,
    asset_key: str,
    version_tag: str,
    ctx: Context,
    db: DbSession,
) -> DeleteResponse:
    """Delete a version. Deleting an absent version also succeeds."""
    outcome = await AssetVersionService(db).remove(ctx, prompt_id, asset_key, version_tag)
    return delete_response(outcome)


@router.post(VERSIONS_PATH + "/{version_tag}/publish", response_model=AssetVersionResponse)
async def request_asset_version_publish(
    prompt_id: int,
    asset_key: str,
    version_tag: str,
    ctx: Context,
    db: DbSession,
) -> AssetVersionResponse:
    """Request marketplace publication; published immediately if the tenant needs no approval."""
    version = await AssetVersionService(db).request_publish(ctx, prompt_id, asset_key, version_tag)
    return AssetVersionResponse.model_validate(version)


@router.post(VERSIONS_PATH + "/{version_tag}/approve", response_model=AssetVersionResponse)
async def approve_asset_version_publish(
    prompt_id: int,
    asset_key: str,
    version_tag: str,
    ctx: Context,
    db: DbSession,
) -> AssetVersionResponse:
    version = await AssetVersionService(db).approve_publish(ctx, prompt_id, asset_key, version_tag)
    return AssetVersionResponse.model_validate(version)


@router.post(VERSIONS_PATH + "/{version_tag}/reject", response_model=AssetVersionResponse)
async def reject_asset_version_publish(
    prompt_id: int,
    asset_key: str,
    version_tag: str,
    body: RejectPublishRequest,
    ctx: Context,
    db: DbSession,
) -> AssetVersionResponse:
    version = await AssetVersionService(db).reject_publish(
        ctx, prompt_id, asset_key, version_tag, body.reason
    )
    return AssetVersionResponse.model_validate(version)


@router.post(VERSIONS_PATH + "/{version_tag}/unpublish", response_model=AssetVersionResponse)
async def unpublish_asset_version(
    prompt_id: int,
    asset_key: str,
    version_tag: str,
    ctx: Context,
    db: DbSession,
) -> AssetVersionResponse:
    version = await AssetVersionService(db).unpublish(ctx, prompt_id, asset_key, version_tag)
    return AssetVersionResponse.model_validate(version)
