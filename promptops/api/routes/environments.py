"""Environment activation routes."""

from fastapi import APIRouter
from pydantic import BaseModel

from promptops.api.deps import Context, DbSession
from promptops.api.schemas.deployments import ActiveVersionsResponse
from promptops.domain.services.environment_service import EnvironmentActivationService

router = APIRouter()


class DeactivateResponse(BaseModel):
    """Whether a binding was actually removed."""

    removed: bool


@router.get("/{environment_id}/active", response_model=ActiveVersionsResponse)
async def list_active_versions(environment_id: int, ctx: Context, db: DbSession) -> ActiveVersionsResponse:
    """List the prompt and asset version ids active in an environment."""
    active = await EnvironmentActivationService(db).list_active(ctx, environment_id)
    return ActiveVersionsResponse(
        environment_id=active.environment_id,
        prompt_version_ids=active.prompt_version_ids,
        asset_version_ids=active.asset_version_ids,
    )


@router.delete("/{environment_id}/active/{entity_type}/{entity_id}", response_model=DeactivateResponse)
async def deactivate_version(
    environment_id: int,
    entity_type: str,
    entity_id: int,
    ctx: Context,
    db: DbSession,
) -> DeactivateResponse:
    """Remove one active binding. Removing an inactive one is not an error."""
    removed = await EnvironmentActivationService(db).deactivate(ctx, environment_id, entity_type, entity_id)
    return DeactivateResponse(removed=removed)
