"""Deployment routes: create, approve, deploy, roll back."""

from typing import Annotated

from fastapi import APIRouter, Query, status

from promptops.api.deps import Context, DbSession
from promptops.api.schemas.deployments import DeploymentResponse, RollbackRequest
from promptops.domain.models.deployment import DeploymentDraft
from promptops.domain.services.deployment_service import DeploymentService
from promptops.persistence.models.deployment import DeploymentStatus

router = APIRouter()


@router.post("", response_model=DeploymentResponse, status_code=status.HTTP_201_CREATED)
async def create_deployment(
    draft: DeploymentDraft,
    ctx: Context,
    db: DbSession,
) -> DeploymentResponse:
    """Create a PENDING deployment requested by the current user."""
    deployment = await DeploymentService(db).create_deployment(ctx, draft)
    return DeploymentResponse.model_validate(deployment)


@router.get("", response_model=list[DeploymentResponse])
async def list_deployments(
    ctx: Context,
    db: DbSession,
    environment_id: Annotated[int | None, Query(alias="environmentId")] = None,
    deployment_status: Annotated[DeploymentStatus | None, Query(alias="status")] = None,
) -> list[DeploymentResponse]:
    deployments = await DeploymentService(db).find_all_deployments(
        ctx, environment_id=environment_id, status=deployment_status
    )
    return [DeploymentResponse.model_validate(d) for d in deployments]


@router.get("/{deployment_id}", response_model=DeploymentResponse)
async def get_deployment(deployment_id: int, ctx: Context, db: DbSession) -> DeploymentResponse:
    deployment = await DeploymentService(db).find_deployment_by_id(ctx, deployment_id)
    return DeploymentResponse.model_validate(deployment)


@router.post("/{deployment_id}/approve", response_model=DeploymentResponse)
async def approve_deployment(deployment_id: int, ctx: Context, db: DbSession) -> DeploymentResponse:
    """Approve a PENDING deployment. The requester cannot approve their own."""
    deployment = await DeploymentService(db).approve_deployment(ctx, deployment_id)
    return DeploymentResponse.model_validate(deployment)


@router.post("/{deployment_id}/deploy", response_model=DeploymentResponse)
async def deploy_deployment(deployment_id: int, ctx: Context, db: DbSession) -> DeploymentResponse:
    """Activate every item of an APPROVED deployment, all or nothing."""
    deployment = await DeploymentService(db).deploy_deployment(ctx, deployment_id)
    return DeploymentResponse.model_validate(deployment)


@router.post("/{deployment_id}/rollback", response_model=DeploymentResponse)
async def rollback_deployment(
    deployment_id: int,
    body: RollbackRequest,
    ctx: Context,
    db: DbSession,
) -> DeploymentResponse:
    deployment = await DeploymentService(db).rollback_deployment(
        ctx, deployment_id, body.rollback_to_deployment_id
    )
    return DeploymentResponse.model_validate(deployment)
