"""Deployment and environment response schemas."""

from datetime import datetime

from pydantic import Field

from promptops.domain.models.base import CamelModel, CamelORMModel


class DeploymentItemResponse(CamelORMModel):
    id: int
    entity_type: str
    entity_id: int
    version_tag: str
    status: str
    risk_level: str
    change_message: str | None = None
    error_message: str | None = None
    deployed_at: datetime | None = None


class DeploymentResponse(CamelORMModel):
    """A deployment with its environment name and items in activation order."""

    id: int
    project_id: int
    environment_id: int
    environment_name: str
    name: str
    description: str | None = None
    status: str
    requested_by_id: int
    approved_by_id: int | None = None
    requested_at: datetime
    approved_at: datetime | None = None
    deployed_at: datetime | None = None
    rolled_back_at: datetime | None = None
    rollback_to_deployment_id: int | None = None
    items: list[DeploymentItemResponse] = Field(default_factory=list)


class RollbackRequest(CamelModel):
    rollback_to_deployment_id: int


class ActiveVersionsResponse(CamelModel):
    environment_id: int
    prompt_version_ids: list[int]
    asset_version_ids: list[int]
