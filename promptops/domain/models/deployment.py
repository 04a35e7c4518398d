"""Deployment request payloads."""

from pydantic import Field

from promptops.domain.models.base import CamelModel
from promptops.persistence.models.deployment import RiskLevel


class DeploymentItemDraft(CamelModel):
    """One entity + version tag to activate.

    ``entity_type`` stays a plain string so that unknown types are rejected
    by the deployment service with a domain error rather than by schema
    validation.
    """

    entity_type: str
    entity_id: int
    version_tag: str
    change_message: str | None = None
    risk_level: RiskLevel | None = None


class DeploymentDraft(CamelModel):
    """A deployment to be created in PENDING status."""

    environment_id: int
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    items: list[DeploymentItemDraft] = Field(default_factory=list)
