"""Database models."""

from promptops.persistence.models.ai_model import AIModel
from promptops.persistence.models.asset import AssetTranslation, PromptAsset, PromptAssetVersion
from promptops.persistence.models.audit_log import AuditAction, AuditLog
from promptops.persistence.models.deployment import (
    Deployment,
    DeploymentEntityType,
    DeploymentItem,
    DeploymentItemStatus,
    DeploymentStatus,
    RiskLevel,
)
from promptops.persistence.models.marketplace import MarketplaceStatus
from promptops.persistence.models.project import (
    Environment,
    Project,
    environment_active_asset_versions,
    environment_active_prompt_versions,
)
from promptops.persistence.models.prompt import Prompt, PromptVersion
from promptops.persistence.models.tenant import Tenant, User

__all__ = [
    "AIModel",
    "AssetTranslation",
    "AuditAction",
    "AuditLog",
    "Deployment",
    "DeploymentEntityType",
    "DeploymentItem",
    "DeploymentItemStatus",
    "DeploymentStatus",
    "Environment",
    "MarketplaceStatus",
    "Project",
    "Prompt",
    "PromptAsset",
    "PromptAssetVersion",
    "PromptVersion",
    "RiskLevel",
    "Tenant",
    "User",
    "environment_active_asset_versions",
    "environment_active_prompt_versions",
]
