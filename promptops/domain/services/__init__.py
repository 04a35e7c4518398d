"""Domain services."""

from promptops.domain.services.asset_version_service import AssetVersionService
from promptops.domain.services.deployment_service import DeploymentService
from promptops.domain.services.environment_service import EnvironmentActivationService
from promptops.domain.services.marketplace_service import MarketplaceService
from promptops.domain.services.prompt_version_service import PromptVersionService
from promptops.domain.services.tenant_policy_service import TenantPolicyService

__all__ = [
    "AssetVersionService",
    "DeploymentService",
    "EnvironmentActivationService",
    "MarketplaceService",
    "PromptVersionService",
    "TenantPolicyService",
]
