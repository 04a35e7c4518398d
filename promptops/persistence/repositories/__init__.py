"""Repository implementations."""

from promptops.persistence.repositories.ai_model_repository import AIModelRepository
from promptops.persistence.repositories.asset_repository import AssetVersionRepository, PromptAssetRepository
from promptops.persistence.repositories.audit_log_repository import AuditLogRepository
from promptops.persistence.repositories.base import BaseRepository
from promptops.persistence.repositories.deployment_repository import DeploymentRepository
from promptops.persistence.repositories.project_repository import EnvironmentRepository, ProjectRepository
from promptops.persistence.repositories.prompt_repository import PromptRepository, PromptVersionRepository
from promptops.persistence.repositories.tenant_repository import TenantRepository, UserRepository

__all__ = [
    "AIModelRepository",
    "AssetVersionRepository",
    "AuditLogRepository",
    "BaseRepository",
    "DeploymentRepository",
    "EnvironmentRepository",
    "ProjectRepository",
    "PromptAssetRepository",
    "PromptRepository",
    "PromptVersionRepository",
    "TenantRepository",
    "UserRepository",
]
