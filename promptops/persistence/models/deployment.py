"""Deployment and DeploymentItem models."""

import enum
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from promptops.persistence.database import Base


class DeploymentStatus(str, enum.Enum):
    """Lifecycle of a deployment."""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    DEPLOYING = "DEPLOYING"
    DEPLOYED = "DEPLOYED"
    ROLLED_BACK = "ROLLED_BACK"


class DeploymentItemStatus(str, enum.Enum):
    """Activation outcome of a single deployment item."""
    PENDING = "PENDING"
    DEPLOYED = "DEPLOYED"
    FAILED = "FAILED"


class DeploymentEntityType(str, enum.Enum):
    """Kinds of entity a deployment item may reference."""
    PROMPT_VERSION = "PROMPT_VERSION"
    PROMPT_ASSET_VERSION = "PROMPT_ASSET_VERSION"
    AI_MODEL = "AI_MODEL"


class RiskLevel(str, enum.Enum):
    """Declared risk of a deployment item's change."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class Deployment(Base):
    """A batch activation request moving versioned items into one environment."""

    __tablename__ = "deployments"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    environment_id = Column(Integer, ForeignKey("environments.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(20), default=DeploymentStatus.PENDING.value, nullable=False, index=True)

    requested_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    approved_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    requested_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    approved_at = Column(DateTime, nullable=True)
    deployed_at = Column(DateTime, nullable=True)
    rolled_back_at = Column(DateTime, nullable=True)
    rollback_to_deployment_id = Column(Integer, ForeignKey("deployments.id"), nullable=True)

    # Relationships
    environment = relationship("Environment", lazy="joined")
    items = relationship(
        "DeploymentItem", back_populates="deployment", cascade="all, delete-orphan",
        order_by="DeploymentItem.id", lazy="selectin",
    )

    @property
    def environment_name(self) -> str | None:
        return self.environment.name if self.environment is not None else None

    def __repr__(self) -> str:
        return f"<Deployment(id={self.id}, project_id={self.project_id}, status={self.status})>"


class DeploymentItem(Base):
    """One referenced entity and version tag inside a deployment."""

    __tablename__ = "deployment_items"

    id = Column(Integer, primary_key=True, index=True)
    deployment_id = Column(
        Integer, ForeignKey("deployments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    entity_type = Column(String(30), nullable=False)
    entity_id = Column(Integer, nullable=False)
    version_tag = Column(String(50), nullable=False)
    status = Column(String(20), default=DeploymentItemStatus.PENDING.value, nullable=False)
    risk_level = Column(String(20), default=RiskLevel.LOW.value, nullable=False)
    change_message = Column(Text, nullable=True)
    error_message = Column(Text, nullable=True)
    deployed_at = Column(DateTime, nullable=True)

    # Relationships
    deployment = relationship("Deployment", back_populates="items")

    def __repr__(self) -> str:
        return (
            f"<DeploymentItem(id={self.id}, deployment_id={self.deployment_id}, "
            f"entity_type={self.entity_type}, entity_id={self.entity_id}, status={self.status})>"
        )
