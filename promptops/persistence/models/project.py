"""Project and Environment models, plus the environment activation tables."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from promptops.persistence.database import Base

# "Active version" pointers. The composite primary key makes connecting an
# already-active version a no-op rather than a duplicate row.
environment_active_prompt_versions = Table(
    "environment_active_prompt_versions",
    Base.metadata,
    Column("environment_id", Integer, ForeignKey("environments.id", ondelete="CASCADE"), primary_key=True),
    Column("prompt_version_id", Integer, ForeignKey("prompt_versions.id", ondelete="CASCADE"), primary_key=True),
)

environment_active_asset_versions = Table(
    "environment_active_asset_versions",
    Base.metadata,
    Column("environment_id", Integer, ForeignKey("environments.id", ondelete="CASCADE"), primary_key=True),
    Column("asset_version_id", Integer, ForeignKey("prompt_asset_versions.id", ondelete="CASCADE"), primary_key=True),
)


class Project(Base):
    """Project model; the scope every prompt, environment and deployment lives in."""

    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    owner_user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    tenant = relationship("Tenant", back_populates="projects")
    environments = relationship("Environment", back_populates="project", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, tenant_id={self.tenant_id}, name={self.name})>"


class Environment(Base):
    """A named deployment target within a project (production, staging, ...)."""

    __tablename__ = "environments"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    project = relationship("Project", back_populates="environments")

    __table_args__ = (
        UniqueConstraint("project_id", "name", name="uq_environment_project_name"),
    )

    def __repr__(self) -> str:
        return f"<Environment(id={self.id}, project_id={self.project_id}, name={self.name})>"
