"""Prompt and PromptVersion models."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from promptops.persistence.database import Base
from promptops.persistence.models.marketplace import MarketplaceMixin


class Prompt(Base):
    """A prompt template owned by a project."""

    __tablename__ = "prompts"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    owner_user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    project = relationship("Project")
    versions = relationship(
        "PromptVersion", back_populates="prompt", cascade="all, delete-orphan", order_by="PromptVersion.id"
    )

    __table_args__ = (
        UniqueConstraint("project_id", "name", name="uq_prompt_project_name"),
    )

    def __repr__(self) -> str:
        return f"<Prompt(id={self.id}, project_id={self.project_id}, name={self.name})>"


class PromptVersion(MarketplaceMixin, Base):
    """Immutable snapshot of a prompt's text, keyed by a client-supplied tag."""

    __tablename__ = "prompt_versions"

    id = Column(Integer, primary_key=True, index=True)
    prompt_id = Column(Integer, ForeignKey("prompts.id"), nullable=False, index=True)
    version_tag = Column(String(50), nullable=False)
    prompt_text = Column(Text, nullable=False)
    change_message = Column(Text, nullable=True)
    language_code = Column(String(20), nullable=False, default="en")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    prompt = relationship("Prompt", back_populates="versions")

    __table_args__ = (
        UniqueConstraint("prompt_id", "version_tag", name="uq_prompt_version_tag"),
    )

    def __repr__(self) -> str:
        return f"<PromptVersion(id={self.id}, prompt_id={self.prompt_id}, version_tag={self.version_tag})>"
