"""AI model reference model."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from promptops.persistence.database import Base


class AIModel(Base):
    """An AI model configuration a project's prompts can run against."""

    __tablename__ = "ai_models"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    provider = Column(String(100), nullable=True)
    api_identifier = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<AIModel(id={self.id}, project_id={self.project_id}, name={self.name})>"
