"""Version response schemas."""

from datetime import datetime
from typing import Literal

from promptops.domain.models.base import CamelModel, CamelORMModel
from promptops.domain.models.deletion import AlreadyAbsent, Deleted, DeleteResult


class MarketplaceFields(CamelORMModel):
    """Marketplace columns shared by every version response."""

    marketplace_status: str
    marketplace_requested_at: datetime | None = None
    marketplace_requester_id: int | None = None
    marketplace_approved_at: datetime | None = None
    marketplace_approver_id: int | None = None
    marketplace_published_at: datetime | None = None
    marketplace_rejection_reason: str | None = None


class TranslationResponse(CamelORMModel):
    language_code: str
    value: str


class AssetVersionResponse(MarketplaceFields):
    id: int
    asset_id: int
    version_tag: str
    value: str
    change_message: str | None = None
    language_code: str
    translations: list[TranslationResponse] = []
    created_at: datetime
    updated_at: datetime


class PromptVersionResponse(MarketplaceFields):
    id: int
    prompt_id: int
    version_tag: str
    prompt_text: str
    change_message: str | None = None
    language_code: str
    created_at: datetime
    updated_at: datetime


class RejectPublishRequest(CamelModel):
    reason: str


class DeleteResponse(CamelModel):
    """Outcome of an idempotent delete. Both variants answer 200."""

    result: Literal["deleted", "already_absent"]
    version_tag: str
    version_id: int | None = None


def delete_response(outcome: DeleteResult) -> DeleteResponse:
    """Render a DeleteResult without inventing an id for absent versions."""
    if isinstance(outcome, Deleted):
        return DeleteResponse(
            result="deleted",
            version_tag=outcome.record.version_tag,
            version_id=outcome.record.id,
        )
    if isinstance(outcome, AlreadyAbsent):
        return DeleteResponse(result="already_absent", version_tag=outcome.version_tag)
    raise TypeError(f"Unknown delete result: {outcome!r}")
