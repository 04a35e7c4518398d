"""Tests for the asset version store."""

from unittest.mock import AsyncMock

import pytest
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError

from promptops.domain.exceptions import ConflictError, NotFoundError
from promptops.domain.models.deletion import AlreadyAbsent, Deleted
from promptops.domain.models.version import AssetVersionDraft, AssetVersionPatch, TranslationDraft
from promptops.domain.services.asset_version_service import AssetVersionService
from promptops.persistence.models.asset import PromptAsset
from promptops.persistence.models.audit_log import AuditAction
from promptops.persistence.repositories.audit_log_repository import AuditLogRepository


def draft(tag: str = "1.0.0", value: str = "Hello!", **kwargs) -> AssetVersionDraft:
    return AssetVersionDraft(version_tag=tag, value=value, **kwargs)


async def test_create_and_find_by_tag(db_session, seed):
    service = AssetVersionService(db_session)

    created = await service.create(seed.requester, seed.prompt_id, seed.asset_key, draft())
    found = await service.find_by_tag(seed.requester, seed.prompt_id, seed.asset_key, "1.0.0")

    assert found.id == created.id
    assert found.value == "Hello!"
    assert found.asset_id == seed.asset_id
    assert found.marketplace_status == "NOT_PUBLISHED"


async def test_duplicate_tag_is_conflict(db_session, seed):
    service = AssetVersionService(db_session)
    await service.create(seed.requester, seed.prompt_id, seed.asset_key, draft())

    with pytest.raises(ConflictError) as exc_info:
        await service.create(seed.requester, seed.prompt_id, seed.asset_key, draft(value="Other"))

    assert "1.0.0" in exc_info.value.message
    versions = await service.list_for_asset(seed.requester, seed.prompt_id, seed.asset_key)
    assert [v.value for v in versions] == ["Hello!"]


async def test_create_under_unknown_asset_is_not_found(db_session, seed):
    service = AssetVersionService(db_session)

    with pytest.raises(NotFoundError):
        await service.create(seed.requester, seed.prompt_id, "missing_key", draft())


async def test_asset_in_other_project_is_not_visible(db_session, seed, make_tenant):
    other = await make_tenant("Globex")
    service = AssetVersionService(db_session)
    await service.create(other.requester, other.prompt_id, other.asset_key, draft())

    with pytest.raises(NotFoundError):
        await service.find_by_tag(seed.requester, other.prompt_id, other.asset_key, "1.0.0")


async def test_find_by_tag_with_language_matches_translations_only(db_session, seed):
    service = AssetVersionService(db_session)
    await service.create(
        seed.requester,
        seed.prompt_id,
        seed.asset_key,
        draft(language_code="en", translations=[TranslationDraft(language_code="fr", value="Bonjour !")]),
    )

    found = await service.find_by_tag(seed.requester, seed.prompt_id, seed.asset_key, "1.0.0", "fr")
    assert [t.language_code for t in found.translations] == ["fr"]

    # The version's own language is not a translation
    with pytest.raises(NotFoundError) as exc_info:
        await service.find_by_tag(seed.requester, seed.prompt_id, seed.asset_key, "1.0.0", "en")
    assert "languageCode" in exc_info.value.message


async def test_list_for_asset_newest_first_and_language_filter(db_session, seed):
    service = AssetVersionService(db_session)
    await service.create(seed.requester, seed.prompt_id, seed.asset_key, draft("1.0.0"))
    await service.create(seed.requester, seed.prompt_id, seed.asset_key, draft("1.1.0", language_code="de"))
    await service.create(seed.requester, seed.prompt_id, seed.asset_key, draft("2.0.0"))

    versions = await service.list_for_asset(seed.requester, seed.prompt_id, seed.asset_key)
    assert [v.version_tag for v in versions] == ["2.0.0", "1.1.0", "1.0.0"]

    german = await service.list_for_asset(seed.requester, seed.prompt_id, seed.asset_key, "de")
    assert [v.version_tag for v in german] == ["1.1.0"]


async def test_update_applies_only_given_fields(db_session, seed):
    service = AssetVersionService(db_session)
    created = await service.create(
        seed.requester, seed.prompt_id, seed.asset_key, draft(change_message="first")
    )

    updated = await service.update(seed.requester, created.id, AssetVersionPatch(value="Hi there"))

    assert updated.value == "Hi there"
    assert updated.change_message == "first"
    assert updated.version_tag == "1.0.0"


async def test_update_missing_version_is_not_found(db_session, seed):
    service = AssetVersionService(db_session)

    with pytest.raises(NotFoundError):
        await service.update(seed.requester, 9999, AssetVersionPatch(value="x"))


async def test_remove_is_idempotent(db_session, seed):
    service = AssetVersionService(db_session)
    created = await service.create(
        seed.requester,
        seed.prompt_id,
        seed.asset_key,
        draft(translations=[TranslationDraft(language_code="fr", value="Bonjour !")]),
    )
    created_id = created.id

    first = await service.remove(seed.requester, seed.prompt_id, seed.asset_key, "1.0.0")
    second = await service.remove(seed.requester, seed.prompt_id, seed.asset_key, "1.0.0")

    assert isinstance(first, Deleted)
    assert first.record.id == created_id
    assert isinstance(second, AlreadyAbsent)
    assert second.version_tag == "1.0.0"
    assert second.parent == seed.asset_key
    with pytest.raises(NotFoundError):
        await service.find_by_tag(seed.requester, seed.prompt_id, seed.asset_key, "1.0.0")


async def test_remove_under_missing_asset_is_already_absent(db_session, seed):
    service = AssetVersionService(db_session)

    result = await service.remove(seed.requester, seed.prompt_id, "missing_key", "1.0.0")

    assert isinstance(result, AlreadyAbsent)


async def test_remove_losing_a_race_still_reports_deleted(db_session, seed):
    service = AssetVersionService(db_session)
    created = await service.create(seed.requester, seed.prompt_id, seed.asset_key, draft())
    service.version_repo.delete_by_id = AsyncMock(return_value=0)

    result = await service.remove(seed.requester, seed.prompt_id, seed.asset_key, "1.0.0")

    assert isinstance(result, Deleted)
    assert result.record.id == created.id


async def test_mutations_are_audited(db_session, seed):
    service = AssetVersionService(db_session)
    await service.create(seed.requester, seed.prompt_id, seed.asset_key, draft())
    await service.remove(seed.requester, seed.prompt_id, seed.asset_key, "1.0.0")

    logs = await AuditLogRepository(db_session).list_by_project(seed.project_id)
    actions = {log.action: log for log in logs}

    assert AuditAction.VERSION_CREATED.value in actions
    assert actions[AuditAction.VERSION_DELETED.value].risk_level == "HIGH"
    assert actions[AuditAction.VERSION_DELETED.value].user_id == seed.requester_id


async def test_same_tag_under_another_asset_is_allowed(db_session, seed):
    farewell = PromptAsset(project_id=seed.project_id, prompt_id=seed.prompt_id, key="farewell", name="Farewell")
    db_session.add(farewell)
    await db_session.commit()
    service = AssetVersionService(db_session)
    welcome = await service.create(seed.requester, seed.prompt_id, seed.asset_key, draft())

    other = await service.create(seed.requester, seed.prompt_id, "farewell", draft(value="Goodbye!"))

    assert other.version_tag == welcome.version_tag == "1.0.0"
    assert other.asset_id != welcome.asset_id
    found = await service.find_by_tag(seed.requester, seed.prompt_id, "farewell", "1.0.0")
    assert found.value == "Goodbye!"


def test_duplicate_translation_languages_are_rejected():
    with pytest.raises(ValidationError):
        draft(
            translations=[
                TranslationDraft(language_code="fr", value="Bonjour"),
                TranslationDraft(language_code="fr", value="Salut"),
            ]
        )


def test_patch_rejects_null_for_required_columns():
    with pytest.raises(ValidationError):
        AssetVersionPatch(value=None)
    with pytest.raises(ValidationError):
        AssetVersionPatch(language_code=None)

    assert AssetVersionPatch(change_message=None).model_dump(exclude_unset=True) == {"change_message": None}


async def test_remove_blocked_by_reference_is_conflict(db_session, seed):
    service = AssetVersionService(db_session)
    await service.create(seed.requester, seed.prompt_id, seed.asset_key, draft())
    service.version_repo.delete_by_id = AsyncMock(
        side_effect=IntegrityError("DELETE FROM prompt_asset_versions", {}, Exception("FOREIGN KEY constraint failed"))
    )

    with pytest.raises(ConflictError) as exc_info:
        await service.remove(seed.requester, seed.prompt_id, seed.asset_key, "1.0.0")

    assert "still referenced" in exc_info.value.message
    still_there = await service.find_by_tag(seed.requester, seed.prompt_id, seed.asset_key, "1.0.0")
    assert still_there.value == "Hello!"


async def test_failing_audit_sink_does_not_block_create(db_session, seed):
    service = AssetVersionService(db_session)
    service.audit.repo.create = AsyncMock(side_effect=RuntimeError("audit store unavailable"))

    created = await service.create(seed.requester, seed.prompt_id, seed.asset_key, draft())

    assert created.version_tag == "1.0.0"
    found = await service.find_by_tag(seed.requester, seed.prompt_id, seed.asset_key, "1.0.0")
    assert found.id == created.id
    service.audit.repo.create.assert_awaited_once()
