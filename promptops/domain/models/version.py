"""Version request payloads."""

from pydantic import Field, field_validator

from promptops.domain.models.base import CamelModel


def _reject_null(value, field_name: str):
    # Patch fields may be omitted, but the columns behind them are NOT NULL
    if value is None:
        raise ValueError(f"{field_name} may be omitted but not set to null")
    return value


class TranslationDraft(CamelModel):
    language_code: str = Field(min_length=2, max_length=20)
    value: str


class AssetVersionDraft(CamelModel):
    """A new asset version. The tag is chosen by the client."""

    version_tag: str = Field(min_length=1, max_length=50)
    value: str
    change_message: str | None = None
    language_code: str = "en"
    translations: list[TranslationDraft] = Field(default_factory=list)

    @field_validator("translations")
    @classmethod
    def validate_unique_languages(cls, v):
        seen = set()
        for translation in v:
            if translation.language_code in seen:
                raise ValueError(f"duplicate translation for language {translation.language_code!r}")
            seen.add(translation.language_code)
        return v


class AssetVersionPatch(CamelModel):
    value: str | None = None
    change_message: str | None = None
    language_code: str | None = None

    @field_validator("value", "language_code")
    @classmethod
    def validate_not_null(cls, v, info):
        return _reject_null(v, info.field_name)


class PromptVersionDraft(CamelModel):
    """A new prompt version. The tag is chosen by the client."""

    version_tag: str = Field(min_length=1, max_length=50)
    prompt_text: str
    change_message: str | None = None
    language_code: str = "en"


class PromptVersionPatch(CamelModel):
    prompt_text: str | None = None
    change_message: str | None = None
    language_code: str | None = None

    @field_validator("prompt_text", "language_code")
    @classmethod
    def validate_not_null(cls, v, info):
        return _reject_null(v, info.field_name)
