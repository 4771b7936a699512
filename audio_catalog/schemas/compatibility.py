"""Compatibility (legacy subject / relational category) API schemas."""

from pydantic import BaseModel, ConfigDict, Field

from audio_catalog.domain.enums import CompatibilityAction


class CompatibilityRequest(BaseModel):
    """POST /compatibility body. audio_ids limits sync and fix to those rows."""

    action: CompatibilityAction
    audio_ids: list[str] | None = Field(default=None, min_length=1)


class AudioIssuesResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    audio_id: str
    title: str
    issues: list[str]


class CompatibilityReportResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_audios: int
    with_new_fields: int
    with_legacy_only: int
    inconsistent: int
    issues: list[AudioIssuesResponse]


class CompatibilityActionResponse(BaseModel):
    """Result of a compatibility action; only the fields the action produces are set."""

    action: CompatibilityAction
    report: CompatibilityReportResponse | None = None
    examined: int | None = None
    updated: int | None = None
    cleared: int | None = None
    errors: list[dict[str, str]] = Field(default_factory=list)
