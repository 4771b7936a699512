"""DTOs for the category columns of audio records and compatibility results."""

from dataclasses import dataclass, field, replace

from audio_catalog.application.dtos.category import CategorySelection


@dataclass(frozen=True)
class AudioCategoryRecord:
    """The category-related fields of one audio row.

    subject is the legacy free-text category; category_id and subcategory_id
    are the relational references.
    """

    id: str
    title: str = ""
    subject: str | None = None
    category_id: str | None = None
    subcategory_id: str | None = None

    @property
    def has_relational_fields(self) -> bool:
        return bool(self.category_id or self.subcategory_id)

    @property
    def has_legacy_subject(self) -> bool:
        return bool(self.subject)

    def with_fields(self, fields: "SyncedFields") -> "AudioCategoryRecord":
        """Return a copy carrying the synchronized category fields."""
        return replace(
            self,
            category_id=fields.category_id,
            subcategory_id=fields.subcategory_id,
            subject=fields.subject,
        )


@dataclass(frozen=True)
class LegacySubjectView:
    """Audio category known only through the legacy subject string."""

    subject: str


@dataclass(frozen=True)
class RelationalCategoryRef:
    """Audio category known through relational ids."""

    category_id: str | None = None
    subcategory_id: str | None = None

    @property
    def selection(self) -> CategorySelection:
        return CategorySelection(self.category_id, self.subcategory_id)


# An audio's category reference is one of these two shapes (or absent).
CategoryReference = LegacySubjectView | RelationalCategoryRef


@dataclass(frozen=True)
class SyncedFields:
    """Synchronized (category_id, subcategory_id, subject) triple."""

    category_id: str | None
    subcategory_id: str | None
    subject: str


@dataclass(frozen=True)
class ConsistencyResult:
    """Issues found on one audio record, with suggested fixes."""

    issues: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)

    @property
    def is_consistent(self) -> bool:
        return not self.issues


@dataclass(frozen=True)
class BatchFixResult:
    """Repaired records and per-record failures of a batch fix."""

    fixed: list[AudioCategoryRecord] = field(default_factory=list)
    errors: list[dict[str, str]] = field(default_factory=list)


@dataclass(frozen=True)
class AudioIssues:
    """Report line for one inconsistent audio record."""

    audio_id: str
    title: str
    issues: list[str]


@dataclass(frozen=True)
class CompatibilityReport:
    """Migration progress of legacy subject data toward relational references."""

    total_audios: int = 0
    with_new_fields: int = 0
    with_legacy_only: int = 0
    inconsistent: int = 0
    issues: list[AudioIssues] = field(default_factory=list)
