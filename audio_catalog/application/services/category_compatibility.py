"""Compatibility between the legacy audio subject string and relational category ids.

Older audio rows only carry subject (free text); newer rows carry
category_id / subcategory_id. An audio's reference is classified once by
reference_of() into LegacySubjectView or RelationalCategoryRef and
normalize_reference() is the single place that turns either shape into the
synchronized (category_id, subcategory_id, subject) triple.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from audio_catalog.application.dtos.audio import (
    AudioCategoryRecord,
    AudioIssues,
    BatchFixResult,
    CategoryReference,
    CompatibilityReport,
    ConsistencyResult,
    LegacySubjectView,
    RelationalCategoryRef,
    SyncedFields,
)
from audio_catalog.application.dtos.category import CategoryResult, CategorySelection
from audio_catalog.core.constants import SUBJECT_ALIASES, UNCATEGORIZED_LABEL
from audio_catalog.domain.enums import CategoryLevel
from audio_catalog.domain.exceptions import CatalogException, DataInconsistencyException

logger = logging.getLogger(__name__)


def reference_of(audio: AudioCategoryRecord) -> CategoryReference | None:
    """Classify an audio's category reference. Relational ids take precedence."""
    if audio.has_relational_fields:
        return RelationalCategoryRef(audio.category_id, audio.subcategory_id)
    if audio.has_legacy_subject:
        return LegacySubjectView(audio.subject or "")
    return None


def _selection_for(category: CategoryResult) -> CategorySelection:
    if category.level == CategoryLevel.SECONDARY and category.parent_id:
        return CategorySelection(category.parent_id, category.id)
    return CategorySelection(category.id)


class CategoryCompatibilityAdapter:
    """Maps legacy subject strings to category selections and repairs audio references.

    fuzzy_match enables substring matching between subject and category
    names; it is applied only when exactly one category matches.
    """

    def __init__(
        self,
        *,
        fuzzy_match: bool = True,
        aliases: Mapping[str, str] | None = None,
        uncategorized_label: str = UNCATEGORIZED_LABEL,
    ) -> None:
        self.fuzzy_match = fuzzy_match
        self.aliases = dict(SUBJECT_ALIASES if aliases is None else aliases)
        self.uncategorized_label = uncategorized_label

    # ---- subject <-> selection ----

    def get_subject_from_selection(
        self, selection: CategorySelection, categories: Sequence[CategoryResult]
    ) -> str:
        """Subcategory name, else category name, else the uncategorized label."""
        by_id = {c.id: c for c in categories}
        for category_id in (selection.subcategory_id, selection.category_id):
            if category_id and category_id in by_id:
                return by_id[category_id].name
        return self.uncategorized_label

    def get_selection_from_subject(
        self, subject: str | None, categories: Sequence[CategoryResult]
    ) -> CategorySelection:
        """Infer a selection from a legacy subject.

        Order: exact name (primary preferred), unambiguous substring match
        in either direction, alias table. Returns an empty selection when
        nothing matches.
        """
        if not subject or not subject.strip():
            return CategorySelection()
        subject = subject.strip()

        exact = self._exact_match(subject, categories)
        if exact is not None:
            return _selection_for(exact)

        if self.fuzzy_match:
            candidates = [
                c for c in categories if c.name and (c.name in subject or subject in c.name)
            ]
            if len(candidates) == 1:
                return _selection_for(candidates[0])
            if len(candidates) > 1:
                logger.warning(
                    "Ambiguous subject %r matches %d categories (%s); skipping substring match",
                    subject,
                    len(candidates),
                    ", ".join(c.name for c in candidates),
                )

        canonical = self.aliases.get(subject)
        if canonical:
            aliased = self._exact_match(canonical, categories)
            if aliased is not None:
                return _selection_for(aliased)

        return CategorySelection()

    @staticmethod
    def _exact_match(
        name: str, categories: Sequence[CategoryResult]
    ) -> CategoryResult | None:
        matches = [c for c in categories if c.name == name]
        if not matches:
            return None
        return next((c for c in matches if c.level == CategoryLevel.PRIMARY), matches[0])

    # ---- normalization ----

    def normalize_reference(
        self,
        reference: CategoryReference | None,
        categories: Sequence[CategoryResult],
        *,
        strict: bool = False,
        audio_id: str = "",
    ) -> SyncedFields:
        """Turn either reference shape into a synchronized triple.

        Relational references win and regenerate subject. A subcategory id
        overrides the stated category_id with its real parent; ids pointing
        at the wrong level are moved to the right slot. Ids that point at no
        category are kept as-is, or raise DataInconsistencyException when
        strict. Legacy references infer ids from the subject and keep the
        subject text.
        """
        if reference is None:
            return SyncedFields(None, None, self.uncategorized_label)

        if isinstance(reference, LegacySubjectView):
            selection = self.get_selection_from_subject(reference.subject, categories)
            return SyncedFields(
                selection.category_id, selection.subcategory_id, reference.subject
            )

        by_id = {c.id: c for c in categories}
        category_id = reference.category_id
        subcategory_id = reference.subcategory_id

        orphaned = [
            f"{label} {ref_id} does not exist"
            for label, ref_id in (
                ("category_id", category_id),
                ("subcategory_id", subcategory_id),
            )
            if ref_id and ref_id not in by_id
        ]
        if orphaned and strict:
            raise DataInconsistencyException(audio_id, orphaned)

        sub = by_id.get(subcategory_id) if subcategory_id else None
        cat = by_id.get(category_id) if category_id else None

        if sub is not None and sub.level != CategoryLevel.SECONDARY:
            # subcategory slot holds a primary: promote it
            if cat is None or cat.id == sub.id:
                category_id, cat = sub.id, sub
            subcategory_id, sub = None, None
        if cat is not None and cat.level == CategoryLevel.SECONDARY:
            # category slot holds a secondary: demote it
            if sub is None:
                subcategory_id, sub = cat.id, cat
            category_id = cat.parent_id
            cat = by_id.get(category_id) if category_id else None
        if sub is not None and sub.parent_id and sub.parent_id != category_id:
            category_id = sub.parent_id

        subject = self.get_subject_from_selection(
            CategorySelection(category_id, subcategory_id), categories
        )
        return SyncedFields(category_id, subcategory_id, subject)

    def sync_audio_fields(
        self, audio: AudioCategoryRecord, categories: Sequence[CategoryResult]
    ) -> SyncedFields:
        """Reconcile an audio's subject with its relational ids (lenient)."""
        return self.normalize_reference(reference_of(audio), categories, audio_id=audio.id)

    # ---- consistency ----

    def validate_data_consistency(
        self, audio: AudioCategoryRecord, categories: Sequence[CategoryResult]
    ) -> ConsistencyResult:
        """Report orphaned ids, level and parent mismatches and subject drift. Never mutates."""
        issues: list[str] = []
        suggestions: list[str] = []
        by_id = {c.id: c for c in categories}

        if audio.category_id:
            category = by_id.get(audio.category_id)
            if category is None:
                issues.append(f"category_id {audio.category_id} does not exist")
                suggestions.append("Remove the dangling category reference")
            elif category.level != CategoryLevel.PRIMARY:
                issues.append(f"category_id {audio.category_id} is not a primary category")
                suggestions.append("Point category_id at a primary category")

        if audio.subcategory_id:
            subcategory = by_id.get(audio.subcategory_id)
            if subcategory is None:
                issues.append(f"subcategory_id {audio.subcategory_id} does not exist")
                suggestions.append("Remove the dangling subcategory reference")
            elif subcategory.level != CategoryLevel.SECONDARY:
                issues.append(
                    f"subcategory_id {audio.subcategory_id} is not a secondary category"
                )
                suggestions.append("Point subcategory_id at a secondary category")
            elif audio.category_id and subcategory.parent_id != audio.category_id:
                issues.append("subcategory does not belong to the stated category")
                suggestions.append("Set category_id to the subcategory's parent")

        if audio.has_relational_fields:
            expected = self.get_subject_from_selection(
                CategorySelection(audio.category_id, audio.subcategory_id), categories
            )
            if audio.subject and audio.subject != expected:
                issues.append(
                    f"subject {audio.subject!r} does not match the category selection, "
                    f"expected {expected!r}"
                )
                suggestions.append("Regenerate subject from the category fields")
        elif audio.has_legacy_subject:
            if self.get_selection_from_subject(audio.subject, categories).is_empty:
                issues.append(f"subject {audio.subject!r} does not match any category")
                suggestions.append("Add an alias or assign the category explicitly")

        return ConsistencyResult(issues, suggestions)

    def fix_data_inconsistency(
        self, audio: AudioCategoryRecord, categories: Sequence[CategoryResult]
    ) -> AudioCategoryRecord:
        """Return the audio with repaired category fields.

        Raises:
            DataInconsistencyException: when a relational id points at no category.
        """
        fields = self.normalize_reference(
            reference_of(audio), categories, strict=True, audio_id=audio.id
        )
        return audio.with_fields(fields)

    def batch_fix_data_inconsistency(
        self,
        audios: Sequence[AudioCategoryRecord],
        categories: Sequence[CategoryResult],
    ) -> BatchFixResult:
        """Fix each record independently; failures are collected, never raised."""
        fixed: list[AudioCategoryRecord] = []
        errors: list[dict[str, str]] = []
        for audio in audios:
            try:
                fixed.append(self.fix_data_inconsistency(audio, categories))
            except CatalogException as e:
                errors.append({"audio_id": audio.id, "error": e.message})
        return BatchFixResult(fixed, errors)

    def generate_compatibility_report(
        self,
        audios: Sequence[AudioCategoryRecord],
        categories: Sequence[CategoryResult],
    ) -> CompatibilityReport:
        with_new = 0
        legacy_only = 0
        issues: list[AudioIssues] = []
        for audio in audios:
            if audio.has_relational_fields:
                with_new += 1
            elif audio.has_legacy_subject:
                legacy_only += 1
            result = self.validate_data_consistency(audio, categories)
            if not result.is_consistent:
                issues.append(AudioIssues(audio.id, audio.title, result.issues))
        return CompatibilityReport(
            total_audios=len(audios),
            with_new_fields=with_new,
            with_legacy_only=legacy_only,
            inconsistent=len(issues),
            issues=issues,
        )

    # ---- legacy shapes ----

    def to_legacy_category(self, category: CategoryResult) -> dict[str, Any]:
        return {
            "id": category.id,
            "name": category.name,
            "description": category.description,
            "color": category.color,
            "icon": category.icon,
            "created_at": category.created_at,
            "updated_at": category.updated_at,
        }

    def to_legacy_audio(
        self, audio: AudioCategoryRecord, categories: Sequence[CategoryResult]
    ) -> dict[str, Any]:
        """Audio as legacy clients see it: id, title and a subject string only."""
        subject = audio.subject or self.get_subject_from_selection(
            CategorySelection(audio.category_id, audio.subcategory_id), categories
        )
        return {"id": audio.id, "title": audio.title, "subject": subject}

    def get_legacy_category_options(
        self, categories: Sequence[CategoryResult]
    ) -> list[dict[str, Any]]:
        """Primary categories as legacy subject options (value and label are the name)."""
        return [
            {"value": c.name, "label": c.name, "color": c.color, "icon": c.icon}
            for c in categories
            if c.level == CategoryLevel.PRIMARY
        ]

    def create_category_mapping(
        self, categories: Sequence[CategoryResult]
    ) -> dict[str, str]:
        """Map subject strings (names and aliases) to category ids."""
        mapping = {c.name: c.id for c in categories}
        for alias, canonical in self.aliases.items():
            if canonical in mapping:
                mapping.setdefault(alias, mapping[canonical])
        return mapping
