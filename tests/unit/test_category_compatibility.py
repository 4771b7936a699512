"""Tests for the legacy subject <-> category id compatibility adapter."""

import logging

import pytest

from audio_catalog.application.dtos.audio import (
    AudioCategoryRecord,
    LegacySubjectView,
    RelationalCategoryRef,
    SyncedFields,
)
from audio_catalog.application.dtos.category import CategoryResult, CategorySelection
from audio_catalog.application.services import CategoryCompatibilityAdapter, reference_of
from audio_catalog.domain.exceptions import DataInconsistencyException
from tests.conftest import make_category


def _categories() -> list[CategoryResult]:
    return [
        make_category("cardio", "心血管"),
        make_category("arrhythmia", "心律失常", "cardio"),
        make_category("hypertension", "高血压", "cardio", sort_order=1),
        make_category("neuro", "神经科", sort_order=1),
        make_category("onco", "肿瘤科", sort_order=2),
    ]


@pytest.fixture
def adapter() -> CategoryCompatibilityAdapter:
    return CategoryCompatibilityAdapter()


def test_subject_from_selection(adapter: CategoryCompatibilityAdapter) -> None:
    categories = _categories()
    assert adapter.get_subject_from_selection(CategorySelection("cardio", "arrhythmia"), categories) == "心律失常"
    assert adapter.get_subject_from_selection(CategorySelection("cardio"), categories) == "心血管"
    assert adapter.get_subject_from_selection(CategorySelection(), categories) == "未分类"
    assert adapter.get_subject_from_selection(CategorySelection("ghost"), categories) == "未分类"


def test_subject_round_trips_through_selection(adapter: CategoryCompatibilityAdapter) -> None:
    categories = _categories()
    for category in categories:
        selection = (
            CategorySelection(category.parent_id, category.id)
            if category.parent_id
            else CategorySelection(category.id)
        )
        subject = adapter.get_subject_from_selection(selection, categories)
        assert adapter.get_selection_from_subject(subject, categories) == selection


def test_blank_subject_gives_empty_selection(adapter: CategoryCompatibilityAdapter) -> None:
    assert adapter.get_selection_from_subject("  ", _categories()).is_empty
    assert adapter.get_selection_from_subject(None, _categories()).is_empty


def test_substring_match_in_either_direction(adapter: CategoryCompatibilityAdapter) -> None:
    categories = _categories()
    assert adapter.get_selection_from_subject("心血管科", categories) == CategorySelection("cardio")
    assert adapter.get_selection_from_subject("心律", categories) == CategorySelection(
        "cardio", "arrhythmia"
    )


def test_alias_table_resolves_historical_names(adapter: CategoryCompatibilityAdapter) -> None:
    categories = _categories()
    assert adapter.get_selection_from_subject("心内科", categories) == CategorySelection("cardio")
    assert adapter.get_selection_from_subject("脑科", categories) == CategorySelection("neuro")


def test_ambiguous_substring_match_is_skipped(
    adapter: CategoryCompatibilityAdapter, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.WARNING):
        selection = adapter.get_selection_from_subject("科", _categories())
    assert selection.is_empty
    assert "Ambiguous subject" in caplog.text


def test_fuzzy_match_can_be_disabled() -> None:
    adapter = CategoryCompatibilityAdapter(fuzzy_match=False)
    assert adapter.get_selection_from_subject("心律", _categories()).is_empty
    assert adapter.get_selection_from_subject("心内科", _categories()) == CategorySelection("cardio")


def test_exact_match_prefers_primary(adapter: CategoryCompatibilityAdapter) -> None:
    categories = [make_category("neuro-sub", "神经科", "onco"), *_categories()]
    assert adapter.get_selection_from_subject("神经科", categories) == CategorySelection("neuro")


def test_reference_of_prefers_relational_ids() -> None:
    both = AudioCategoryRecord("a", subject="神经科", category_id="cardio")
    assert reference_of(both) == RelationalCategoryRef("cardio", None)
    assert reference_of(AudioCategoryRecord("b", subject="神经科")) == LegacySubjectView("神经科")
    assert reference_of(AudioCategoryRecord("c")) is None


@pytest.mark.parametrize(
    "reference,expected",
    [
        (None, SyncedFields(None, None, "未分类")),
        (LegacySubjectView("心内科"), SyncedFields("cardio", None, "心内科")),
        (RelationalCategoryRef(None, "arrhythmia"), SyncedFields("cardio", "arrhythmia", "心律失常")),
        (RelationalCategoryRef("neuro", "arrhythmia"), SyncedFields("cardio", "arrhythmia", "心律失常")),
        (RelationalCategoryRef("arrhythmia", None), SyncedFields("cardio", "arrhythmia", "心律失常")),
        (RelationalCategoryRef(None, "neuro"), SyncedFields("neuro", None, "神经科")),
        (RelationalCategoryRef("ghost", None), SyncedFields("ghost", None, "未分类")),
    ],
)
def test_normalize_reference(
    adapter: CategoryCompatibilityAdapter, reference, expected: SyncedFields
) -> None:
    assert adapter.normalize_reference(reference, _categories()) == expected


def test_strict_normalize_rejects_dangling_ids(adapter: CategoryCompatibilityAdapter) -> None:
    with pytest.raises(DataInconsistencyException) as exc_info:
        adapter.normalize_reference(
            RelationalCategoryRef("cardio", "ghost"), _categories(), strict=True, audio_id="a-9"
        )
    assert exc_info.value.details["audio_id"] == "a-9"
    assert exc_info.value.details["issues"] == ["subcategory_id ghost does not exist"]


def test_sync_audio_fields_regenerates_subject(adapter: CategoryCompatibilityAdapter) -> None:
    audio = AudioCategoryRecord("a", subject="旧名称", category_id="cardio", subcategory_id="hypertension")
    assert adapter.sync_audio_fields(audio, _categories()) == SyncedFields(
        "cardio", "hypertension", "高血压"
    )


def test_batch_fix_isolates_failures(adapter: CategoryCompatibilityAdapter) -> None:
    """Three records, one pointing at a deleted category: two fixed, one error."""
    audios = [
        AudioCategoryRecord("a1", subject="神经科", category_id="neuro", subcategory_id="arrhythmia"),
        AudioCategoryRecord("a2", subject="心内科"),
        AudioCategoryRecord("a3", subject="旧", category_id="ghost"),
    ]
    result = adapter.batch_fix_data_inconsistency(audios, _categories())
    assert [a.id for a in result.fixed] == ["a1", "a2"]
    assert result.fixed[0].category_id == "cardio"
    assert result.fixed[0].subject == "心律失常"
    assert result.fixed[1].category_id == "cardio"
    assert result.fixed[1].subject == "心内科"
    assert len(result.errors) == 1
    assert result.errors[0]["audio_id"] == "a3"


def test_consistent_record_has_no_issues(adapter: CategoryCompatibilityAdapter) -> None:
    audio = AudioCategoryRecord("a", subject="心律失常", category_id="cardio", subcategory_id="arrhythmia")
    assert adapter.validate_data_consistency(audio, _categories()).is_consistent


def test_parent_mismatch_and_subject_drift_are_reported(
    adapter: CategoryCompatibilityAdapter,
) -> None:
    audio = AudioCategoryRecord("a", subject="神经科", category_id="neuro", subcategory_id="arrhythmia")
    result = adapter.validate_data_consistency(audio, _categories())
    assert len(result.issues) == 2
    assert len(result.suggestions) == 2
    assert "does not belong" in result.issues[0]


def test_wrong_level_and_dangling_ids_are_reported(adapter: CategoryCompatibilityAdapter) -> None:
    audio = AudioCategoryRecord("a", category_id="arrhythmia", subcategory_id="ghost")
    issues = adapter.validate_data_consistency(audio, _categories()).issues
    assert "category_id arrhythmia is not a primary category" in issues
    assert "subcategory_id ghost does not exist" in issues


def test_unmatched_legacy_subject_is_reported(adapter: CategoryCompatibilityAdapter) -> None:
    audio = AudioCategoryRecord("a", subject="皮肤科")
    assert not adapter.validate_data_consistency(audio, _categories()).is_consistent


def test_compatibility_report(adapter: CategoryCompatibilityAdapter) -> None:
    audios = [
        AudioCategoryRecord("a1", "One", "心律失常", "cardio", "arrhythmia"),
        AudioCategoryRecord("a2", "Two", "心内科"),
        AudioCategoryRecord("a3", "Three", "皮肤科"),
        AudioCategoryRecord("a4", "Four"),
    ]
    report = adapter.generate_compatibility_report(audios, _categories())
    assert report.total_audios == 4
    assert report.with_new_fields == 1
    assert report.with_legacy_only == 2
    assert report.inconsistent == 1
    assert report.issues[0].audio_id == "a3"
    assert report.issues[0].title == "Three"


def test_legacy_shapes(adapter: CategoryCompatibilityAdapter) -> None:
    categories = _categories()
    audio = AudioCategoryRecord("a", "Talk", category_id="cardio", subcategory_id="hypertension")
    assert adapter.to_legacy_audio(audio, categories) == {"id": "a", "title": "Talk", "subject": "高血压"}
    assert adapter.to_legacy_category(categories[0])["name"] == "心血管"
    options = adapter.get_legacy_category_options(categories)
    assert [o["value"] for o in options] == ["心血管", "神经科", "肿瘤科"]


def test_category_mapping_includes_aliases(adapter: CategoryCompatibilityAdapter) -> None:
    mapping = adapter.create_category_mapping(_categories())
    assert mapping["心律失常"] == "arrhythmia"
    assert mapping["心内科"] == "cardio"
    assert mapping["癌症科"] == "onco"
    assert "肿瘤内科" in mapping
