"""Tests for warning-label resolution against the bundled sample data."""
from __future__ import annotations

import pytest

from pharmacy_labels.indexes import build_indexes
from pharmacy_labels.reference import MedicationRecord, ReferenceData, WarningEntry, WarningLabel
from pharmacy_labels.resolver import WarningLabelResolver


@pytest.mark.parametrize(
    "drug, form, expected",
    [
        ("Amoxicillin", "Oral capsule", [9]),
        ("Tramadol", "Modified-release tablet", [2, 25]),
        ("Tramadol", "Oral capsule", [2]),
        ("Tramadol-Hydrochloride", "Oral capsule", [2]),
        ("Metformin", "Oral tablet", [21]),
        ("Metformin", "tabs", [21]),
        ("Metformin Hydrochloride", "MR tablet", [21, 25]),
        ("Warfarin Sodium", "Oral tablet", [10]),
        ("Sodium Warfarin", "Oral tablet", [10]),
        ("Lercanidipine-Hydrochloride", "oral tablet", [22]),
        ("Diltiazem", "Modified-release capsule", [25]),
        ("Metronidazole", "Oral suspension", [4, 9]),
        ("Isotretinoin", "Oral capsule", [10, 11, 21]),
        ("Hydrocortisone", "Cream", [28]),
    ],
)
def test_known_scenarios(resolver: WarningLabelResolver, drug: str, form: str, expected: list) -> None:
    assert resolver.resolve(drug, form) == expected


@pytest.mark.parametrize("drug", ["Tramadol/Paracetamol", "Tramadol with Paracetamol", "Paracetamol and Tramadol", "Tramacet"])
def test_combination_separators(resolver: WarningLabelResolver, drug: str) -> None:
    assert resolver.resolve(drug, "Oral tablet") == [2, 25, 29, 30]


@pytest.mark.parametrize("form", ["Capsule", "Capsules", "Oral capsules", "caps"])
def test_formulation_spellings(resolver: WarningLabelResolver, form: str) -> None:
    assert resolver.resolve("Amoxicillin", form) == [9]


@pytest.mark.parametrize(
    "drug, form",
    [
        ("NotARealDrug", "Oral tablet"),
        ("Amoxicillin", "Intravenous injection"),
        ("Docusate Sodium", "Oral capsule"),
        ("Amoxicillin", ""),
        ("", "Oral tablet"),
        ("   ", "Oral tablet"),
        ("Amoxicillin", "   "),
    ],
)
def test_no_match_is_an_empty_list(resolver: WarningLabelResolver, drug: str, form: str) -> None:
    assert resolver.resolve(drug, form) == []


def test_non_string_input_is_an_empty_list(resolver: WarningLabelResolver) -> None:
    assert resolver.resolve(None, "Oral tablet") == []  # type: ignore[arg-type]
    assert resolver.resolve("Amoxicillin", 3) == []  # type: ignore[arg-type]


def test_case_and_whitespace_insensitive(resolver: WarningLabelResolver) -> None:
    assert resolver.resolve("  AMOXICILLIN  ", "ORAL CAPSULE") == resolver.resolve("Amoxicillin", "Oral capsule")


def test_aliases_resolve_like_their_canonical_name(resolver: WarningLabelResolver, reference: ReferenceData) -> None:
    forms = sorted({form for entry in reference.warning_entries for form in entry.formulations})
    forms += ["Tablets", "caps", "Intravenous injection"]
    for record in reference.medications:
        for alias in record.aliases:
            for form in forms:
                assert resolver.resolve(alias, form) == resolver.resolve(record.name, form), (alias, form)


def test_brand_name_reaches_clinical_entry(resolver: WarningLabelResolver) -> None:
    assert resolver.resolve("Augmentin", "Oral tablet") == [9]
    assert resolver.resolve("Zanidip", "Oral tablet") == [22]
    assert resolver.resolve("Seretide", "Inhalation powder") == [8, 10]


def test_first_matching_entry_wins() -> None:
    broad = WarningEntry(names=("Example",), formulations=("tablet",), label_numbers=(1,))
    specific = WarningEntry(names=("Example",), formulations=("Modified-release tablet",), label_numbers=(1, 25))
    resolver = WarningLabelResolver(build_indexes(ReferenceData(warning_entries=[broad, specific])))
    assert resolver.resolve("Example", "Modified-release tablet") == [1]


def test_find_medication_prefers_name_index(resolver: WarningLabelResolver) -> None:
    assert resolver.find_medication("zydol").name == "Tramadol Hydrochloride"
    assert resolver.find_medication("Sodium Warfarin").name == "Warfarin Sodium"
    assert resolver.find_medication("NotARealDrug") is None
    assert resolver.find_medication("") is None


def test_warning_texts_follow_label_order(resolver: WarningLabelResolver) -> None:
    texts = resolver.warning_texts([25, 2, 999])
    assert len(texts) == 2
    assert texts[0].startswith("Swallow this medicine whole")
    assert texts[1].startswith("Warning: This medicine may make you sleepy")


def test_resolve_texts(resolver: WarningLabelResolver) -> None:
    assert resolver.resolve_texts("Amoxicillin", "Oral capsule") == [
        "Space the doses evenly throughout the day. Keep taking this medicine until the course is finished, unless you are told to stop"
    ]
    assert resolver.resolve_texts("NotARealDrug", "Oral capsule") == []


def test_classify_formulation(resolver: WarningLabelResolver) -> None:
    assert resolver.classify_formulation("Tabs") == "Oral Tablet"


def _ibuprofen_reference() -> ReferenceData:
    return ReferenceData(
        medications=[MedicationRecord(name="Ibuprofen", aliases=("Nurofen",))],
        warning_entries=[WarningEntry(names=("Ibuprofen",), formulations=("Oral tablet",), label_numbers=(21,))],
        warning_labels=[WarningLabel(label_number=21, text="Take with or just after food, or a meal")],
    )


def test_empty_formulation_table_is_not_replaced() -> None:
    resolver = WarningLabelResolver.from_reference(_ibuprofen_reference())
    assert resolver.resolve("Nurofen", "Oral tablet") == [21]
    assert resolver.resolve("Nurofen", "tabs") == []
    assert resolver.classify_formulation("Tabs") == "tabs"


def test_resolver_without_classifier_uses_bundled_aliases() -> None:
    resolver = WarningLabelResolver(build_indexes(_ibuprofen_reference()))
    assert resolver.resolve("Nurofen", "tabs") == [21]


@pytest.mark.parametrize("form", ["Eye drops", "EC capsule", "Suppositories", "Tabs", "Cream"])
def test_classification_does_not_depend_on_construction(reference: ReferenceData, form: str) -> None:
    loaded = WarningLabelResolver.from_reference(reference)
    direct = WarningLabelResolver(build_indexes(reference), labels=reference.warning_labels)
    assert loaded.classify_formulation(form) == direct.classify_formulation(form)
