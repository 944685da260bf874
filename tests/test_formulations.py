"""Tests for formulation classification and similarity."""
from __future__ import annotations

import pytest

from pharmacy_labels.formulations import FormulationClassifier


def test_classify_uses_category_label(classifier: FormulationClassifier) -> None:
    assert classifier.classify("Oral tablet") == "Oral Tablet"
    assert classifier.classify("  TABS ") == "Oral Tablet"
    assert classifier.classify("M/R tablet") == "Modified Release Tablet"


def test_classify_tolerates_plurals(classifier: FormulationClassifier) -> None:
    assert classifier.classify("Capsules") == "Oral Capsule"
    assert classifier.classify("Oral capsules") == "Oral Capsule"
    assert classifier.classify("Creams") == "Cutaneous Cream"


def test_unknown_formulation_passes_through(classifier: FormulationClassifier) -> None:
    assert classifier.classify("  Intravenous Injection ") == "intravenous injection"
    assert classifier.classify("") == ""


def test_first_declared_category_wins() -> None:
    classifier = FormulationClassifier({"first_group": ["tablet"], "second_group": ["tablet", "tab"]})
    assert classifier.classify("tablet") == "First Group"
    assert classifier.classify("tab") == "Second Group"


def test_similarity(classifier: FormulationClassifier) -> None:
    assert classifier.are_similar("Oral tablet", "oral tablet")
    assert classifier.are_similar("oral tablet", "tabs")
    assert classifier.are_similar("tabs", "oral tablet")
    assert classifier.are_similar("MR tablet", "Prolonged-release tablet")
    assert not classifier.are_similar("oral tablet", "oral capsule")
    assert not classifier.are_similar("oral capsule", "intravenous injection")


def test_similarity_is_reflexive_for_unknown_forms(classifier: FormulationClassifier) -> None:
    assert classifier.are_similar("nebuliser liquid", "Nebuliser Liquid")


def test_default_table_is_the_bundled_alias_file(classifier: FormulationClassifier) -> None:
    default = FormulationClassifier()
    assert default.categories == classifier.categories
    assert "notes" not in default.categories


@pytest.mark.parametrize(
    "form, expected",
    [
        ("caps", "Oral Capsule"),
        ("Eye drops", "Eye Drops"),
        ("EC capsule", "Gastro Resistant Capsule"),
        ("Suppositories", "Suppository"),
        ("Chewable tablets", "Chewable Tablet"),
    ],
)
def test_default_table_classification(form: str, expected: str) -> None:
    assert FormulationClassifier().classify(form) == expected


def test_empty_table_classifies_nothing() -> None:
    classifier = FormulationClassifier({})
    assert classifier.category_for("tablet") is None
    assert classifier.classify("Tablet") == "tablet"
