"""Shared fixtures built from the sample reference tables bundled with the package."""
from __future__ import annotations

import pytest

from pharmacy_labels.formulations import FormulationClassifier
from pharmacy_labels.reference import ReferenceData, load_reference_data
from pharmacy_labels.resolver import WarningLabelResolver
from pharmacy_labels.shorthand import ShorthandExpander


@pytest.fixture(scope="session")
def reference() -> ReferenceData:
    return load_reference_data()


@pytest.fixture(scope="session")
def classifier(reference: ReferenceData) -> FormulationClassifier:
    return FormulationClassifier(reference.formulations)


@pytest.fixture(scope="session")
def resolver(reference: ReferenceData) -> WarningLabelResolver:
    return WarningLabelResolver.from_reference(reference)


@pytest.fixture
def expander() -> ShorthandExpander:
    return ShorthandExpander()
