"""Resolve a drug name and formulation into warning-label numbers."""
from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .formulations import FormulationClassifier
from .indexes import Indexes, build_indexes
from .normalization import canonicalize, normalize_basic, normalize_raw
from .reference import MedicationRecord, ReferenceData, WarningEntry, WarningLabel

KeyFunction = Callable[[str], str]

# Precedence for probing an index with the user's input. The exact normalized
# form comes first so combination drugs are not over-matched by word sorting.
QUERY_KEY_ORDER: Tuple[KeyFunction, ...] = (normalize_basic, canonicalize, normalize_raw)
# Forms of a medication's name and aliases tried against the warning index.
RECORD_KEY_ORDER: Tuple[KeyFunction, ...] = (normalize_basic, canonicalize)


def _first_hit(index: Mapping[str, object], keys: Iterable[str]) -> Optional[object]:
    for key in keys:
        if not key:
            continue
        hit = index.get(key)
        if hit:
            return hit
    return None


class WarningLabelResolver:
    """Answer "which warning labels apply to this drug in this form?".

    Lookups never raise: unknown drugs, unmatched formulations and empty
    input all resolve to an empty list.
    """

    def __init__(
        self,
        indexes: Indexes,
        classifier: Optional[FormulationClassifier] = None,
        labels: Optional[Sequence[WarningLabel]] = None,
    ) -> None:
        self.indexes = indexes
        self.classifier = classifier if classifier is not None else FormulationClassifier()
        self.labels: Dict[int, WarningLabel] = {label.label_number: label for label in labels or ()}

    @classmethod
    def from_reference(cls, reference: ReferenceData) -> "WarningLabelResolver":
        return cls(build_indexes(reference), FormulationClassifier(reference.formulations), reference.warning_labels)

    def _query_keys(self, text: str) -> List[str]:
        return [key_function(text) for key_function in QUERY_KEY_ORDER]

    def find_medication(self, drug_name: str) -> Optional[MedicationRecord]:
        if not drug_name or not isinstance(drug_name, str):
            return None
        keys = self._query_keys(drug_name)
        return _first_hit(self.indexes.name_index, keys) or _first_hit(self.indexes.alias_index, keys)

    def _candidate_entries(self, drug_name: str) -> Sequence[WarningEntry]:
        entries = _first_hit(self.indexes.warning_index, self._query_keys(drug_name))
        if entries:
            return entries
        record = self.find_medication(drug_name)
        if record is None:
            return ()
        keys = [
            key_function(name)
            for name in (record.name,) + tuple(record.aliases)
            for key_function in RECORD_KEY_ORDER
        ]
        return _first_hit(self.indexes.warning_index, keys) or ()

    def _formulation_matches(self, entry: WarningEntry, form: str, standard_form: str) -> bool:
        for candidate in entry.formulations:
            entry_form = candidate.lower().strip()
            if not entry_form:
                continue
            if form in entry_form or entry_form in form:
                return True
            # The category label keeps its title case, so this only bites
            # when classification passed the input through unchanged.
            if standard_form in entry_form or entry_form in standard_form:
                return True
            if self.classifier.are_similar(entry_form, form):
                return True
        return False

    def resolve(self, drug_name: str, formulation: str) -> List[int]:
        """Return the label numbers of the first warning entry matching both inputs."""

        if not drug_name or not formulation:
            return []
        if not isinstance(drug_name, str) or not isinstance(formulation, str):
            return []
        form = normalize_raw(formulation)
        if not form or not drug_name.strip():
            return []
        standard_form = self.classifier.classify(form)
        for entry in self._candidate_entries(drug_name):
            if self._formulation_matches(entry, form, standard_form):
                return list(entry.label_numbers)
        return []

    def classify_formulation(self, formulation: str) -> str:
        return self.classifier.classify(formulation)

    def warning_texts(self, label_numbers: Iterable[int]) -> List[str]:
        """Look up label texts in the given order, skipping unknown numbers."""

        return [self.labels[number].text for number in label_numbers if number in self.labels]

    def resolve_texts(self, drug_name: str, formulation: str) -> List[str]:
        return self.warning_texts(self.resolve(drug_name, formulation))


__all__ = ["QUERY_KEY_ORDER", "RECORD_KEY_ORDER", "WarningLabelResolver"]
