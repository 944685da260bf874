"""Autocomplete suggestions for medication names and formulations."""
from __future__ import annotations

from typing import Dict, Iterable, List, Sequence, Tuple

from rapidfuzz import fuzz

from .formulations import COMMON_FORMULATIONS, FormulationClassifier
from .reference import MedicationRecord, WarningEntry

MIN_QUERY_LENGTH = 2


def _unique(values: Iterable[str], limit: int) -> List[str]:
    """First spelling of each value, compared case-insensitively, up to ``limit``."""

    seen: Dict[str, str] = {}
    for value in values:
        seen.setdefault(value.lower(), value)
        if len(seen) >= limit:
            break
    return list(seen.values())


class MedicationSuggester:
    """Suggest canonical medication names for a partial name or alias.

    Substring matches win; when there are none, names and aliases are scored
    with a token-set ratio and anything above ``fuzzy_threshold`` is offered.
    """

    def __init__(
        self,
        medications: Sequence[MedicationRecord],
        *,
        limit: int = 10,
        fuzzy_threshold: int = 80,
    ) -> None:
        self.medications = list(medications)
        self.limit = limit
        self.fuzzy_threshold = fuzzy_threshold

    def _substring_matches(self, query: str) -> List[str]:
        matches: List[str] = []
        for record in self.medications:
            names = (record.name,) + tuple(record.aliases)
            if any(query in name.lower() for name in names):
                matches.append(record.name)
        return matches

    def _fuzzy_matches(self, query: str) -> List[str]:
        best: Dict[str, float] = {}
        for record in self.medications:
            for name in (record.name,) + tuple(record.aliases):
                score = fuzz.token_set_ratio(query, name.lower())
                if score >= self.fuzzy_threshold and score > best.get(record.name, -1):
                    best[record.name] = score
        ranked: List[Tuple[str, float]] = sorted(best.items(), key=lambda item: item[1], reverse=True)
        return [name for name, _score in ranked]

    def suggest(self, text: str) -> List[str]:
        if not isinstance(text, str):
            return []
        query = text.strip().lower()
        if len(query) < MIN_QUERY_LENGTH:
            return []
        matches = self._substring_matches(query)
        if not matches:
            matches = self._fuzzy_matches(query)
        return _unique(matches, self.limit)


class FormulationSuggester:
    """Suggest formulation strings from the common list, alias table and warning data."""

    def __init__(
        self,
        classifier: FormulationClassifier,
        warning_entries: Sequence[WarningEntry] = (),
        *,
        limit: int = 15,
    ) -> None:
        self.classifier = classifier
        self.limit = limit
        self.warning_formulations = list(
            dict.fromkeys(form for entry in warning_entries for form in entry.formulations)
        )

    def suggest(self, text: str) -> List[str]:
        if not isinstance(text, str):
            return []
        query = text.strip().lower()
        if len(query) < MIN_QUERY_LENGTH:
            return []
        pools = (COMMON_FORMULATIONS, self.classifier.aliases(), self.warning_formulations)
        candidates = (form for pool in pools for form in pool if query in form.lower())
        return _unique(candidates, self.limit)


__all__ = ["MIN_QUERY_LENGTH", "MedicationSuggester", "FormulationSuggester"]
