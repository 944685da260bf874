"""Dosage-form classification against a table of formulation aliases."""
from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .reference import bundled_formulations

# Offered by the formulation autocomplete before any table lookups.
COMMON_FORMULATIONS: Tuple[str, ...] = (
    "Tablets",
    "Oral tablet",
    "Modified release tablet",
    "MR tablet",
    "Gastro resistant tablet",
    "Enteric coated tablet",
    "Dispersible tablet",
    "Soluble tablet",
    "Chewable tablet",
    "Orodispersible tablet",
    "Sublingual tablet",
    "Buccal tablet",
    "Effervescent tablet",
    "Capsules",
    "Oral capsule",
    "Hard capsule",
    "Soft capsule",
    "Modified release capsule",
    "Gastro resistant capsule",
    "Oral Solution",
    "Oral Suspension",
    "Oral liquid",
    "Syrup",
    "Elixir",
    "Oral drops",
    "Injection",
    "Solution for injection",
    "Powder for injection",
    "Cream",
    "Ointment",
    "Gel",
    "Lotion",
    "Eye Drops",
    "Eye ointment",
    "Ear drops",
    "Nasal spray",
    "Inhaler",
    "Dry powder inhaler",
    "Inhalation powder",
    "Nebuliser solution",
    "Suppositories",
    "Transdermal patch",
    "Granules",
    "Pessary",
)


def _clean(value: str) -> str:
    if not value or not isinstance(value, str):
        return ""
    return value.lower().strip()


def _category_label(category: str) -> str:
    return " ".join(word[:1].upper() + word[1:] for word in category.split("_"))


def _alias_matches(form: str, aliases: Iterable[str]) -> bool:
    """Exact alias match, tolerating a trailing plural "s" either way."""

    alias_set = set(aliases)
    if form in alias_set:
        return True
    if form.endswith("s"):
        return form[:-1] in alias_set
    return form + "s" in alias_set


class FormulationClassifier:
    """Map free-text formulations onto standard categories.

    Categories are tried in declaration order; the first one whose aliases
    contain the (lowercased, trimmed) input wins. Without an explicit table
    the bundled formulation_aliases.json is used.
    """

    def __init__(self, categories: Optional[Mapping[str, Sequence[str]]] = None) -> None:
        source = bundled_formulations() if categories is None else categories
        self.categories: Dict[str, Tuple[str, ...]] = {
            category: tuple(_clean(alias) for alias in aliases if _clean(alias))
            for category, aliases in source.items()
        }

    def category_for(self, formulation: str) -> Optional[str]:
        form = _clean(formulation)
        if not form:
            return None
        for category, aliases in self.categories.items():
            if _alias_matches(form, aliases):
                return category
        return None

    def classify(self, formulation: str) -> str:
        """Return the human-readable category, or the cleaned input if none applies."""

        form = _clean(formulation)
        if not form:
            return ""
        category = self.category_for(form)
        if category is None:
            return form
        return _category_label(category)

    def are_similar(self, first: str, second: str) -> bool:
        form_a = _clean(first)
        form_b = _clean(second)
        if form_a == form_b:
            return True
        if self.classify(form_a) == self.classify(form_b):
            return True
        return any(
            _alias_matches(form_a, aliases) and _alias_matches(form_b, aliases)
            for aliases in self.categories.values()
        )

    def aliases(self) -> List[str]:
        return [alias for aliases in self.categories.values() for alias in aliases]


__all__ = [
    "COMMON_FORMULATIONS",
    "FormulationClassifier",
]
