"""Reference data types and loaders for the bundled or remote JSON tables."""
from __future__ import annotations

from dataclasses import dataclass, field
import json
import logging
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

import requests

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path(__file__).resolve().parent / "data"
DEFAULT_TIMEOUT = 10
REFERENCE_FILES: Dict[str, str] = {
    "medications": "drug_aliases.json",
    "formulations": "formulation_aliases.json",
    "labels": "bnf_labels.json",
    "warnings": "drug_formulations_warnings.json",
}
# Each file is looked for in these sub-locations of the source, in order.
SEARCH_PREFIXES: Tuple[str, ...] = ("data", "")


class ReferenceDataError(ValueError):
    """Raised when a reference table is missing or structurally invalid."""


@dataclass(frozen=True)
class MedicationRecord:
    name: str
    aliases: Tuple[str, ...] = ()


@dataclass(frozen=True)
class WarningEntry:
    """One row of the drug/formulation warning table."""

    names: Tuple[str, ...]
    formulations: Tuple[str, ...]
    label_numbers: Tuple[int, ...]


@dataclass(frozen=True)
class WarningLabel:
    label_number: int
    text: str


@dataclass
class ReferenceData:
    """Everything the resolver needs, as loaded from the four source tables."""

    medications: List[MedicationRecord] = field(default_factory=list)
    formulations: Dict[str, List[str]] = field(default_factory=dict)
    warning_entries: List[WarningEntry] = field(default_factory=list)
    warning_labels: List[WarningLabel] = field(default_factory=list)


def _string_list(value: object, context: str) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, (list, tuple)):
        raise ReferenceDataError(f"{context}: expected a list of strings, got {type(value).__name__}")
    items = []
    for item in value:
        if not isinstance(item, str):
            raise ReferenceDataError(f"{context}: non-string item {item!r}")
        items.append(item)
    return tuple(items)


def _label_number(value: object, context: str) -> int:
    # bool is an int subclass but never a valid label number.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ReferenceDataError(f"{context}: label number {value!r} is not an integer")
    return value


def parse_medications(payload: object) -> List[MedicationRecord]:
    if not isinstance(payload, list):
        raise ReferenceDataError("medication table must be a list")
    records: List[MedicationRecord] = []
    for position, item in enumerate(payload):
        context = f"medication #{position}"
        if not isinstance(item, Mapping) or not isinstance(item.get("name"), str):
            raise ReferenceDataError(f"{context}: expected an object with a string 'name'")
        records.append(
            MedicationRecord(name=item["name"], aliases=_string_list(item.get("aliases"), context))
        )
    return records


def parse_formulations(payload: object) -> Dict[str, List[str]]:
    """Accept the ``{"formulations": {...}}`` wrapper or a bare mapping."""

    if not isinstance(payload, Mapping):
        raise ReferenceDataError("formulation table must be an object")
    table = payload.get("formulations", payload)
    if not isinstance(table, Mapping):
        raise ReferenceDataError("'formulations' must be an object")
    categories: Dict[str, List[str]] = {}
    for category, aliases in table.items():
        if not isinstance(aliases, (list, tuple)):
            logger.debug("Skipping non-list formulation category %s", category)
            continue
        categories[str(category)] = list(_string_list(aliases, f"formulation category {category}"))
    return categories


def parse_warning_entries(payload: object) -> List[WarningEntry]:
    if not isinstance(payload, list):
        raise ReferenceDataError("warning table must be a list")
    entries: List[WarningEntry] = []
    for position, item in enumerate(payload):
        context = f"warning entry #{position}"
        if not isinstance(item, Mapping):
            raise ReferenceDataError(f"{context}: expected an object")
        names = _string_list(item.get("name"), context)
        if not names:
            raise ReferenceDataError(f"{context}: no drug names")
        labels = item.get("label_number") or []
        if not isinstance(labels, (list, tuple)):
            raise ReferenceDataError(f"{context}: 'label_number' must be a list")
        entries.append(
            WarningEntry(
                names=names,
                formulations=_string_list(item.get("formulation"), context),
                label_numbers=tuple(_label_number(value, context) for value in labels),
            )
        )
    return entries


def parse_warning_labels(payload: object) -> List[WarningLabel]:
    """Parse ``{"cautionary_advisory_labels": [...]}`` or a bare list."""

    if isinstance(payload, Mapping):
        payload = payload.get("cautionary_advisory_labels", [])
    if not isinstance(payload, list):
        raise ReferenceDataError("warning label catalog must be a list")
    labels: List[WarningLabel] = []
    for position, item in enumerate(payload):
        context = f"warning label #{position}"
        if not isinstance(item, Mapping) or not isinstance(item.get("text"), str):
            raise ReferenceDataError(f"{context}: expected an object with a string 'text'")
        labels.append(
            WarningLabel(label_number=_label_number(item.get("label_number"), context), text=item["text"])
        )
    return labels


def _is_url(source: Union[str, Path]) -> bool:
    return isinstance(source, str) and source.lower().startswith(("http://", "https://"))


def _candidate_locations(source: Union[str, Path], filename: str) -> List[str]:
    locations: List[str] = []
    for prefix in SEARCH_PREFIXES:
        if _is_url(source):
            parts = [str(source).rstrip("/")] + ([prefix] if prefix else []) + [filename]
            locations.append("/".join(parts))
        else:
            base = Path(source).expanduser()
            locations.append(str(base / prefix / filename if prefix else base / filename))
    return locations


def _read_json(location: str, timeout: int) -> object:
    if _is_url(location):
        response = requests.get(location, timeout=timeout)
        response.raise_for_status()
        return response.json()
    return json.loads(Path(location).read_text(encoding="utf-8"))


def fetch_table(source: Union[str, Path], filename: str, timeout: int = DEFAULT_TIMEOUT) -> object:
    """Read one JSON table, trying each candidate location in turn."""

    last_error: Optional[Exception] = None
    for location in _candidate_locations(source, filename):
        try:
            return _read_json(location, timeout)
        except (requests.RequestException, OSError, ValueError) as exc:
            logger.debug("Could not read %s: %s", location, exc)
            last_error = exc
    raise ReferenceDataError(f"Unable to load {filename} from {source}") from last_error


def bundled_formulations() -> Dict[str, List[str]]:
    """The formulation alias table shipped in the package data directory."""

    return parse_formulations(fetch_table(DEFAULT_DATA_DIR, REFERENCE_FILES["formulations"]))


def _check_label_references(entries: Sequence[WarningEntry], labels: Sequence[WarningLabel]) -> None:
    if not labels:
        return
    known = {label.label_number for label in labels}
    missing = sorted({number for entry in entries for number in entry.label_numbers if number not in known})
    if missing:
        logger.warning("Warning entries reference unknown label numbers: %s", missing)


def load_reference_data(
    source: Optional[Union[str, Path]] = None,
    *,
    timeout: int = DEFAULT_TIMEOUT,
) -> ReferenceData:
    """Load all four reference tables from a directory or an HTTP base URL.

    Without ``source`` the sample tables bundled with the package are used.
    """

    source = DEFAULT_DATA_DIR if source is None else source
    medications = parse_medications(fetch_table(source, REFERENCE_FILES["medications"], timeout))
    formulations = parse_formulations(fetch_table(source, REFERENCE_FILES["formulations"], timeout))
    labels = parse_warning_labels(fetch_table(source, REFERENCE_FILES["labels"], timeout))
    entries = parse_warning_entries(fetch_table(source, REFERENCE_FILES["warnings"], timeout))
    _check_label_references(entries, labels)
    logger.info(
        "Loaded %d medications, %d warning labels, %d warning entries from %s",
        len(medications),
        len(labels),
        len(entries),
        source,
    )
    return ReferenceData(
        medications=medications,
        formulations=formulations,
        warning_entries=entries,
        warning_labels=labels,
    )


__all__ = [
    "ReferenceDataError",
    "MedicationRecord",
    "WarningEntry",
    "WarningLabel",
    "ReferenceData",
    "parse_medications",
    "parse_formulations",
    "parse_warning_entries",
    "parse_warning_labels",
    "fetch_table",
    "bundled_formulations",
    "load_reference_data",
]
