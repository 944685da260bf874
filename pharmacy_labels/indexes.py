"""Build-once lookup indexes over medication names and warning entries."""
from __future__ import annotations

from dataclasses import dataclass
import logging
import re
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Tuple

from .normalization import name_variants
from .reference import MedicationRecord, ReferenceData, WarningEntry

logger = logging.getLogger(__name__)

SPECIALIST_MARKER = re.compile(r"-Specialist-Drug$", re.IGNORECASE)


@dataclass(frozen=True)
class Indexes:
    """Read-only name, alias and warning indexes keyed by name variants."""

    name_index: Mapping[str, MedicationRecord]
    alias_index: Mapping[str, MedicationRecord]
    warning_index: Mapping[str, Tuple[WarningEntry, ...]]


def strip_marker(name: str) -> str:
    return SPECIALIST_MARKER.sub("", name)


def _index_records(
    index: Dict[str, MedicationRecord],
    name: str,
    record: MedicationRecord,
    collisions: List[str],
) -> None:
    for key in name_variants(name):
        if not key:
            continue
        previous = index.get(key)
        if previous is not None and previous.name != record.name:
            collisions.append(key)
        index[key] = record


def build_medication_indexes(
    medications: Iterable[MedicationRecord],
) -> Tuple[Dict[str, MedicationRecord], Dict[str, MedicationRecord]]:
    """Index every canonical name and alias; a later record overwrites an earlier one."""

    name_index: Dict[str, MedicationRecord] = {}
    alias_index: Dict[str, MedicationRecord] = {}
    collisions: List[str] = []
    for record in medications:
        _index_records(name_index, record.name, record, collisions)
        for alias in record.aliases:
            _index_records(alias_index, alias, record, collisions)
    if collisions:
        logger.debug("%d medication keys were overwritten: %s", len(collisions), sorted(set(collisions)))
    return name_index, alias_index


def build_warning_index(entries: Iterable[WarningEntry]) -> Dict[str, List[WarningEntry]]:
    """Map name variants to warning entries in source order, without duplicates."""

    index: Dict[str, List[WarningEntry]] = {}
    for entry in entries:
        for raw_name in entry.names:
            for key in name_variants(strip_marker(raw_name)):
                if not key:
                    continue
                bucket = index.setdefault(key, [])
                if entry not in bucket:
                    bucket.append(entry)
    return index


def build_indexes(reference: ReferenceData) -> Indexes:
    name_index, alias_index = build_medication_indexes(reference.medications)
    warning_index = build_warning_index(reference.warning_entries)
    logger.debug(
        "Built indexes: %d names, %d aliases, %d warning keys",
        len(name_index),
        len(alias_index),
        len(warning_index),
    )
    return Indexes(
        name_index=MappingProxyType(name_index),
        alias_index=MappingProxyType(alias_index),
        warning_index=MappingProxyType({key: tuple(bucket) for key, bucket in warning_index.items()}),
    )


__all__ = [
    "Indexes",
    "strip_marker",
    "build_medication_indexes",
    "build_warning_index",
    "build_indexes",
]
