"""Normalization helpers that turn free-text drug names into index keys."""
from __future__ import annotations

from functools import lru_cache
import re
from typing import Tuple

HYPHEN_WHITESPACE = re.compile(r"[-\s]+")
WHITESPACE = re.compile(r"\s+")
# Combination-drug separators: "/", "-", "+", "&" and the words "with"/"and".
SEPARATORS = re.compile(r"\s*(?:[/+&-]|\bwith\b|\band\b)\s*", re.IGNORECASE)


@lru_cache(maxsize=None)
def _normalize_raw(value: str) -> str:
    return value.lower().strip()


@lru_cache(maxsize=None)
def _normalize_basic(value: str) -> str:
    return HYPHEN_WHITESPACE.sub(" ", value.lower()).strip()


@lru_cache(maxsize=None)
def _normalize_separators(value: str) -> str:
    cleaned = SEPARATORS.sub(" ", value.lower())
    return WHITESPACE.sub(" ", cleaned).strip()


@lru_cache(maxsize=None)
def _canonicalize(value: str) -> str:
    tokens = [token for token in _normalize_separators(value).split(" ") if token]
    return " ".join(sorted(tokens))


def normalize_raw(value: str) -> str:
    """Lowercase and trim, nothing else."""

    if not value or not isinstance(value, str):
        return ""
    return _normalize_raw(value)


def normalize_basic(value: str) -> str:
    """Lowercase, trim and collapse runs of hyphens/whitespace to one space."""

    if not value or not isinstance(value, str):
        return ""
    return _normalize_basic(value)


def normalize_separators(value: str) -> str:
    """Treat combination separators ("/", "-", "+", "&", "with", "and") as spaces.

    ``"Tramadol/Paracetamol"``, ``"Tramadol with Paracetamol"`` and
    ``"tramadol + paracetamol"`` all become ``"tramadol paracetamol"``.
    """

    if not value or not isinstance(value, str):
        return ""
    return _normalize_separators(value)


def canonicalize(value: str) -> str:
    """Return the word-sorted, separator-normalized form of ``value``.

    The result does not depend on word order, so ``"Warfarin Sodium"`` and
    ``"Sodium Warfarin"`` share the key ``"sodium warfarin"``.
    """

    if not value or not isinstance(value, str):
        return ""
    return _canonicalize(value)


def name_variants(value: str) -> Tuple[str, str, str]:
    """Return the three index keys of a name: basic, canonical and raw."""

    return normalize_basic(value), canonicalize(value), normalize_raw(value)


def clear_normalization_cache() -> None:
    """Drop every memoized normalization result."""

    for cached in (_normalize_raw, _normalize_basic, _normalize_separators, _canonicalize):
        cached.cache_clear()


__all__ = [
    "normalize_raw",
    "normalize_basic",
    "normalize_separators",
    "canonicalize",
    "name_variants",
    "clear_normalization_cache",
]
