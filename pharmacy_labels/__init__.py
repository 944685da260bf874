"""Warning-label resolution and shorthand expansion for dispensing labels."""

from .formulations import FormulationClassifier
from .indexes import Indexes, build_indexes
from .normalization import canonicalize, normalize_basic, normalize_separators
from .reference import (
    MedicationRecord,
    ReferenceData,
    ReferenceDataError,
    WarningEntry,
    WarningLabel,
    load_reference_data,
)
from .report import LabelReportBuilder, LabelRow
from .resolver import WarningLabelResolver
from .shorthand import ShorthandExpander
from .suggestions import FormulationSuggester, MedicationSuggester

__all__ = [
    "FormulationClassifier",
    "Indexes",
    "build_indexes",
    "canonicalize",
    "normalize_basic",
    "normalize_separators",
    "MedicationRecord",
    "ReferenceData",
    "ReferenceDataError",
    "WarningEntry",
    "WarningLabel",
    "load_reference_data",
    "LabelReportBuilder",
    "LabelRow",
    "WarningLabelResolver",
    "ShorthandExpander",
    "FormulationSuggester",
    "MedicationSuggester",
]
