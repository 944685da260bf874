"""Batch resolution of prescription rows into warning labels and directions."""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Dict, List, Optional

import pandas as pd

from .resolver import WarningLabelResolver
from .shorthand import ShorthandExpander

logger = logging.getLogger(__name__)

WARNING_SEPARATOR = "\n\n"


def _cell_text(row: pd.Series, column: Optional[str]) -> str:
    if not column or column not in row:
        return ""
    value = row[column]
    if pd.api.types.is_scalar(value) and pd.isna(value):
        return ""
    return str(value).strip()


@dataclass
class LabelRow:
    drug_name: str
    formulation: str
    formulation_category: str
    label_numbers: List[int] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    directions: str = ""
    expanded_directions: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {
            "Drug": self.drug_name,
            "Formulation": self.formulation,
            "Formulation Category": self.formulation_category,
            "Label Numbers": ", ".join(str(number) for number in self.label_numbers),
            "Warnings": WARNING_SEPARATOR.join(self.warnings),
            "Directions": self.directions,
            "Expanded Directions": self.expanded_directions,
        }


class LabelReportBuilder:
    """Resolve warning labels and expand directions for every row of a table."""

    def __init__(self, resolver: WarningLabelResolver, expander: Optional[ShorthandExpander] = None) -> None:
        self.resolver = resolver
        self.expander = expander or ShorthandExpander()

    def build_row(self, drug_name: str, formulation: str, directions: str = "") -> LabelRow:
        label_numbers = self.resolver.resolve(drug_name, formulation)
        return LabelRow(
            drug_name=drug_name,
            formulation=formulation,
            formulation_category=self.resolver.classify_formulation(formulation),
            label_numbers=label_numbers,
            warnings=self.resolver.warning_texts(label_numbers),
            directions=directions,
            expanded_directions=self.expander.expand(directions),
        )

    def build_report(
        self,
        frame: pd.DataFrame,
        *,
        drug_column: str,
        formulation_column: str,
        directions_column: Optional[str] = None,
    ) -> List[LabelRow]:
        missing = [column for column in (drug_column, formulation_column) if column not in frame.columns]
        if missing:
            raise KeyError(f"Input table is missing column(s): {', '.join(missing)}")
        if directions_column and directions_column not in frame.columns:
            raise KeyError(f"Input table is missing column: {directions_column}")

        rows: List[LabelRow] = []
        unmatched = 0
        for _, row in frame.iterrows():
            label_row = self.build_row(
                _cell_text(row, drug_column),
                _cell_text(row, formulation_column),
                _cell_text(row, directions_column),
            )
            if not label_row.label_numbers:
                unmatched += 1
            rows.append(label_row)
        logger.info("Resolved %d rows, %d without warning labels", len(rows), unmatched)
        return rows


def report_frame(rows: List[LabelRow]) -> pd.DataFrame:
    return pd.DataFrame([row.to_dict() for row in rows])


__all__ = ["LabelRow", "LabelReportBuilder", "report_frame"]
