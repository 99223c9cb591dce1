"""
Parser for jstat's tabular output. No external deps.

jstat prints a header line of column names followed by one data row per
sample; we only ever ask for one sample, so only the first data row is
read. Columns are separated by runs of whitespace.

    S0C    S1C    S0U    S1U      EC       EU        OC         OU  ...
    512.0  512.0   0.0   128.0  4352.0   2810.4   10944.0     6213.2  ...
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from jstat_exporter.errors import MalformedOutputError
from jstat_exporter.metrics import FieldMapping


@dataclass
class JstatTable:
    report: str
    columns: List[str] = field(default_factory=list)
    values: List[str] = field(default_factory=list)

    @property
    def by_name(self) -> Dict[str, str]:
        return dict(zip(self.columns, self.values))

    def raw(self, mapping: FieldMapping, positional: bool = False) -> Optional[str]:
        """The raw text for a mapped column, or None if the row has no such field."""
        if positional:
            if 0 <= mapping.index < len(self.values):
                return self.values[mapping.index]
            return None
        return self.by_name.get(mapping.column)


def parse_jstat_output(text: str, report: str = "") -> JstatTable:
    """Split jstat output into header column names and the first data row.

    Raises MalformedOutputError when there is no data row.
    """
    lines = text.split("\n")

    header = lines[0].split() if lines else []
    if len(lines) < 2 or not lines[1].strip():
        raise MalformedOutputError("jstat output has no data row", report=report)

    return JstatTable(report=report, columns=header, values=lines[1].split())


def parse_field(table: JstatTable, mapping: FieldMapping, positional: bool = False) -> float:
    raw = table.raw(mapping, positional=positional)
    if raw is None:
        raise MalformedOutputError(
            "field missing from jstat output",
            report=table.report,
            metric=mapping.metric.name,
            column=mapping.column if not positional else f"#{mapping.index}",
        )

    try:
        return float(raw)
    except ValueError:
        raise MalformedOutputError(
            "field is not numeric",
            report=table.report,
            metric=mapping.metric.name,
            column=mapping.column if not positional else f"#{mapping.index}",
            raw=raw,
        ) from None
