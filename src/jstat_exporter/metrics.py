"""
Core metric definitions for jstat_exporter.

These mirror the columns jstat prints for -gccapacity, -gcold, -gcnew
and -gc. Sizes are in KB and times in seconds, exactly as jstat reports
them; nothing is rescaled on the way through.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple

NAMESPACE = "jstat"


class MetricKind(str, Enum):
    GAUGE = "gauge"
    COUNTER = "counter"


class ReportType(str, Enum):
    """jstat report modes. The value is the command-line flag."""

    CAPACITY = "-gccapacity"
    OLD = "-gcold"
    NEW = "-gcnew"
    GC = "-gc"

    @property
    def flag(self) -> str:
        return self.value


@dataclass(frozen=True)
class MetricDefinition:
    name: str
    kind: MetricKind = MetricKind.GAUGE
    help: str = ""

    @property
    def full_name(self) -> str:
        return f"{NAMESPACE}_{self.name}"


@dataclass(frozen=True)
class FieldMapping:
    """One jstat column feeding one metric.

    `column` is the header name, `index` the 0-based position in the
    whitespace-split data row (used in positional mode).
    """

    column: str
    index: int
    metric: MetricDefinition


def _gauge(name: str, help: str) -> MetricDefinition:
    return MetricDefinition(name=name, kind=MetricKind.GAUGE, help=help)


def _counter(name: str, help: str) -> MetricDefinition:
    return MetricDefinition(name=name, kind=MetricKind.COUNTER, help=help)


# Column layout is the JDK 8 one. Newer JDKs insert CGC/CGCT before GCT,
# which only matters in positional mode.
DEFAULT_FIELD_MAPPINGS: Dict[ReportType, Tuple[FieldMapping, ...]] = {
    ReportType.CAPACITY: (
        FieldMapping("NGCMX", 1, _gauge("newMax", "Maximum new generation capacity (KB).")),
        FieldMapping("NGC", 2, _gauge("newCommit", "Current new generation capacity (KB).")),
        FieldMapping("OGCMX", 7, _gauge("oldMax", "Maximum old generation capacity (KB).")),
        FieldMapping("OGC", 8, _gauge("oldCommit", "Current old generation capacity (KB).")),
        FieldMapping("MCMX", 11, _gauge("metaMax", "Maximum metaspace capacity (KB).")),
        FieldMapping("MC", 12, _gauge("metaCommit", "Metaspace capacity (KB).")),
    ),
    ReportType.OLD: (
        FieldMapping("MU", 1, _gauge("metaUsed", "Metaspace utilization (KB).")),
        FieldMapping("OC", 4, _gauge("oldCap", "Old space capacity (KB).")),
        FieldMapping("OU", 5, _gauge("oldUsed", "Old space utilization (KB).")),
    ),
    ReportType.NEW: (
        FieldMapping("S0C", 0, _gauge("sv0Cap", "Survivor space 0 capacity (KB).")),
        FieldMapping("S1C", 1, _gauge("sv1Cap", "Survivor space 1 capacity (KB).")),
        FieldMapping("S0U", 2, _gauge("sv0Used", "Survivor space 0 utilization (KB).")),
        FieldMapping("S1U", 3, _gauge("sv1Used", "Survivor space 1 utilization (KB).")),
        FieldMapping("EC", 7, _gauge("edenCap", "Eden space capacity (KB).")),
        FieldMapping("EU", 8, _gauge("edenUsed", "Eden space utilization (KB).")),
    ),
    ReportType.GC: (
        FieldMapping("YGC", 12, _counter("ygcTimes", "Number of young generation GC events.")),
        FieldMapping("YGCT", 13, _gauge("ygcSec", "Young generation GC time (seconds).")),
        FieldMapping("FGC", 14, _counter("fgcTimes", "Number of full GC events.")),
        FieldMapping("FGCT", 15, _gauge("fgcSec", "Full GC time (seconds).")),
        FieldMapping("GCT", 16, _gauge("gcSec", "Total GC time (seconds).")),
    ),
}


def all_definitions(
    mappings: Dict[ReportType, Tuple[FieldMapping, ...]] = DEFAULT_FIELD_MAPPINGS,
) -> List[MetricDefinition]:
    return [m.metric for report in ReportType for m in mappings.get(report, ())]


@dataclass
class JvmSnapshot:
    """A single point-in-time reading of one JVM."""

    timestamp: datetime
    gauges: Dict[str, float] = field(default_factory=dict)
    counters: Dict[str, float] = field(default_factory=dict)

    # Counters that saw the target restart during this cycle
    resets: List[str] = field(default_factory=list)

    duration_seconds: float = 0.0

    @property
    def values(self) -> Dict[str, float]:
        merged = dict(self.gauges)
        merged.update(self.counters)
        return merged

    def get(self, name: str, default: Optional[float] = None) -> Optional[float]:
        return self.values.get(name, default)

    def summary(self) -> dict:
        """Return a plain dict for display or JSON output."""
        record = {"timestamp": self.timestamp.isoformat()}
        record.update({name: round(value, 3) for name, value in self.values.items()})
        if self.resets:
            record["resets"] = list(self.resets)
        record["duration_ms"] = round(self.duration_seconds * 1000, 1)
        return record


@dataclass
class ScrapeResult:
    """Outcome of one scrape: either a snapshot or an error kind plus detail."""

    snapshot: Optional[JvmSnapshot] = None
    error_kind: Optional[str] = None
    detail: str = ""
    duration_seconds: float = 0.0

    @property
    def ok(self) -> bool:
        return self.snapshot is not None

    @classmethod
    def success(cls, snapshot: JvmSnapshot) -> "ScrapeResult":
        return cls(snapshot=snapshot, duration_seconds=snapshot.duration_seconds)

    @classmethod
    def failure(cls, error_kind: str, detail: str, duration_seconds: float = 0.0) -> "ScrapeResult":
        return cls(error_kind=error_kind, detail=detail, duration_seconds=duration_seconds)
