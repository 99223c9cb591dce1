"""
Base collector interface.

A collector is anything that can produce a JvmSnapshot. This keeps the
HTTP exporter and the terminal view decoupled from where the data
actually comes from (a real jstat binary or the mock generator).
"""

from abc import ABC, abstractmethod

from jstat_exporter.metrics import JvmSnapshot, ScrapeResult


class MetricsCollector(ABC):
    """Interface for all metrics sources."""

    @abstractmethod
    def collect(self) -> JvmSnapshot:
        """Fetch one snapshot of current metrics. Raises on failure."""
        ...

    @abstractmethod
    def try_collect(self) -> ScrapeResult:
        """Fetch one snapshot, reporting failures in the result instead of raising."""
        ...

    @abstractmethod
    def name(self) -> str:
        """Human-readable name for this source."""
        ...
