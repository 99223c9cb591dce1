"""
Collector for a live JVM. Runs jstat once per report type, maps the
columns into a JvmSnapshot, and keeps the GC counts monotonic across
scrapes (see counters.py).

The four jstat calls are independent, so they run in parallel and are
joined before any counter is touched. A whole collect() runs under one
lock; overlapping scrapes wait their turn rather than interleave their
counter updates.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Dict, Optional, Tuple

from jstat_exporter.collector.base import MetricsCollector
from jstat_exporter.collector.counters import CounterBook
from jstat_exporter.collector.jstat_parser import parse_field, parse_jstat_output
from jstat_exporter.collector.runner import JstatRunner, Runner
from jstat_exporter.errors import JstatError
from jstat_exporter.metrics import (
    DEFAULT_FIELD_MAPPINGS,
    FieldMapping,
    JvmSnapshot,
    MetricKind,
    ReportType,
    ScrapeResult,
)

log = logging.getLogger(__name__)


class JstatCollector(MetricsCollector):

    def __init__(
        self,
        target: str,
        runner: Optional[Runner] = None,
        mappings: Dict[ReportType, Tuple[FieldMapping, ...]] = DEFAULT_FIELD_MAPPINGS,
        positional: bool = False,
        parallel: bool = True,
    ):
        self.target = target
        self._runner = runner if runner is not None else JstatRunner()
        self._mappings = mappings
        self._positional = positional
        self._lock = threading.Lock()
        self._executor = ThreadPoolExecutor(max_workers=max(1, len(mappings))) if parallel else None
        self._counters = CounterBook(
            m.metric.name
            for fields in mappings.values()
            for m in fields
            if m.metric.kind == MetricKind.COUNTER
        )

    @property
    def counters(self) -> CounterBook:
        return self._counters

    @property
    def mappings(self) -> Dict[ReportType, Tuple[FieldMapping, ...]]:
        return self._mappings

    def _fetch(self, report: ReportType, target: str) -> Dict[str, float]:
        """Run one report and parse every mapped column. No shared state touched."""
        text = self._runner(report, target)
        table = parse_jstat_output(text, report=report.flag)
        return {
            m.metric.name: parse_field(table, m, positional=self._positional)
            for m in self._mappings[report]
        }

    def _fetch_all(self, target: str) -> Dict[ReportType, Dict[str, float]]:
        reports = list(self._mappings)
        if self._executor is None:
            return {report: self._fetch(report, target) for report in reports}

        futures = {report: self._executor.submit(self._fetch, report, target) for report in reports}
        # result() re-raises the first failure; the remaining calls still finish
        return {report: future.result() for report, future in futures.items()}

    def collect(self, target: Optional[str] = None) -> JvmSnapshot:
        """Sample every report and return a snapshot. Raises JstatError on failure.

        Counter state is only updated once every report parsed, so a failed
        scrape leaves it untouched.
        """
        target = target or self.target
        with self._lock:
            started = time.monotonic()
            parsed = self._fetch_all(target)

            snapshot = JvmSnapshot(timestamp=datetime.now(timezone.utc))
            for report, fields in self._mappings.items():
                for m in fields:
                    value = parsed[report][m.metric.name]
                    if m.metric.kind == MetricKind.COUNTER:
                        if self._counters.observe(m.metric.name, value):
                            snapshot.resets.append(m.metric.name)
                    else:
                        snapshot.gauges[m.metric.name] = value

            snapshot.counters = self._counters.totals()
            snapshot.duration_seconds = time.monotonic() - started

        log.debug("Collected %d metrics from pid %s in %.3fs",
                  len(snapshot.values), target, snapshot.duration_seconds)
        return snapshot

    def try_collect(self, target: Optional[str] = None) -> ScrapeResult:
        started = time.monotonic()
        try:
            return ScrapeResult.success(self.collect(target))
        except JstatError as e:
            log.warning("Scrape of pid %s failed (%s): %s", target or self.target, e.kind.value, e)
            return ScrapeResult.failure(e.kind.value, str(e), time.monotonic() - started)

    def name(self) -> str:
        return f"jstat (pid {self.target})"

    def close(self):
        if self._executor is not None:
            self._executor.shutdown(wait=True)
