"""
Bridges JstatCollector into a prometheus_client registry.

Every scrape of the registry triggers exactly one collect. When jstat
fails the JVM metrics are left out for that scrape and `jstat_up` drops
to 0, so the gap shows up in Prometheus instead of the exporter dying.

prometheus_client appends `_total` to every counter, so the GC counts come
out as `jstat_ygcTimes_total` and `jstat_fgcTimes_total`. Dashboards built
on the Go exporter's `jstat_ygcTimes` / `jstat_fgcTimes` need renaming.
"""

from __future__ import annotations

import threading
from collections import Counter
from typing import Iterator

from prometheus_client import ProcessCollector
from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily
from prometheus_client.registry import CollectorRegistry

from jstat_exporter.collector.jstat_collector import JstatCollector
from jstat_exporter.metrics import NAMESPACE, MetricKind, all_definitions


class JstatPrometheusCollector:

    def __init__(self, collector: JstatCollector):
        self._collector = collector
        self._definitions = all_definitions(collector.mappings)
        self._errors: Counter = Counter()
        self._errors_lock = threading.Lock()

    def describe(self) -> Iterator:
        # Lets the registry check names without running jstat
        for d in self._definitions:
            if d.kind == MetricKind.COUNTER:
                yield CounterMetricFamily(d.full_name, d.help)
            else:
                yield GaugeMetricFamily(d.full_name, d.help)
        yield GaugeMetricFamily(f"{NAMESPACE}_up", "")
        yield GaugeMetricFamily(f"{NAMESPACE}_scrape_duration_seconds", "")
        yield CounterMetricFamily(f"{NAMESPACE}_scrape_errors", "")
        yield CounterMetricFamily(f"{NAMESPACE}_counter_resets", "")

    def collect(self) -> Iterator:
        result = self._collector.try_collect()

        if result.ok:
            values = result.snapshot.values
            for d in self._definitions:
                if d.name not in values:
                    continue
                if d.kind == MetricKind.COUNTER:
                    yield CounterMetricFamily(d.full_name, d.help, value=values[d.name])
                else:
                    yield GaugeMetricFamily(d.full_name, d.help, value=values[d.name])
        else:
            with self._errors_lock:
                self._errors[result.error_kind] += 1

        yield GaugeMetricFamily(
            f"{NAMESPACE}_up",
            "Whether the last jstat scrape succeeded.",
            value=1 if result.ok else 0,
        )
        yield GaugeMetricFamily(
            f"{NAMESPACE}_scrape_duration_seconds",
            "Time spent running and parsing jstat.",
            value=result.duration_seconds,
        )

        errors = CounterMetricFamily(
            f"{NAMESPACE}_scrape_errors",
            "Failed jstat scrapes by error kind.",
            labels=["kind"],
        )
        with self._errors_lock:
            for kind, count in sorted(self._errors.items()):
                errors.add_metric([kind], count)
        yield errors

        resets = CounterMetricFamily(
            f"{NAMESPACE}_counter_resets",
            "Times a GC count went backwards because the target JVM restarted.",
            labels=["metric"],
        )
        for name, count in sorted(self._collector.counters.reset_counts().items()):
            resets.add_metric([name], count)
        yield resets


def build_registry(collector: JstatCollector, process_metrics: bool = True) -> CollectorRegistry:
    registry = CollectorRegistry()
    registry.register(JstatPrometheusCollector(collector))
    if process_metrics:
        # Exporter's own CPU/memory; a no-op on platforms without /proc
        ProcessCollector(namespace=NAMESPACE + "_exporter", registry=registry)
    return registry
