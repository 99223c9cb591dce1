"""Tests for the Rich terminal view and health evaluation."""

import io
from collections import deque
from datetime import datetime, timezone

from rich.console import Console

from jstat_exporter.collector.mock_collector import MockCollector
from jstat_exporter.dashboard.terminal import (
    _evaluate_health,
    _trend_arrow,
    build_display,
    build_snapshot_table,
)
from jstat_exporter.metrics import JvmSnapshot


def _snapshot(**values):
    counters = {k: values.pop(k) for k in ("ygcTimes", "fgcTimes") if k in values}
    return JvmSnapshot(timestamp=datetime.now(timezone.utc), gauges=values, counters=counters)


def _render(renderable) -> str:
    console = Console(file=io.StringIO(), width=160, height=40)
    console.print(renderable)
    return console.file.getvalue()


def test_healthy_when_old_gen_has_room():
    status, style = _evaluate_health(_snapshot(oldUsed=1000.0, oldCap=10000.0), None)
    assert status == "HEALTHY"
    assert style == "bold green"


def test_old_gen_near_full():
    status, _ = _evaluate_health(_snapshot(oldUsed=9500.0, oldCap=10000.0), None)
    assert "OLD GEN NEAR FULL" in status


def test_full_gc_since_last_snapshot():
    prev = _snapshot(fgcTimes=2)
    status, _ = _evaluate_health(_snapshot(fgcTimes=3), prev)
    assert "FULL GC" in status


def test_restart_shows_in_status():
    snap = _snapshot(ygcTimes=10)
    snap.resets.append("ygcTimes")
    status, _ = _evaluate_health(snap, None)
    assert "TARGET RESTARTED" in status


def test_trend_arrow_colors():
    assert _trend_arrow(110, 100, "lower") == "[red]^[/red]"
    assert _trend_arrow(90, 100, "lower") == "[green]v[/green]"
    assert _trend_arrow(101, 100) == "[dim]-[/dim]"
    assert _trend_arrow(5, 0) == ""


def test_display_renders_from_mock():
    collector = MockCollector(seed=42)
    history = deque(maxlen=30)
    for _ in range(6):
        history.append(collector.collect())

    output = _render(build_display(history[-1], collector.name(), history))
    assert "Heap" in output
    assert "Eden" in output
    assert "Young" in output


def test_snapshot_table_marks_resets():
    snap = _snapshot(oldUsed=1.0, ygcTimes=180.0)
    snap.resets.append("ygcTimes")
    output = _render(build_snapshot_table(snap, "jstat (pid 1)"))
    assert "ygcTimes" in output
    assert "(reset)" in output
