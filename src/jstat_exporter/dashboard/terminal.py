"""Terminal view using Rich. Shows heap occupancy, GC activity, and trend arrows."""

from __future__ import annotations

import json
import logging
import sys
import time
from collections import deque
from typing import Optional

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from jstat_exporter import __version__
from jstat_exporter.collector.base import MetricsCollector
from jstat_exporter.metrics import JvmSnapshot

log = logging.getLogger(__name__)

# How many snapshots to keep for trend comparison
HISTORY_SIZE = 30

MAX_CONSECUTIVE_ERRORS = 5


def _ratio(used: Optional[float], capacity: Optional[float]) -> float:
    if not used or not capacity:
        return 0.0
    return used / capacity


def _color_for_percent(value: float) -> str:
    if value < 0.5:
        return "green"
    elif value < 0.8:
        return "yellow"
    return "red"


def _trend_arrow(current: float, previous: float, better_when: str = "lower") -> str:
    """Returns a colored ^ or v arrow. Green = improving, red = degrading."""
    if previous == 0:
        return ""

    pct_change = (current - previous) / abs(previous)
    threshold = 0.03  # ignore noise below 3%

    if abs(pct_change) < threshold:
        return "[dim]-[/dim]"

    going_up = pct_change > 0

    if better_when == "lower":
        color = "red" if going_up else "green"
    else:
        color = "green" if going_up else "red"

    arrow = "^" if going_up else "v"
    return f"[{color}]{arrow}[/{color}]"


def _evaluate_health(snapshot: JvmSnapshot, prev: Optional[JvmSnapshot]) -> tuple[str, str]:
    """Check key signals and return (status_text, rich_style) for the header."""
    problems = []

    old = _ratio(snapshot.get("oldUsed"), snapshot.get("oldCap"))
    if old > 0.92:
        problems.append("OLD GEN NEAR FULL")
    elif old > 0.80:
        problems.append("OLD GEN PRESSURE")

    meta = _ratio(snapshot.get("metaUsed"), snapshot.get("metaCommit"))
    if meta > 0.95:
        problems.append("METASPACE NEAR FULL")

    if prev is not None and snapshot.get("fgcTimes", 0) > prev.get("fgcTimes", 0):
        problems.append("FULL GC")

    if snapshot.resets:
        problems.append("TARGET RESTARTED")

    if not problems:
        return "HEALTHY", "bold green"

    severity = "bold yellow" if len(problems) == 1 else "bold red"
    return " | ".join(problems), severity


def _get_lookback(history: deque, steps_back: int = 5) -> Optional[JvmSnapshot]:
    """Grab a snapshot from N steps ago for trend comparison."""
    if len(history) > steps_back:
        return history[-(steps_back + 1)]
    elif len(history) > 1:
        return history[0]
    return None


def _space_row(table: Table, label: str, used: Optional[float], capacity: Optional[float], trend: str = ""):
    ratio = _ratio(used, capacity)
    color = _color_for_percent(ratio)
    table.add_row(
        label,
        f"{(used or 0) / 1024:.1f} / {(capacity or 0) / 1024:.1f} MB",
        f"[{color}]{ratio * 100:.1f}%[/{color}]",
        trend,
    )


def build_display(
    snapshot: JvmSnapshot,
    source_name: str,
    history: deque,
) -> Layout:

    layout = Layout()
    prev = _get_lookback(history)
    last = history[-2] if len(history) > 1 else None

    status_text, status_style = _evaluate_health(snapshot, last)
    header = Text(f"  jstat_exporter v{__version__}  |  {source_name}", style="bold white on blue")
    header.append(f"\n  {snapshot.timestamp.strftime('%Y-%m-%d %H:%M:%S')}  ", style="dim")
    header.append(f"  STATUS: {status_text}", style=status_style)

    # -- Heap panel --
    heap_table = Table(show_header=True, header_style="bold cyan", expand=True)
    heap_table.add_column("Space", style="dim")
    heap_table.add_column("Used / Capacity", justify="right")
    heap_table.add_column("%", justify="right")
    heap_table.add_column("", width=2)

    old_trend = _trend_arrow(snapshot.get("oldUsed", 0), prev.get("oldUsed", 0), "lower") if prev else ""

    _space_row(heap_table, "Eden", snapshot.get("edenUsed"), snapshot.get("edenCap"))
    _space_row(heap_table, "Survivor 0", snapshot.get("sv0Used"), snapshot.get("sv0Cap"))
    _space_row(heap_table, "Survivor 1", snapshot.get("sv1Used"), snapshot.get("sv1Cap"))
    _space_row(heap_table, "Old", snapshot.get("oldUsed"), snapshot.get("oldCap"), old_trend)
    _space_row(heap_table, "Metaspace", snapshot.get("metaUsed"), snapshot.get("metaCommit"))

    # -- Capacity panel --
    cap_table = Table(show_header=True, header_style="bold cyan", expand=True)
    cap_table.add_column("Generation", style="dim")
    cap_table.add_column("Committed", justify="right")
    cap_table.add_column("Max", justify="right")

    for label, commit, maximum in (
        ("New", "newCommit", "newMax"),
        ("Old", "oldCommit", "oldMax"),
        ("Metaspace", "metaCommit", "metaMax"),
    ):
        cap_table.add_row(
            label,
            f"{snapshot.get(commit, 0) / 1024:.1f} MB",
            f"{snapshot.get(maximum, 0) / 1024:.1f} MB",
        )

    # -- GC panel --
    gc_table = Table(show_header=True, header_style="bold cyan", expand=True)
    gc_table.add_column("GC", style="dim")
    gc_table.add_column("Count", justify="right")
    gc_table.add_column("Time", justify="right")
    gc_table.add_column("", width=2)

    gc_trend = _trend_arrow(snapshot.get("gcSec", 0), prev.get("gcSec", 0), "lower") if prev else ""

    gc_table.add_row("Young", f"{snapshot.get('ygcTimes', 0):,.0f}", f"{snapshot.get('ygcSec', 0):.3f}s", "")
    gc_table.add_row("Full", f"{snapshot.get('fgcTimes', 0):,.0f}", f"{snapshot.get('fgcSec', 0):.3f}s", "")
    gc_table.add_row("Total", "", f"[bold]{snapshot.get('gcSec', 0):.3f}s[/bold]", gc_trend)

    layout.split_column(
        Layout(Panel(header, border_style="blue"), size=4),
        Layout(name="body"),
        Layout(Panel(Text("  Press Ctrl+C to stop", style="dim"), border_style="dim"), size=3),
    )

    layout["body"].split_row(
        Layout(Panel(heap_table, title="Heap", border_style="cyan")),
        Layout(Panel(cap_table, title="Capacity", border_style="cyan")),
        Layout(Panel(gc_table, title="GC", border_style="cyan")),
    )

    return layout


def build_snapshot_table(snapshot: JvmSnapshot, source_name: str) -> Table:
    """Flat name/value table for one-shot output."""
    table = Table(title=f"{source_name} @ {snapshot.timestamp.strftime('%H:%M:%S')}", header_style="bold")
    table.add_column("Metric", style="cyan")
    table.add_column("Kind", style="dim")
    table.add_column("Value", justify="right")

    for name, value in snapshot.gauges.items():
        table.add_row(name, "gauge", f"{value:,.3f}")
    for name, value in snapshot.counters.items():
        label = f"{value:,.0f}"
        if name in snapshot.resets:
            label += "  [yellow](reset)[/yellow]"
        table.add_row(name, "counter", label)
    return table


def run_dashboard(collector: MetricsCollector, refresh_interval: float = 2.0):

    console = Console()
    source_name = collector.name()
    history: deque[JvmSnapshot] = deque(maxlen=HISTORY_SIZE)

    log.info("Starting dashboard: source=%s, refresh=%.1fs", source_name, refresh_interval)
    console.print(f"\n[bold]Starting jstat_exporter v{__version__}...[/bold]")
    console.print(f"Source: {source_name}")
    console.print(f"Refresh: every {refresh_interval}s")
    console.print()
    time.sleep(1)

    consecutive_errors = 0

    with Live(console=console, refresh_per_second=1, screen=True) as live:
        try:
            while True:
                result = collector.try_collect()
                if not result.ok:
                    consecutive_errors += 1
                    if consecutive_errors >= MAX_CONSECUTIVE_ERRORS:
                        log.error("Giving up after %d failed scrapes", consecutive_errors)
                        console.print(f"\n[bold red]Giving up after {consecutive_errors} failed scrapes: "
                                      f"{escape(result.detail)}[/bold red]")
                        break
                    # Show error in dashboard but keep trying
                    error_text = Text(
                        f"  Scrape failed (retry {consecutive_errors}/{MAX_CONSECUTIVE_ERRORS}): {result.detail}",
                        style="bold red",
                    )
                    live.update(Panel(error_text, border_style="red"))
                    time.sleep(refresh_interval)
                    continue

                consecutive_errors = 0
                history.append(result.snapshot)
                live.update(build_display(result.snapshot, source_name, history))
                time.sleep(refresh_interval)
        except KeyboardInterrupt:
            pass

    console.print("\n[dim]Dashboard stopped.[/dim]")


def run_jsonl(collector: MetricsCollector, refresh_interval: float = 2.0, limit: Optional[int] = None):
    """Non-interactive output mode: prints one JSON object per snapshot per line.

    Failed scrapes are written too, as {"error": kind, "detail": ...}, so a
    log pipeline sees the gap.
    """
    source_name = collector.name()
    log.info("Starting JSONL output: source=%s, refresh=%.1fs", source_name, refresh_interval)

    emitted = 0
    try:
        while limit is None or emitted < limit:
            result = collector.try_collect()
            if result.ok:
                record = result.snapshot.summary()
            else:
                record = {"error": result.error_kind, "detail": result.detail}
            record["source"] = source_name

            sys.stdout.write(json.dumps(record) + "\n")
            sys.stdout.flush()
            emitted += 1
            if limit is None or emitted < limit:
                time.sleep(refresh_interval)
    except KeyboardInterrupt:
        pass
