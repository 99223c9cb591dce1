"""
jstat_exporter entry point.

Usage:
    jstat-exporter --target-pid 12345                 Serve /metrics on :9010
    jstat-exporter --target-pid /var/run/app.pid      Read the pid from a file
    jstat-exporter --target-pid '#pgrep -f MyApp'     Get the pid from a command
    jstat-exporter --mock                             Serve simulated metrics
    jstat-exporter --mock snapshot                    One-shot table
    jstat-exporter --mock watch                       Live terminal view
"""

from __future__ import annotations

import logging

import click

from jstat_exporter import __version__
from jstat_exporter.collector.jstat_collector import JstatCollector
from jstat_exporter.collector.mock_collector import MockCollector
from jstat_exporter.collector.runner import JstatRunner
from jstat_exporter.config import ExporterConfig
from jstat_exporter.errors import TargetResolutionError
from jstat_exporter.target import resolve_target

log = logging.getLogger("jstat_exporter")


def build_collector(config: ExporterConfig) -> JstatCollector:
    if config.mock:
        return MockCollector()

    target = resolve_target(config.target_pid)
    runner = JstatRunner(path=config.jstat_path, timeout_seconds=config.timeout_seconds)
    return JstatCollector(target=target, runner=runner, positional=config.positional)


def _collector_from_ctx(ctx) -> JstatCollector:
    try:
        return build_collector(ctx.obj["config"])
    except TargetResolutionError as e:
        click.echo(f"Could not resolve target pid: {e}", err=True)
        raise SystemExit(1)


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="jstat-exporter")
@click.option("--listen-address", "--web.listen-address", "listen_address", default=":9010",
              help="Address on which to expose metrics and web interface")
@click.option("--telemetry-path", "--web.telemetry-path", "metrics_path", default="/metrics",
              help="Path under which to expose metrics")
@click.option("--jstat-path", "--jstat.path", "jstat_path", default="/usr/bin/jstat", help="jstat path")
@click.option("--target-pid", "--target.pid", "target_pid", default=":0",
              help="Target pid, /path/to/file.pid, or '#shell command' printing the pid")
@click.option("--timeout", default=5.0, help="Seconds to wait for each jstat call")
@click.option("--positional", is_flag=True, default=False,
              help="Read jstat columns by position instead of by header name")
@click.option("--mock", is_flag=True, default=False, help="Use simulated jstat output")
@click.option("--verbose", is_flag=True, default=False, help="Enable debug logging")
@click.pass_context
def cli(ctx, listen_address: str, metrics_path: str, jstat_path: str, target_pid: str,
        timeout: float, positional: bool, mock: bool, verbose: bool):
    """jstat_exporter - JVM GC and heap metrics for Prometheus."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    try:
        config = ExporterConfig(
            listen_address=listen_address,
            metrics_path=metrics_path,
            jstat_path=jstat_path,
            target_pid=target_pid,
            timeout_seconds=timeout,
            positional=positional,
            mock=mock,
        )
    except ValueError as e:
        raise click.BadParameter(str(e))

    ctx.ensure_object(dict)
    ctx.obj["config"] = config

    # If no subcommand, serve metrics
    if ctx.invoked_subcommand is None:
        from jstat_exporter.exporter.registry import build_registry
        from jstat_exporter.exporter.server import serve

        collector = _collector_from_ctx(ctx)
        log.info("Starting jstat_exporter v%s for %s", __version__, collector.name())
        click.echo(f"Serving {collector.name()} on {config.listen_address}{config.metrics_path}")
        try:
            serve(build_registry(collector), config.listen_address, config.metrics_path)
        finally:
            collector.close()


@cli.command()
@click.pass_context
def snapshot(ctx):
    """Take a single sample and print it."""
    from rich.console import Console
    from rich.markup import escape
    from jstat_exporter.dashboard.terminal import build_snapshot_table

    collector = _collector_from_ctx(ctx)
    try:
        result = collector.try_collect()
    finally:
        collector.close()

    console = Console()
    if not result.ok:
        console.print(f"[bold red]Scrape failed ({result.error_kind}):[/bold red] {escape(result.detail)}")
        raise SystemExit(1)

    console.print(build_snapshot_table(result.snapshot, collector.name()))


@cli.command()
@click.option("--refresh", default=2.0, help="Refresh interval in seconds")
@click.option("--output", type=click.Choice(["tui", "jsonl"]), default="tui",
              help="Output mode: tui (Rich dashboard) or jsonl (one JSON line per snapshot)")
@click.option("--count", default=None, type=int, help="Stop after this many snapshots (jsonl only)")
@click.pass_context
def watch(ctx, refresh: float, output: str, count):
    """Sample repeatedly and show the results."""
    from jstat_exporter.dashboard.terminal import run_dashboard, run_jsonl

    collector = _collector_from_ctx(ctx)
    try:
        if output == "jsonl":
            run_jsonl(collector, refresh_interval=refresh, limit=count)
        else:
            run_dashboard(collector, refresh_interval=refresh)
    finally:
        collector.close()


if __name__ == "__main__":
    cli()
