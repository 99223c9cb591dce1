"""Tests for the click entry point, run against the mock source."""

import json

from click.testing import CliRunner

from jstat_exporter import __version__
from jstat_exporter.config import ExporterConfig
from jstat_exporter.main import build_collector, cli


def test_version():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_help_lists_flags():
    result = CliRunner().invoke(cli, ["--help"])
    assert result.exit_code == 0
    for flag in ("--target-pid", "--jstat-path", "--listen-address", "--telemetry-path"):
        assert flag in result.output


def test_snapshot_with_mock():
    result = CliRunner().invoke(cli, ["--mock", "snapshot"])
    assert result.exit_code == 0, result.output
    assert "oldUsed" in result.output
    assert "ygcTimes" in result.output


def test_snapshot_failure_exits_nonzero(tmp_path):
    result = CliRunner().invoke(
        cli, ["--target-pid", "1", "--jstat-path", str(tmp_path / "missing-jstat"), "snapshot"]
    )
    assert result.exit_code == 1
    assert "Scrape failed" in result.output


def test_unresolvable_target_exits_nonzero():
    result = CliRunner().invoke(cli, ["--target-pid", "#exit 1", "snapshot"])
    assert result.exit_code == 1
    assert "Could not resolve target pid" in result.output


def test_bad_metrics_path_is_rejected():
    result = CliRunner().invoke(cli, ["--mock", "--telemetry-path", "metrics", "snapshot"])
    assert result.exit_code != 0


def test_watch_jsonl_emits_one_line_per_snapshot():
    result = CliRunner().invoke(cli, ["--mock", "watch", "--output", "jsonl", "--refresh", "0", "--count", "3"])
    assert result.exit_code == 0, result.output

    lines = [json.loads(line) for line in result.output.strip().splitlines()]
    assert len(lines) == 3
    assert all("ygcTimes" in line for line in lines)
    assert lines[-1]["ygcTimes"] >= lines[0]["ygcTimes"]


def test_build_collector_resolves_pid_file(tmp_path):
    pid_file = tmp_path / "app.pid"
    pid_file.write_text("4242\n")

    collector = build_collector(ExporterConfig(target_pid=str(pid_file), timeout_seconds=1.0))
    try:
        assert collector.target == "4242"
    finally:
        collector.close()
