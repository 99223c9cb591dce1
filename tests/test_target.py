"""Tests for resolving --target-pid into a pid."""

import pytest

from jstat_exporter.errors import TargetResolutionError
from jstat_exporter.target import resolve_target


def test_literal_pid_passes_through():
    assert resolve_target("12345") == "12345"


def test_vmid_with_host_passes_through():
    assert resolve_target("12345@remotehost") == "12345@remotehost"


def test_reads_pid_file(tmp_path):
    pid_file = tmp_path / "app.pid"
    pid_file.write_text("  31337\n")
    assert resolve_target(str(pid_file)) == "31337"


def test_unreadable_pid_file_falls_back_to_raw_value(tmp_path):
    missing = str(tmp_path / "gone.pid")
    assert resolve_target(missing) == missing


def test_path_without_pid_suffix_is_literal(tmp_path):
    other = tmp_path / "app.txt"
    other.write_text("999")
    assert resolve_target(str(other)) == str(other)


def test_runs_shell_command():
    assert resolve_target("#echo '  4242  '") == "4242"


def test_failing_command_raises():
    with pytest.raises(TargetResolutionError):
        resolve_target("#exit 3")


def test_empty_command_output_raises():
    with pytest.raises(TargetResolutionError):
        resolve_target("#true")


def test_undecodable_command_output_raises_resolution_error():
    with pytest.raises(TargetResolutionError):
        resolve_target("#printf '\\377\\376' >&2; exit 3")
