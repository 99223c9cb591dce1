"""Startup configuration. Built once from the command line, never mutated."""

from __future__ import annotations

from dataclasses import dataclass

from jstat_exporter.collector.runner import DEFAULT_JSTAT_PATH, DEFAULT_TIMEOUT_SECONDS


@dataclass(frozen=True)
class ExporterConfig:
    listen_address: str = ":9010"
    metrics_path: str = "/metrics"
    jstat_path: str = DEFAULT_JSTAT_PATH
    target_pid: str = ":0"
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    positional: bool = False
    mock: bool = False

    def __post_init__(self):
        if not self.metrics_path.startswith("/"):
            raise ValueError(f"metrics path must start with '/': {self.metrics_path!r}")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout must be positive")
