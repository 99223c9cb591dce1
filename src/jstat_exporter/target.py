"""
Resolves the --target-pid option into the pid handed to jstat.

    12345                 used as-is
    /var/run/app.pid      read from the file
    #pgrep -f MyServer    run through bash, output trimmed
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from jstat_exporter.errors import TargetResolutionError

log = logging.getLogger(__name__)

SHELL = "/bin/bash"


def resolve_target(value: str, timeout_seconds: float = 10.0) -> str:
    if value.startswith("/") and value.endswith(".pid"):
        try:
            pid = Path(value).read_text().strip()
        except OSError as e:
            # Keep the raw value, jstat will then report the failure per scrape
            log.warning("Could not read pid file %s: %s", value, e)
            return value
        log.info("Got PID from file: %s", pid)
        return pid

    if value.startswith("#"):
        command = value.strip("#")
        try:
            result = subprocess.run(
                [SHELL, "-c", command],
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
                check=True,
                timeout=timeout_seconds,
            )
        except (OSError, subprocess.SubprocessError) as e:
            raise TargetResolutionError(f"pid command {command!r} failed: {e}") from e

        pid = result.stdout.strip()
        if not pid:
            raise TargetResolutionError(f"pid command {command!r} printed nothing")
        log.info("Got PID %s from command: %s", pid, command)
        return pid

    return value
