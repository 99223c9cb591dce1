"""
Runs the jstat binary for one report type and returns its stdout.

Anything callable as `runner(report, target) -> str` can replace
JstatRunner in the sampler; the mock generator and the tests rely on that.
"""

from __future__ import annotations

import logging
import subprocess
from typing import Callable

from jstat_exporter.errors import ExternalToolError, ExternalToolTimeoutError
from jstat_exporter.metrics import ReportType

log = logging.getLogger(__name__)

DEFAULT_JSTAT_PATH = "/usr/bin/jstat"
DEFAULT_TIMEOUT_SECONDS = 5.0

Runner = Callable[[ReportType, str], str]


class JstatRunner:

    def __init__(self, path: str = DEFAULT_JSTAT_PATH, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS):
        self.path = path
        self.timeout_seconds = timeout_seconds

    def run(self, report: ReportType, target: str) -> str:
        command = [self.path, report.flag, target]
        log.debug("Running %s", " ".join(command))

        try:
            result = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",  # localized attach errors are not always UTF-8
                check=True,
                timeout=self.timeout_seconds,
            )
        except subprocess.TimeoutExpired as e:
            raise ExternalToolTimeoutError(
                f"{self.path} {report.flag} timed out after {self.timeout_seconds}s",
                command=command,
            ) from e
        except subprocess.CalledProcessError as e:
            raise ExternalToolError(
                f"{self.path} {report.flag} exited with status {e.returncode}",
                command=command,
                stderr=e.stderr or "",
            ) from e
        except OSError as e:
            raise ExternalToolError(f"could not start {self.path}: {e}", command=command) from e

        return result.stdout

    __call__ = run

    def __repr__(self) -> str:
        return f"JstatRunner(path={self.path!r}, timeout_seconds={self.timeout_seconds})"
