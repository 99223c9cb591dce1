"""
Exceptions raised while sampling a JVM with jstat.

Every error carries an ErrorKind so the exporter can count failures by
category without string matching on messages.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    EXTERNAL_TOOL = "external_tool"
    TIMEOUT = "timeout"
    MALFORMED_OUTPUT = "malformed_output"
    TARGET_RESOLUTION = "target_resolution"


class JstatError(Exception):
    kind: ErrorKind = ErrorKind.EXTERNAL_TOOL


class ExternalToolError(JstatError):
    """jstat could not be started or exited with an error."""

    kind = ErrorKind.EXTERNAL_TOOL

    def __init__(self, message: str, command: Optional[list] = None, stderr: str = ""):
        self.command = command
        self.stderr = stderr.strip() if stderr else ""
        if self.stderr:
            message = f"{message}: {self.stderr}"
        super().__init__(message)


class ExternalToolTimeoutError(ExternalToolError):
    kind = ErrorKind.TIMEOUT


class MalformedOutputError(JstatError):
    """jstat output lacked the data row or a mapped field was not numeric."""

    kind = ErrorKind.MALFORMED_OUTPUT

    def __init__(
        self,
        message: str,
        report: Optional[str] = None,
        metric: Optional[str] = None,
        column: Optional[str] = None,
        raw: Optional[str] = None,
    ):
        self.report = report
        self.metric = metric
        self.column = column
        self.raw = raw

        context = []
        if report:
            context.append(f"report={report}")
        if metric:
            context.append(f"metric={metric}")
        if column:
            context.append(f"column={column}")
        if raw is not None:
            context.append(f"raw={raw!r}")
        if context:
            message = f"{message} ({', '.join(context)})"
        super().__init__(message)


class TargetResolutionError(JstatError):
    kind = ErrorKind.TARGET_RESOLUTION
