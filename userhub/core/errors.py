"""Error taxonomy — stable codes shared by every endpoint."""

from __future__ import annotations

from enum import Enum

OK_CODE = "OK"


class Severity(str, Enum):
    """How a failure is logged and surfaced."""

    INFO = "info"  # expected; code and message go back verbatim
    ERROR = "error"  # unexpected; logged with traceback


class ErrorType(Enum):
    """Fixed ``(code, message template, severity)`` entries.

    Codes are namespaced (``SYS`` for pipeline failures, ``USR`` for user
    domain failures) and must never be renumbered.
    """

    UNKNOWN = ("UNKNOWN", "Unknown error.", Severity.ERROR)
    SYS0001 = ("SYS0001", "System error: %s", Severity.INFO)
    SYS0002 = ("SYS0002", "Param error: %s", Severity.INFO)
    SYS0003 = ("SYS0003", "Unauthorized: %s", Severity.INFO)
    SYS0004 = ("SYS0004", "Sign error: %s", Severity.INFO)
    USR0001 = ("USR0001", "User not found: %s", Severity.INFO)
    USR0002 = ("USR0002", "User conflict: %s", Severity.INFO)

    def __init__(self, code: str, template: str, severity: Severity) -> None:
        self.code = code
        self.template = template
        self.severity = severity

    def format(self, detail: str = "") -> str:
        """Render the message template with *detail*."""
        if "%s" not in self.template:
            return self.template
        return self.template % detail

    @property
    def is_informational(self) -> bool:
        return self.severity is Severity.INFO


# Shorthand aliases used across the pipeline
PARAM_ERROR = ErrorType.SYS0002
UNAUTHORIZED = ErrorType.SYS0003
SIGN_ERROR = ErrorType.SYS0004
