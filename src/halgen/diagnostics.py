"""Line-attributed diagnostics collected during a generation pass."""

import logging
from enum import StrEnum
from typing import Optional

from pydantic import BaseModel


class Severity(StrEnum):
    WARNING = "warning"
    ERROR = "error"


class DiagnosticKind(StrEnum):
    """What went wrong. Only MISSING_INTERFACE stops a pass."""

    MISSING_SECTION = "missing-section"
    MALFORMED_ANNOTATION = "malformed-annotation"
    MISSING_INTERFACE = "missing-interface"


class Diagnostic(BaseModel):
    kind: DiagnosticKind
    severity: Severity
    message: str
    line: Optional[int] = None

    def __str__(self) -> str:
        if self.line is None:
            return self.message
        return f"line {self.line}: {self.message}"


class Diagnostics:
    """Collects diagnostics and forwards each one to the ``halgen`` logger.

    Example:
        >>> diagnostics = Diagnostics()
        >>> diagnostics.report(12, "hal_type annotation needs one string value")
        >>> len(diagnostics.errors)
        1
    """

    def __init__(self) -> None:
        self.items: list[Diagnostic] = []
        self._log = logging.getLogger("halgen")

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.items if d.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.items if d.severity == Severity.WARNING]

    def warning(
        self, kind: DiagnosticKind, message: str, line: Optional[int] = None
    ) -> None:
        diagnostic = Diagnostic(
            kind=kind, severity=Severity.WARNING, message=message, line=line
        )
        self.items.append(diagnostic)
        self._log.warning(str(diagnostic))

    def error(
        self, kind: DiagnosticKind, message: str, line: Optional[int] = None
    ) -> None:
        diagnostic = Diagnostic(
            kind=kind, severity=Severity.ERROR, message=message, line=line
        )
        self.items.append(diagnostic)
        self._log.error(str(diagnostic))

    def report(
        self,
        line: Optional[int],
        message: str,
        kind: DiagnosticKind = DiagnosticKind.MALFORMED_ANNOTATION,
    ) -> None:
        """Report an error attributed to a source line."""
        self.error(kind, message, line)
