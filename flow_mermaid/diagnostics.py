# flow_mermaid/diagnostics.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Literal, Optional

Severity = Literal["info", "warning"]


@dataclass(frozen=True)
class Diagnostic:
    """Advisory record produced while converting a flow.

    Diagnostics never change whether a conversion succeeds; callers that need
    to tell "clean" from "succeeded with warnings" inspect `DiagnosticLog`.
    """

    severity: Severity
    code: str
    message: str
    action: str = ""

    def format(self) -> str:
        return f"{self.severity}: {self.message}"


@dataclass
class DiagnosticLog:
    """Collects diagnostics in emission order.

    `echo`, when set, is called with every recorded diagnostic (the CLI uses
    this to stream messages to stderr as they happen).
    """

    ignore: set[str] = field(default_factory=set)
    echo: Optional[Callable[[Diagnostic], None]] = None
    entries: list[Diagnostic] = field(default_factory=list)

    def emit(self, severity: Severity, code: str, message: str, action: str = "") -> None:
        if code in self.ignore:
            return
        diag = Diagnostic(severity=severity, code=code, message=message, action=action)
        self.entries.append(diag)
        if self.echo is not None:
            self.echo(diag)

    def info(self, code: str, message: str, action: str = "") -> None:
        self.emit("info", code, message, action)

    def warning(self, code: str, message: str, action: str = "") -> None:
        self.emit("warning", code, message, action)

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.entries if d.severity == "warning"]

    @property
    def infos(self) -> list[Diagnostic]:
        return [d for d in self.entries if d.severity == "info"]

    def codes(self) -> list[str]:
        return [d.code for d in self.entries]
