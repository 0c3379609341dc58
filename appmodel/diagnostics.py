"""
Diagnostic collection for recovered failures.

Descriptor merging never aborts the whole build on a bad token; it
records a :class:`Diagnostic` into a report the caller can inspect.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from .faults import Fault, Severity


@dataclass(frozen=True)
class Diagnostic:
    """One recorded problem."""

    code: str
    message: str
    severity: Severity = Severity.WARN
    extension: Optional[str] = None
    descriptor_key: Optional[str] = None
    token: Optional[str] = None

    @classmethod
    def from_fault(cls, fault: Fault) -> "Diagnostic":
        meta = fault.metadata
        return cls(
            code=fault.code,
            message=fault.message,
            severity=fault.severity,
            extension=meta.get("extension"),
            descriptor_key=meta.get("descriptor_key"),
            token=meta.get("token"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "extension": self.extension,
            "descriptor_key": self.descriptor_key,
            "token": self.token,
        }


@dataclass
class DiagnosticReport:
    """
    Aggregated diagnostics.

    Used during model assembly to collect recoverable problems without
    failing the build.
    """

    diagnostics: List[Diagnostic] = field(default_factory=list)

    def add(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)

    def add_fault(self, fault: Fault) -> Diagnostic:
        diagnostic = Diagnostic.from_fault(fault)
        self.add(diagnostic)
        return diagnostic

    @property
    def errors(self) -> List[Diagnostic]:
        return [
            d for d in self.diagnostics
            if d.severity in (Severity.ERROR, Severity.FATAL)
        ]

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.WARN]

    def has_errors(self) -> bool:
        return bool(self.errors)

    def for_extension(self, extension: str) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.extension == extension]

    def __len__(self) -> int:
        return len(self.diagnostics)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.diagnostics)

    def __bool__(self) -> bool:
        return bool(self.diagnostics)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": len(self.diagnostics),
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }

    def format_report(self) -> str:
        """Format report for display."""
        if not self.diagnostics:
            return "No diagnostics."

        lines = [f"{len(self.diagnostics)} diagnostic(s):"]
        for i, d in enumerate(self.diagnostics, 1):
            lines.append(f"   {i}. [{d.severity.value}] {d.message}")
        return "\n".join(lines)
