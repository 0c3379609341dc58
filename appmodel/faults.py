"""
appmodel faults - Core fault types and taxonomy.

Defines:
- Severity levels
- FaultDomain (explicit fault domains)
- Fault base class (structured fault objects)
- Concrete faults raised by the model assembler
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


# ============================================================================
# Severity & Domain
# ============================================================================

class Severity(str, Enum):
    """
    Fault severity levels.

    Determines logging level and whether the build can continue.
    """
    INFO = "info"       # Informational, no action needed
    WARN = "warn"       # Recovered, should be reviewed
    ERROR = "error"     # Failed operation
    FATAL = "fatal"     # Model assembly aborted


class FaultDomain:
    """
    Fault domains (taxonomy).

    Identifies the functional area where a fault occurred.
    """

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.value = name
        self.description = description

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"FaultDomain(name='{self.name}')"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, FaultDomain):
            return self.name == other.name
        return str(self) == str(other)

    def __hash__(self) -> int:
        return hash(self.name)


# Standard Domains
FaultDomain.MODEL = FaultDomain("model", "Dependency model assembly")
FaultDomain.DESCRIPTOR = FaultDomain("descriptor", "Extension descriptor parsing")
FaultDomain.CODEC = FaultDomain("codec", "Model encoding and transport")
FaultDomain.CONFIG = FaultDomain("config", "Configuration errors")


DOMAIN_DEFAULTS = {
    FaultDomain.MODEL: Severity.FATAL,
    FaultDomain.DESCRIPTOR: Severity.WARN,
    FaultDomain.CODEC: Severity.ERROR,
    FaultDomain.CONFIG: Severity.FATAL,
}


# ============================================================================
# Fault - Base Class
# ============================================================================

class Fault(Exception):
    """
    Base fault class - structured, typed fault object.

    Attributes:
        code: Stable machine-readable identifier (e.g., "INCOMPLETE_MODEL")
        message: Human-readable summary
        domain: Fault domain
        severity: Fault severity
        metadata: Additional context data

    Example:
        ```python
        raise Fault(
            code="INCOMPLETE_MODEL",
            message="No application artifact was set",
            domain=FaultDomain.MODEL,
        )
        ```
    """

    def __init__(
        self,
        code: str,
        message: str,
        *,
        domain: FaultDomain,
        severity: Optional[Severity] = None,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.domain = domain
        self.severity = severity or DOMAIN_DEFAULTS.get(domain, Severity.ERROR)
        self.metadata = metadata or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "domain": self.domain.name,
            "severity": self.severity.value,
            "metadata": self.metadata,
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(code={self.code!r}, "
            f"domain={self.domain.value}, severity={self.severity.value})"
        )


# ============================================================================
# Concrete Faults
# ============================================================================

class MalformedArtifactDescriptor(Fault):
    """A colon-delimited artifact token does not parse."""

    def __init__(
        self,
        token: str,
        reason: str,
        *,
        extension: Optional[str] = None,
        descriptor_key: Optional[str] = None,
    ):
        self.token = token
        self.reason = reason
        self.extension = extension
        self.descriptor_key = descriptor_key

        where = f" (extension '{extension}', key '{descriptor_key}')" if extension else ""
        super().__init__(
            code="MALFORMED_ARTIFACT_DESCRIPTOR",
            message=f"Malformed artifact descriptor '{token}': {reason}{where}",
            domain=FaultDomain.DESCRIPTOR,
            metadata={
                "token": token,
                "reason": reason,
                "extension": extension,
                "descriptor_key": descriptor_key,
            },
        )

    def for_extension(self, extension: str, descriptor_key: str) -> "MalformedArtifactDescriptor":
        """Same failure, attributed to the descriptor it came from."""
        return MalformedArtifactDescriptor(
            self.token,
            self.reason,
            extension=extension,
            descriptor_key=descriptor_key,
        )


class InvalidArgumentFault(Fault):
    """An accumulation call received an absent or wrongly typed value."""

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        super().__init__(
            code="INVALID_ARGUMENT",
            message=f"{operation}: {reason}",
            domain=FaultDomain.MODEL,
            severity=Severity.ERROR,
            metadata={"operation": operation, "reason": reason},
        )


class IncompleteModelFault(Fault):
    """``build()`` was invoked before the application artifact was set."""

    def __init__(self, missing: str = "app_artifact"):
        super().__init__(
            code="INCOMPLETE_MODEL",
            message=f"Cannot build application model: '{missing}' is not set",
            domain=FaultDomain.MODEL,
            metadata={"missing": missing},
        )


class ModelDecodeFault(Fault):
    """An encoded model could not be reconstructed."""

    def __init__(self, reason: str, **metadata: Any):
        super().__init__(
            code="MODEL_DECODE_FAILED",
            message=f"Cannot decode application model: {reason}",
            domain=FaultDomain.CODEC,
            metadata={"reason": reason, **metadata},
        )


class ConfigInvalidFault(Fault):
    """Configuration value is invalid."""

    def __init__(self, key: str, reason: str):
        super().__init__(
            code="CONFIG_INVALID",
            message=f"Configuration key '{key}' is invalid: {reason}",
            domain=FaultDomain.CONFIG,
            metadata={"key": key, "reason": reason},
        )
