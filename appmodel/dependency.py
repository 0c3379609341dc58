"""
Dependency — an artifact plus how it was reached.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import IntFlag

from .keys import Artifact, ArtifactKey


class DependencyFlags(IntFlag):
    """Kind flags attached to a resolved dependency."""

    NONE = 0
    # Declared by the application itself, not pulled in transitively
    DIRECT = 1
    RUNTIME_CP = 2
    DEPLOYMENT_CP = 4
    RUNTIME_EXTENSION_ARTIFACT = 8
    WORKSPACE_MODULE = 16


@dataclass(frozen=True)
class Dependency:
    """A resolved dependency as recorded in one of the model's lists."""

    artifact: Artifact
    scope: str = "compile"
    optional: bool = False
    flags: DependencyFlags = DependencyFlags.NONE

    @classmethod
    def direct(cls, artifact: Artifact, **kwargs) -> "Dependency":
        flags = kwargs.pop("flags", DependencyFlags.NONE)
        return cls(artifact, flags=flags | DependencyFlags.DIRECT, **kwargs)

    @property
    def key(self) -> ArtifactKey:
        return self.artifact.key

    @property
    def is_direct(self) -> bool:
        return bool(self.flags & DependencyFlags.DIRECT)

    @property
    def is_transitive(self) -> bool:
        return not self.is_direct

    def is_flag_set(self, flag: DependencyFlags) -> bool:
        return (self.flags & flag) == flag

    def with_flags(self, flags: DependencyFlags) -> "Dependency":
        """Copy with *flags* added."""
        return replace(self, flags=self.flags | flags)

    def to_dict(self) -> dict:
        return {
            "artifact": self.artifact.to_dict(),
            "scope": self.scope,
            "optional": self.optional,
            "flags": int(self.flags),
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Dependency":
        return cls(
            artifact=Artifact.from_dict(d["artifact"]),
            scope=d.get("scope", "compile"),
            optional=bool(d.get("optional", False)),
            flags=DependencyFlags(d.get("flags", 0)),
        )

    def __str__(self) -> str:
        marker = "direct" if self.is_direct else "transitive"
        return f"{self.artifact} ({self.scope}, {marker})"
