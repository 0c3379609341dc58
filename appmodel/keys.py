"""
Artifact identity — versioned artifacts and version-less artifact keys.

Token forms::

    group
    group:name
    group:name:classifier
    group:name:classifier:type

Missing trailing segments take their defaults (classifier ``""``,
type ``"jar"``).  Classification and exclusion always match on
:class:`ArtifactKey`; resolution identity is :class:`Artifact`, which
adds the version.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .faults import MalformedArtifactDescriptor

DEFAULT_CLASSIFIER = ""
DEFAULT_TYPE = "jar"


# ── ArtifactKey ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ArtifactKey:
    """Artifact identity without version."""

    group: str
    name: str = ""
    classifier: str = DEFAULT_CLASSIFIER
    type: str = DEFAULT_TYPE

    def __post_init__(self) -> None:
        fields = (self.group, self.name, self.classifier, self.type)
        token = ":".join(str(f) for f in fields)
        if not all(isinstance(f, str) for f in fields):
            raise MalformedArtifactDescriptor(token, "segments must be strings")
        if any(":" in f for f in fields):
            raise MalformedArtifactDescriptor(token, "segments must not contain ':'")
        if not self.group:
            raise MalformedArtifactDescriptor(token, "empty group")
        if not self.type:
            raise MalformedArtifactDescriptor(token, "empty type")
        # A group-only key has no token form carrying a classifier or type.
        if not self.name and (self.classifier != DEFAULT_CLASSIFIER or self.type != DEFAULT_TYPE):
            raise MalformedArtifactDescriptor(token, "empty name")

    @property
    def sort_key(self) -> Tuple[str, str, str, str]:
        return (self.group, self.name, self.classifier, self.type)

    @classmethod
    def from_parts(cls, parts: Sequence[str]) -> "ArtifactKey":
        """
        Build a key from already-split token segments.

        Raises:
            MalformedArtifactDescriptor: on 0 or more than 4 segments, an
                empty group, or an explicitly empty name.
        """
        token = ":".join(parts)
        if not parts:
            raise MalformedArtifactDescriptor(token, "no segments")
        if len(parts) > 4:
            raise MalformedArtifactDescriptor(
                token, f"expected at most 4 segments, got {len(parts)}"
            )
        if not parts[0]:
            raise MalformedArtifactDescriptor(token, "empty group")
        if len(parts) > 1 and not parts[1]:
            raise MalformedArtifactDescriptor(token, "empty name")

        return cls(
            group=parts[0],
            name=parts[1] if len(parts) > 1 else "",
            classifier=parts[2] if len(parts) > 2 else DEFAULT_CLASSIFIER,
            type=(parts[3] or DEFAULT_TYPE) if len(parts) > 3 else DEFAULT_TYPE,
        )

    @classmethod
    def from_string(cls, token: str) -> "ArtifactKey":
        """Parse ``group[:name[:classifier[:type]]]``."""
        if not token:
            raise MalformedArtifactDescriptor(token, "no segments")
        return cls.from_parts(token.split(":"))

    def to_token(self) -> str:
        """Shortest token that parses back to an equal key."""
        parts = [self.group, self.name, self.classifier, self.type]
        if self.type == DEFAULT_TYPE:
            parts.pop()
            if self.classifier == DEFAULT_CLASSIFIER:
                parts.pop()
                if not self.name:
                    parts.pop()
        return ":".join(parts)

    def to_dict(self) -> dict:
        return {
            "group": self.group,
            "name": self.name,
            "classifier": self.classifier,
            "type": self.type,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "ArtifactKey":
        return cls(
            group=d["group"],
            name=d.get("name", ""),
            classifier=d.get("classifier", DEFAULT_CLASSIFIER),
            type=d.get("type", DEFAULT_TYPE),
        )

    def __str__(self) -> str:
        return f"{self.group}:{self.name}:{self.classifier}:{self.type}"


# ── Result-style parsing ────────────────────────────────────────────────


@dataclass(frozen=True)
class KeyParseResult:
    """Outcome of parsing one token: either a key or a parse failure."""

    token: str
    key: Optional[ArtifactKey] = None
    error: Optional[MalformedArtifactDescriptor] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_artifact_key(token: str) -> KeyParseResult:
    """Parse *token* without raising; failures are returned, not thrown."""
    try:
        return KeyParseResult(token=token, key=ArtifactKey.from_string(token))
    except MalformedArtifactDescriptor as exc:
        return KeyParseResult(token=token, error=exc)


# ── Artifact ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Artifact:
    """A resolved, versioned artifact."""

    key: ArtifactKey
    version: str

    @classmethod
    def of(
        cls,
        group: str,
        name: str,
        version: str,
        *,
        classifier: str = DEFAULT_CLASSIFIER,
        type: str = DEFAULT_TYPE,
    ) -> "Artifact":
        return cls(ArtifactKey(group, name, classifier, type), version)

    @classmethod
    def from_string(cls, coords: str) -> "Artifact":
        """
        Parse Maven-style coordinates, version last::

            group:name:version
            group:name:type:version
            group:name:classifier:type:version
        """
        parts = coords.split(":") if coords else []
        if len(parts) < 3 or len(parts) > 5:
            raise MalformedArtifactDescriptor(
                coords, f"expected 3 to 5 segments, got {len(parts)}"
            )
        if not parts[-1]:
            raise MalformedArtifactDescriptor(coords, "empty version")

        group, name = parts[0], parts[1]
        if len(parts) == 3:
            key_parts = [group, name]
        elif len(parts) == 4:
            key_parts = [group, name, DEFAULT_CLASSIFIER, parts[2]]
        else:
            key_parts = [group, name, parts[2], parts[3]]
        return cls(ArtifactKey.from_parts(key_parts), parts[-1])

    @property
    def group(self) -> str:
        return self.key.group

    @property
    def name(self) -> str:
        return self.key.name

    @property
    def classifier(self) -> str:
        return self.key.classifier

    @property
    def type(self) -> str:
        return self.key.type

    def to_dict(self) -> dict:
        return {**self.key.to_dict(), "version": self.version}

    @classmethod
    def from_dict(cls, d: dict) -> "Artifact":
        return cls(ArtifactKey.from_dict(d), d["version"])

    def __str__(self) -> str:
        return f"{self.key}:{self.version}"
