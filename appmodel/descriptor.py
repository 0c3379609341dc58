"""
Extension descriptors — classification policy contributed by extensions.

Each extension ships a properties descriptor.  Four well-known keys carry
comma-separated artifact-key tokens::

    parent-first-artifacts=org.jboss.logging:jboss-logging
    runner-parent-first-artifacts=io.smallrye:smallrye-config
    excluded-artifacts=io.quarkus:quarkus-ide-launcher
    lesser-priority-artifacts=org.acme:fallback,org.acme:other::test-jar

Any other key is ignored here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, FrozenSet, List, Mapping, Tuple

from .faults import MalformedArtifactDescriptor
from .keys import ArtifactKey, parse_artifact_key

PARENT_FIRST_ARTIFACTS = "parent-first-artifacts"
RUNNER_PARENT_FIRST_ARTIFACTS = "runner-parent-first-artifacts"
EXCLUDED_ARTIFACTS = "excluded-artifacts"
LESSER_PRIORITY_ARTIFACTS = "lesser-priority-artifacts"

CLASSIFICATION_KEYS: Tuple[str, ...] = (
    PARENT_FIRST_ARTIFACTS,
    RUNNER_PARENT_FIRST_ARTIFACTS,
    EXCLUDED_ARTIFACTS,
    LESSER_PRIORITY_ARTIFACTS,
)


def split_key_list(value: str) -> List[str]:
    """Split a comma-separated descriptor value into stripped, non-empty tokens."""
    return [token.strip() for token in value.split(",") if token.strip()]


# ── Properties text ─────────────────────────────────────────────────────


_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


def _unescape(text: str) -> str:
    out = []
    chars = iter(text)
    for ch in chars:
        if ch == "\\":
            nxt = next(chars, "")
            out.append(_ESCAPES.get(nxt, nxt))
        else:
            out.append(ch)
    return "".join(out)


def _logical_lines(text: str) -> List[str]:
    lines: List[str] = []
    pending = ""
    for raw in text.splitlines():
        line = raw.strip()
        if not pending and (not line or line[0] in "#!"):
            continue
        # An odd number of trailing backslashes continues the line
        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            pending += line[:-1]
            continue
        lines.append(pending + line)
        pending = ""
    if pending:
        lines.append(pending)
    return lines


def _split_entry(line: str) -> Tuple[str, str]:
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == "\\":
            i += 2
            continue
        if ch in "=:" or ch.isspace():
            break
        i += 1
    key = line[:i]
    rest = line[i:].lstrip()
    if rest[:1] in ("=", ":"):
        rest = rest[1:].lstrip()
    return _unescape(key), _unescape(rest)


def parse_properties(text: str) -> Dict[str, str]:
    """
    Parse ``.properties`` text into a dict.

    Supports ``=``, ``:`` and whitespace separators, ``#``/``!`` comments,
    backslash line continuations and the common backslash escapes.
    Later duplicate keys win.
    """
    props: Dict[str, str] = {}
    for line in _logical_lines(text):
        key, value = _split_entry(line)
        props[key] = value
    return props


# ── Descriptor values ───────────────────────────────────────────────────


@dataclass(frozen=True)
class ExtensionDescriptor:
    """The properties an extension contributes, tagged with its name."""

    name: str
    properties: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))

    def __hash__(self) -> int:
        return hash((self.name, frozenset(self.properties.items())))

    @classmethod
    def from_properties_text(cls, name: str, text: str) -> "ExtensionDescriptor":
        return cls(name=name, properties=parse_properties(text))

    def get(self, key: str, default=None):
        return self.properties.get(key, default)


@dataclass(frozen=True)
class DescriptorContribution:
    """Keys one descriptor adds to each classification set."""

    parent_first: FrozenSet[ArtifactKey] = frozenset()
    runner_parent_first: FrozenSet[ArtifactKey] = frozenset()
    excluded: FrozenSet[ArtifactKey] = frozenset()
    lesser_priority: FrozenSet[ArtifactKey] = frozenset()

    def is_empty(self) -> bool:
        return not (
            self.parent_first
            or self.runner_parent_first
            or self.excluded
            or self.lesser_priority
        )

    def to_dict(self) -> Dict[str, List[str]]:
        return {
            PARENT_FIRST_ARTIFACTS: sorted(k.to_token() for k in self.parent_first),
            RUNNER_PARENT_FIRST_ARTIFACTS: sorted(
                k.to_token() for k in self.runner_parent_first
            ),
            EXCLUDED_ARTIFACTS: sorted(k.to_token() for k in self.excluded),
            LESSER_PRIORITY_ARTIFACTS: sorted(k.to_token() for k in self.lesser_priority),
        }


def read_contribution(
    properties: Mapping[str, str],
    extension: str,
) -> Tuple[DescriptorContribution, List[MalformedArtifactDescriptor]]:
    """
    Parse every classification key of one descriptor.

    Returns the contribution and the list of parse failures, each
    attributed to *extension* and the descriptor key it was found under.
    The contribution is only meaningful when the failure list is empty.
    """
    parsed: Dict[str, set] = {k: set() for k in CLASSIFICATION_KEYS}
    failures: List[MalformedArtifactDescriptor] = []

    for descriptor_key in CLASSIFICATION_KEYS:
        value = properties.get(descriptor_key)
        if value is None:
            continue
        for token in split_key_list(value):
            result = parse_artifact_key(token)
            if result.ok:
                parsed[descriptor_key].add(result.key)
            else:
                failures.append(result.error.for_extension(extension, descriptor_key))

    contribution = DescriptorContribution(
        parent_first=frozenset(parsed[PARENT_FIRST_ARTIFACTS]),
        runner_parent_first=frozenset(parsed[RUNNER_PARENT_FIRST_ARTIFACTS]),
        excluded=frozenset(parsed[EXCLUDED_ARTIFACTS]),
        lesser_priority=frozenset(parsed[LESSER_PRIORITY_ARTIFACTS]),
    )
    return contribution, failures
