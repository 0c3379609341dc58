"""
ApplicationModel — the frozen dependency model handed to class loader
construction.

The model is produced once by :class:`~appmodel.builder.ApplicationModelBuilder`
and may cross a process boundary.  Its encoded form is an envelope:

.. code-block:: json

    {
        "__format__": "appmodel",
        "schema_version": "1.0",
        "toolchain": "1.0.0",
        "integrity": {"algorithm": "sha256", "digest": "abc123..."},
        "payload": {...}
    }

Only the same toolchain version is guaranteed to decode a model.
"""

from __future__ import annotations

import hashlib
import json
import warnings
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Tuple

from . import __version__
from .dependency import Dependency
from .faults import MalformedArtifactDescriptor, ModelDecodeFault
from .keys import Artifact, ArtifactKey

FORMAT_NAME = "appmodel"
SCHEMA_VERSION = "1.0"

# Fixed-length digests only; shake_* need an explicit output length.
SUPPORTED_ALGORITHMS = frozenset(
    name for name in hashlib.algorithms_guaranteed if not name.startswith("shake_")
)


class LoaderPlacement(str, Enum):
    """Where a class loader consumer should place an artifact."""

    PARENT_FIRST = "parent-first"
    LESSER_PRIORITY = "lesser-priority"
    NORMAL = "normal"


@dataclass(frozen=True)
class ModelIntegrity:
    """SHA-256 proof over the canonical payload."""

    algorithm: str = "sha256"
    digest: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"algorithm": self.algorithm, "digest": self.digest}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ModelIntegrity":
        return cls(algorithm=d.get("algorithm", "sha256"), digest=d.get("digest", ""))

    @classmethod
    def compute(cls, payload: Dict[str, Any], algorithm: str = "sha256") -> "ModelIntegrity":
        h = hashlib.new(algorithm)
        h.update(_canonical_bytes(payload))
        return cls(algorithm=algorithm, digest=h.hexdigest())

    def verify(self, payload: Dict[str, Any]) -> bool:
        return self.__class__.compute(payload, self.algorithm).digest == self.digest


def _canonical_bytes(payload: Dict[str, Any]) -> bytes:
    return json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")


def _keys_to_list(keys: Iterable[ArtifactKey]) -> List[Dict[str, str]]:
    return [k.to_dict() for k in sorted(keys, key=lambda k: k.sort_key)]


class ApplicationModel:
    """
    The dependency model of one application build.

    Holds the root artifact, three ordered dependency lists and the
    classification sets a class loader consumer needs.  All collections
    are immutable (tuples, frozensets, a read-only mapping).

    The classification sets may overlap.  The model does not decide which
    classification wins; see :meth:`classify` for the consumer policy.
    """

    __slots__ = (
        "_app_artifact",
        "_runtime_deps",
        "_deployment_deps",
        "_full_deployment_deps",
        "_parent_first",
        "_runner_parent_first",
        "_lesser_priority",
        "_local_project",
        "_platform_properties",
    )

    def __init__(
        self,
        app_artifact: Artifact,
        *,
        runtime_deps: Iterable[Dependency] = (),
        deployment_deps: Iterable[Dependency] = (),
        full_deployment_deps: Iterable[Dependency] = (),
        parent_first_artifacts: Iterable[ArtifactKey] = (),
        runner_parent_first_artifacts: Iterable[ArtifactKey] = (),
        lesser_priority_artifacts: Iterable[ArtifactKey] = (),
        local_project_artifacts: Iterable[ArtifactKey] = (),
        platform_properties: Mapping[str, str] = MappingProxyType({}),
    ) -> None:
        set_ = object.__setattr__
        set_(self, "_app_artifact", app_artifact)
        set_(self, "_runtime_deps", tuple(runtime_deps))
        set_(self, "_deployment_deps", tuple(deployment_deps))
        set_(self, "_full_deployment_deps", tuple(full_deployment_deps))
        set_(self, "_parent_first", frozenset(parent_first_artifacts))
        set_(self, "_runner_parent_first", frozenset(runner_parent_first_artifacts))
        set_(self, "_lesser_priority", frozenset(lesser_priority_artifacts))
        set_(self, "_local_project", frozenset(local_project_artifacts))
        set_(self, "_platform_properties", MappingProxyType(dict(platform_properties)))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"ApplicationModel is immutable (cannot set '{name}')")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"ApplicationModel is immutable (cannot delete '{name}')")

    # ── Accessors ────────────────────────────────────────────────────

    @property
    def app_artifact(self) -> Artifact:
        return self._app_artifact

    @property
    def runtime_deps(self) -> Tuple[Dependency, ...]:
        """Third-party and extension runtime dependencies, exclusions applied."""
        return self._runtime_deps

    @property
    def user_dependencies(self) -> Tuple[Dependency, ...]:
        return self._runtime_deps

    @property
    def deployment_deps(self) -> Tuple[Dependency, ...]:
        """Direct deployment dependencies only (narrow, legacy view)."""
        return self._deployment_deps

    def get_deployment_dependencies(self) -> Tuple[Dependency, ...]:
        warnings.warn(
            "get_deployment_dependencies() is deprecated, use full_deployment_deps",
            DeprecationWarning,
            stacklevel=2,
        )
        return self._deployment_deps

    @property
    def full_deployment_deps(self) -> Tuple[Dependency, ...]:
        """Deployment dependencies plus their transitive closure (augmentation)."""
        return self._full_deployment_deps

    @property
    def parent_first_artifacts(self) -> FrozenSet[ArtifactKey]:
        return self._parent_first

    @property
    def runner_parent_first_artifacts(self) -> FrozenSet[ArtifactKey]:
        """Parent-first keys for the packaged runtime loader."""
        return self._runner_parent_first

    @property
    def lesser_priority_artifacts(self) -> FrozenSet[ArtifactKey]:
        return self._lesser_priority

    @property
    def local_project_artifacts(self) -> FrozenSet[ArtifactKey]:
        """Keys of modules from the local multi-module build."""
        return self._local_project

    @property
    def platform_properties(self) -> Mapping[str, str]:
        return self._platform_properties

    # ── Consumer policy ──────────────────────────────────────────────

    def is_parent_first(self, key: ArtifactKey, *, runner: bool = False) -> bool:
        keys = self._runner_parent_first if runner else self._parent_first
        return key in keys

    def is_lesser_priority(self, key: ArtifactKey) -> bool:
        return key in self._lesser_priority

    def is_local_project(self, key: ArtifactKey) -> bool:
        return key in self._local_project

    def classify(self, key: ArtifactKey, *, runner: bool = False) -> LoaderPlacement:
        """
        Resolve overlapping classifications for one key.

        Parent-first wins over lesser-priority.  Local-project membership
        does not affect placement.
        """
        if self.is_parent_first(key, runner=runner):
            return LoaderPlacement.PARENT_FIRST
        if self.is_lesser_priority(key):
            return LoaderPlacement.LESSER_PRIORITY
        return LoaderPlacement.NORMAL

    def check_invariants(self) -> List[str]:
        """Return human-readable invariant violations (empty when consistent)."""
        problems: List[str] = []
        full = {d.artifact for d in self._full_deployment_deps}
        for dep in self._deployment_deps:
            if dep.artifact not in full:
                problems.append(
                    f"deployment dependency {dep.artifact} missing from full deployment dependencies"
                )
        return problems

    # ── Encoding ─────────────────────────────────────────────────────

    def payload(self) -> Dict[str, Any]:
        """Canonical, JSON-ready representation of every field."""
        return {
            "app_artifact": self._app_artifact.to_dict(),
            "runtime_deps": [d.to_dict() for d in self._runtime_deps],
            "deployment_deps": [d.to_dict() for d in self._deployment_deps],
            "full_deployment_deps": [d.to_dict() for d in self._full_deployment_deps],
            "parent_first_artifacts": _keys_to_list(self._parent_first),
            "runner_parent_first_artifacts": _keys_to_list(self._runner_parent_first),
            "lesser_priority_artifacts": _keys_to_list(self._lesser_priority),
            "local_project_artifacts": _keys_to_list(self._local_project),
            "platform_properties": {
                k: self._platform_properties[k] for k in sorted(self._platform_properties)
            },
        }

    @property
    def integrity(self) -> ModelIntegrity:
        return ModelIntegrity.compute(self.payload())

    @property
    def digest(self) -> str:
        """Full digest string, e.g. ``sha256:abc123…``."""
        i = self.integrity
        return f"{i.algorithm}:{i.digest}"

    def to_dict(self) -> Dict[str, Any]:
        payload = self.payload()
        return {
            "__format__": FORMAT_NAME,
            "schema_version": SCHEMA_VERSION,
            "toolchain": __version__,
            "integrity": ModelIntegrity.compute(payload).to_dict(),
            "payload": payload,
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def to_bytes(self, indent: int = 2) -> bytes:
        return self.to_json(indent=indent).encode("utf-8")

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ApplicationModel":
        return cls(
            Artifact.from_dict(payload["app_artifact"]),
            runtime_deps=[Dependency.from_dict(d) for d in payload["runtime_deps"]],
            deployment_deps=[Dependency.from_dict(d) for d in payload["deployment_deps"]],
            full_deployment_deps=[
                Dependency.from_dict(d) for d in payload["full_deployment_deps"]
            ],
            parent_first_artifacts=[
                ArtifactKey.from_dict(k) for k in payload["parent_first_artifacts"]
            ],
            runner_parent_first_artifacts=[
                ArtifactKey.from_dict(k) for k in payload["runner_parent_first_artifacts"]
            ],
            lesser_priority_artifacts=[
                ArtifactKey.from_dict(k) for k in payload["lesser_priority_artifacts"]
            ],
            local_project_artifacts=[
                ArtifactKey.from_dict(k) for k in payload["local_project_artifacts"]
            ],
            platform_properties=payload["platform_properties"],
        )

    @classmethod
    def from_dict(cls, d: Dict[str, Any], *, verify: bool = True) -> "ApplicationModel":
        """
        Reconstruct a model from :meth:`to_dict` output.

        Raises:
            ModelDecodeFault: foreign format, other schema or toolchain
                version, integrity mismatch, or a malformed payload.
        """
        if not isinstance(d, dict) or d.get("__format__") != FORMAT_NAME:
            raise ModelDecodeFault("not an appmodel envelope")
        if d.get("schema_version") != SCHEMA_VERSION:
            raise ModelDecodeFault(
                f"unsupported schema version {d.get('schema_version')!r}",
                expected=SCHEMA_VERSION,
            )
        if d.get("toolchain") != __version__:
            raise ModelDecodeFault(
                f"model was written by toolchain {d.get('toolchain')!r}, "
                f"this is {__version__!r}",
            )

        payload = d.get("payload")
        if not isinstance(payload, dict):
            raise ModelDecodeFault("missing payload")

        if verify:
            raw_integrity = d.get("integrity", {})
            if not isinstance(raw_integrity, dict):
                raise ModelDecodeFault("integrity block is not a mapping")
            integrity = ModelIntegrity.from_dict(raw_integrity)
            if (
                not isinstance(integrity.algorithm, str)
                or integrity.algorithm not in SUPPORTED_ALGORITHMS
            ):
                raise ModelDecodeFault(
                    f"unsupported integrity algorithm {integrity.algorithm!r}",
                    supported=sorted(SUPPORTED_ALGORITHMS),
                )
            try:
                intact = integrity.verify(payload)
            except (TypeError, ValueError) as exc:
                raise ModelDecodeFault(f"unusable integrity block: {exc}") from exc
            if not intact:
                raise ModelDecodeFault("integrity digest mismatch", digest=integrity.digest)

        try:
            return cls.from_payload(payload)
        except (AttributeError, KeyError, TypeError, ValueError, MalformedArtifactDescriptor) as exc:
            raise ModelDecodeFault(f"malformed payload: {exc!r}") from exc

    @classmethod
    def from_json(cls, raw: str, *, verify: bool = True) -> "ApplicationModel":
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ModelDecodeFault(f"invalid JSON: {exc}") from exc
        return cls.from_dict(data, verify=verify)

    @classmethod
    def from_bytes(cls, data: bytes, *, verify: bool = True) -> "ApplicationModel":
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ModelDecodeFault(f"invalid UTF-8: {exc}") from exc
        return cls.from_json(text, verify=verify)

    def __reduce__(self):
        return (_restore_model, (self.payload(),))

    # ── Dunder ───────────────────────────────────────────────────────

    def _identity(self) -> tuple:
        return (
            self._app_artifact,
            self._runtime_deps,
            self._deployment_deps,
            self._full_deployment_deps,
            self._parent_first,
            self._runner_parent_first,
            self._lesser_priority,
            self._local_project,
            frozenset(self._platform_properties.items()),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ApplicationModel):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())

    def __repr__(self) -> str:
        return (
            f"ApplicationModel(app_artifact={self._app_artifact}, "
            f"runtime_deps={len(self._runtime_deps)}, "
            f"deployment_deps={len(self._deployment_deps)}, "
            f"full_deployment_deps={len(self._full_deployment_deps)}, "
            f"parent_first={len(self._parent_first)}, "
            f"runner_parent_first={len(self._runner_parent_first)}, "
            f"lesser_priority={len(self._lesser_priority)}, "
            f"local_project={len(self._local_project)})"
        )


def _restore_model(payload: Dict[str, Any]) -> ApplicationModel:
    return ApplicationModel.from_payload(payload)
