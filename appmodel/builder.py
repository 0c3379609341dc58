"""
ApplicationModelBuilder — accumulates dependencies and classification
policy, then freezes them into an :class:`ApplicationModel`.

Usage::

    model = (
        ApplicationModelBuilder()
        .set_app_artifact(Artifact.of("org.acme", "app", "1.0"))
        .add_runtime_deps(resolved_runtime)
        .add_full_deployment_deps(resolved_deployment)
        .add_platform_properties({"platform.quarkus.native.builder-image": "mandrel"})
    )
    for descriptor in extension_descriptors:
        builder.merge_extension_descriptor(descriptor.properties, descriptor.name)
    model = builder.build()

A builder is not thread-safe: every call must come from the single build
pipeline that owns it.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Mapping, Optional, Set, Union

from .config import ModelSettings
from .dependency import Dependency
from .descriptor import ExtensionDescriptor, read_contribution
from .diagnostics import DiagnosticReport
from .faults import IncompleteModelFault, InvalidArgumentFault
from .keys import Artifact, ArtifactKey
from .model import ApplicationModel

logger = logging.getLogger("appmodel.builder")

# The IDE launcher only bootstraps the build tool and never belongs on
# either class path.
LAUNCHER_GROUP = "io.quarkus"
LAUNCHER_NAME = "quarkus-ide-launcher"


def is_bootstrap_launcher(artifact: Artifact) -> bool:
    return artifact.group == LAUNCHER_GROUP and artifact.name == LAUNCHER_NAME


def _require(operation: str, value: Any, expected: type) -> None:
    if value is None:
        raise InvalidArgumentFault(operation, "value must not be None")
    if not isinstance(value, expected):
        raise InvalidArgumentFault(
            operation,
            f"expected {expected.__name__}, got {type(value).__name__}",
        )


def _require_all(operation: str, values: Iterable[Any], expected: type) -> List[Any]:
    if values is None:
        raise InvalidArgumentFault(operation, "value must not be None")
    batch = list(values)
    for value in batch:
        _require(operation, value, expected)
    return batch


class ApplicationModelBuilder:
    """
    Mutable accumulator for one build invocation.

    Every ``set_*`` / ``add_*`` method returns ``self`` for chaining.
    """

    def __init__(self, settings: Optional[ModelSettings] = None) -> None:
        self.settings = settings or ModelSettings()
        self._app_artifact: Optional[Artifact] = None

        self._runtime_deps: List[Dependency] = []
        self._deployment_deps: List[Dependency] = []
        self._full_deployment_deps: List[Dependency] = []

        self._parent_first: Set[ArtifactKey] = set()
        self._runner_parent_first: Set[ArtifactKey] = set()
        self._excluded: Set[ArtifactKey] = set()
        self._lesser_priority: Set[ArtifactKey] = set()
        self._local_project: Set[ArtifactKey] = set()

        self._platform_properties: Dict[str, str] = {}
        self._diagnostics = DiagnosticReport()

    # ── Root ─────────────────────────────────────────────────────────

    def set_app_artifact(self, artifact: Artifact) -> "ApplicationModelBuilder":
        _require("set_app_artifact", artifact, Artifact)
        self._app_artifact = artifact
        return self

    @property
    def app_artifact(self) -> Optional[Artifact]:
        return self._app_artifact

    # ── Platform properties ──────────────────────────────────────────

    def add_platform_properties(self, properties: Mapping[str, str]) -> "ApplicationModelBuilder":
        """
        Merge platform descriptor properties.

        The first non-empty mapping becomes the base; later mappings
        overwrite colliding keys.
        """
        if properties is None:
            raise InvalidArgumentFault("add_platform_properties", "value must not be None")
        for key, value in properties.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise InvalidArgumentFault(
                    "add_platform_properties",
                    f"keys and values must be strings, got {key!r}={value!r}",
                )
        if not self._platform_properties:
            self._platform_properties = dict(properties)
        else:
            self._platform_properties.update(properties)
        return self

    # ── Dependency capture ───────────────────────────────────────────

    def add_runtime_dep(self, dep: Dependency) -> "ApplicationModelBuilder":
        _require("add_runtime_dep", dep, Dependency)
        self._runtime_deps.append(dep)
        return self

    def add_runtime_deps(self, deps: Iterable[Dependency]) -> "ApplicationModelBuilder":
        self._runtime_deps.extend(_require_all("add_runtime_deps", deps, Dependency))
        return self

    def add_deployment_dep(self, dep: Dependency) -> "ApplicationModelBuilder":
        _require("add_deployment_dep", dep, Dependency)
        self._deployment_deps.append(dep)
        return self

    def add_deployment_deps(self, deps: Iterable[Dependency]) -> "ApplicationModelBuilder":
        self._deployment_deps.extend(_require_all("add_deployment_deps", deps, Dependency))
        return self

    def add_full_deployment_dep(self, dep: Dependency) -> "ApplicationModelBuilder":
        _require("add_full_deployment_dep", dep, Dependency)
        self._full_deployment_deps.append(dep)
        return self

    def add_full_deployment_deps(self, deps: Iterable[Dependency]) -> "ApplicationModelBuilder":
        self._full_deployment_deps.extend(
            _require_all("add_full_deployment_deps", deps, Dependency)
        )
        return self

    # ── Classification ───────────────────────────────────────────────

    def _add_key(self, target: Set[ArtifactKey], operation: str, key: ArtifactKey) -> "ApplicationModelBuilder":
        _require(operation, key, ArtifactKey)
        target.add(key)
        return self

    def _add_keys(
        self, target: Set[ArtifactKey], operation: str, keys: Iterable[ArtifactKey]
    ) -> "ApplicationModelBuilder":
        target.update(_require_all(operation, keys, ArtifactKey))
        return self

    def add_parent_first_artifact(self, key: ArtifactKey) -> "ApplicationModelBuilder":
        return self._add_key(self._parent_first, "add_parent_first_artifact", key)

    def add_parent_first_artifacts(self, keys: Iterable[ArtifactKey]) -> "ApplicationModelBuilder":
        return self._add_keys(self._parent_first, "add_parent_first_artifacts", keys)

    def add_runner_parent_first_artifact(self, key: ArtifactKey) -> "ApplicationModelBuilder":
        return self._add_key(self._runner_parent_first, "add_runner_parent_first_artifact", key)

    def add_runner_parent_first_artifacts(
        self, keys: Iterable[ArtifactKey]
    ) -> "ApplicationModelBuilder":
        return self._add_keys(self._runner_parent_first, "add_runner_parent_first_artifacts", keys)

    def add_excluded_artifact(self, key: ArtifactKey) -> "ApplicationModelBuilder":
        return self._add_key(self._excluded, "add_excluded_artifact", key)

    def add_excluded_artifacts(self, keys: Iterable[ArtifactKey]) -> "ApplicationModelBuilder":
        return self._add_keys(self._excluded, "add_excluded_artifacts", keys)

    def add_lesser_priority_artifact(self, key: ArtifactKey) -> "ApplicationModelBuilder":
        return self._add_key(self._lesser_priority, "add_lesser_priority_artifact", key)

    def add_lesser_priority_artifacts(self, keys: Iterable[ArtifactKey]) -> "ApplicationModelBuilder":
        return self._add_keys(self._lesser_priority, "add_lesser_priority_artifacts", keys)

    def add_local_project_artifact(self, key: ArtifactKey) -> "ApplicationModelBuilder":
        return self._add_key(self._local_project, "add_local_project_artifact", key)

    def add_local_project_artifacts(self, keys: Iterable[ArtifactKey]) -> "ApplicationModelBuilder":
        return self._add_keys(self._local_project, "add_local_project_artifacts", keys)

    @property
    def excluded_artifacts(self) -> FrozenSet[ArtifactKey]:
        return frozenset(self._excluded)

    @property
    def diagnostics(self) -> DiagnosticReport:
        return self._diagnostics

    # ── Descriptor merge ─────────────────────────────────────────────

    def merge_extension_descriptor(
        self,
        properties: Union[Mapping[str, str], ExtensionDescriptor],
        extension_name: Optional[str] = None,
        diagnostics: Optional[DiagnosticReport] = None,
    ) -> bool:
        """
        Apply the classification keys of one extension descriptor.

        The descriptor is applied all-or-nothing.  A malformed token is
        recorded in *diagnostics* (the builder's own report by default)
        and nothing from this descriptor is applied; descriptors merged
        before or after are unaffected.

        Args:
            properties: Descriptor properties, or an ExtensionDescriptor
            extension_name: Extension the descriptor belongs to
            diagnostics: Collector for recovered parse failures

        Returns:
            True if the descriptor was applied, False if it was rejected.

        Raises:
            MalformedArtifactDescriptor: only with ``strict_descriptors``.
        """
        if isinstance(properties, ExtensionDescriptor):
            extension_name = extension_name or properties.name
            properties = properties.properties
        if properties is None:
            raise InvalidArgumentFault("merge_extension_descriptor", "properties must not be None")
        if extension_name is None:
            raise InvalidArgumentFault(
                "merge_extension_descriptor", "extension name must not be None"
            )
        report = diagnostics if diagnostics is not None else self._diagnostics

        contribution, failures = read_contribution(properties, extension_name)
        if failures:
            for fault in failures:
                report.add_fault(fault)
                logger.warning(
                    "Ignoring descriptor of extension %s: malformed %s entry '%s' (%s)",
                    extension_name, fault.descriptor_key, fault.token, fault.reason,
                )
            if self.settings.strict_descriptors:
                raise failures[0]
            return False

        self._parent_first.update(contribution.parent_first)
        self._runner_parent_first.update(contribution.runner_parent_first)
        self._excluded.update(contribution.excluded)
        self._lesser_priority.update(contribution.lesser_priority)

        for key in sorted(contribution.excluded, key=lambda k: k.sort_key):
            logger.debug("Extension %s is excluding %s", extension_name, key)
        for key in sorted(contribution.lesser_priority, key=lambda k: k.sort_key):
            logger.debug("Extension %s is making %s a lesser priority artifact", extension_name, key)
        return True

    # ── Build ────────────────────────────────────────────────────────

    def _include_predicate(self) -> Callable[[Dependency], bool]:
        excluded = frozenset(self._excluded)

        def include(dep: Dependency) -> bool:
            if is_bootstrap_launcher(dep.artifact):
                return False
            return dep.key not in excluded

        return include

    def build(self) -> ApplicationModel:
        """
        Filter exclusions and freeze everything into an ApplicationModel.

        Raises:
            IncompleteModelFault: If no application artifact was set.
        """
        if self._app_artifact is None:
            raise IncompleteModelFault("app_artifact")

        include = self._include_predicate()
        model = ApplicationModel(
            self._app_artifact,
            runtime_deps=[d for d in self._runtime_deps if include(d)],
            deployment_deps=[d for d in self._deployment_deps if include(d)],
            full_deployment_deps=[d for d in self._full_deployment_deps if include(d)],
            parent_first_artifacts=self._parent_first,
            runner_parent_first_artifacts=self._runner_parent_first,
            lesser_priority_artifacts=self._lesser_priority,
            local_project_artifacts=self._local_project,
            platform_properties=self._platform_properties,
        )

        for problem in model.check_invariants():
            logger.warning("Inconsistent application model: %s", problem)
        logger.debug("Created %r", model)
        return model
