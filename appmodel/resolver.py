"""
Resolver collaborator interface.

The dependency graph resolver lives outside this package.  It walks a
package repository and produces ordered dependency lists for a root
artifact; the builder records them verbatim.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from .builder import ApplicationModelBuilder
from .dependency import Dependency
from .keys import Artifact


class DependencyResolver:
    """Minimal interface every resolver must implement."""

    def resolve_runtime(self, root: Artifact) -> Sequence[Dependency]:
        raise NotImplementedError

    def resolve_deployment(self, root: Artifact) -> Sequence[Dependency]:
        raise NotImplementedError

    def resolve_full_deployment(self, root: Artifact) -> Sequence[Dependency]:
        raise NotImplementedError


class MemoryResolver(DependencyResolver):
    """
    Pre-computed, in-memory resolver.

    Useful for tests and for replaying a resolution captured elsewhere.
    """

    def __init__(self) -> None:
        # root artifact -> (runtime, deployment, full deployment)
        self._graphs: Dict[Artifact, Dict[str, List[Dependency]]] = {}

    def register(
        self,
        root: Artifact,
        *,
        runtime: Optional[Sequence[Dependency]] = None,
        deployment: Optional[Sequence[Dependency]] = None,
        full_deployment: Optional[Sequence[Dependency]] = None,
    ) -> "MemoryResolver":
        self._graphs[root] = {
            "runtime": list(runtime or []),
            "deployment": list(deployment or []),
            "full_deployment": list(full_deployment or []),
        }
        return self

    def _lookup(self, root: Artifact, view: str) -> List[Dependency]:
        try:
            return list(self._graphs[root][view])
        except KeyError:
            raise LookupError(f"No resolution registered for {root}") from None

    def resolve_runtime(self, root: Artifact) -> Sequence[Dependency]:
        return self._lookup(root, "runtime")

    def resolve_deployment(self, root: Artifact) -> Sequence[Dependency]:
        return self._lookup(root, "deployment")

    def resolve_full_deployment(self, root: Artifact) -> Sequence[Dependency]:
        return self._lookup(root, "full_deployment")


def populate_builder(
    builder: ApplicationModelBuilder,
    resolver: DependencyResolver,
    root: Artifact,
) -> ApplicationModelBuilder:
    """Set *root* on *builder* and append the three resolved lists in order."""
    builder.set_app_artifact(root)
    builder.add_runtime_deps(resolver.resolve_runtime(root))
    builder.add_deployment_deps(resolver.resolve_deployment(root))
    builder.add_full_deployment_deps(resolver.resolve_full_deployment(root))
    return builder
