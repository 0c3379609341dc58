"""
Small builders shared by the appmodel tests.
"""

from typing import Optional

from appmodel import Artifact, Dependency, DependencyFlags


def dep(
    coords: str,
    *,
    direct: bool = False,
    scope: str = "compile",
    flags: Optional[DependencyFlags] = None,
) -> Dependency:
    """Build a Dependency from ``group:name:version`` style coordinates."""
    artifact = Artifact.from_string(coords)
    extra = flags or DependencyFlags.NONE
    if direct:
        return Dependency.direct(artifact, scope=scope, flags=extra)
    return Dependency(artifact, scope=scope, flags=extra)


def coords(deps) -> list:
    return [str(d.artifact) for d in deps]
