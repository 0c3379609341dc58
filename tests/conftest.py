"""
Shared test fixtures for the appmodel test suite.
"""

import pytest

from appmodel import ApplicationModelBuilder, Artifact

from helpers import dep


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def app_artifact() -> Artifact:
    return Artifact.of("org.acme", "acme-app", "1.0.0-SNAPSHOT")


@pytest.fixture
def builder(app_artifact) -> ApplicationModelBuilder:
    return ApplicationModelBuilder().set_app_artifact(app_artifact)


@pytest.fixture
def populated_builder(builder) -> ApplicationModelBuilder:
    deployment = [
        dep("io.quarkus:quarkus-arc-deployment:2.0.0", direct=True),
        dep("io.quarkus:quarkus-core-deployment:2.0.0", direct=True),
    ]
    full = deployment + [
        dep("io.quarkus.gizmo:gizmo:1.0.0"),
        dep("org.ow2.asm:asm:9.1"),
    ]
    (
        builder
        .add_runtime_deps([
            dep("io.quarkus:quarkus-arc:2.0.0", direct=True),
            dep("org.jboss.logging:jboss-logging:3.4.1.Final"),
            dep("org.acme:acme-lib:2.0", direct=True),
        ])
        .add_deployment_deps(deployment)
        .add_full_deployment_deps(full)
        .add_local_project_artifact(builder.app_artifact.key)
        .add_platform_properties({"platform.quarkus.version": "2.0.0"})
    )
    builder.merge_extension_descriptor(
        {
            "parent-first-artifacts": "org.jboss.logging:jboss-logging",
            "runner-parent-first-artifacts": "org.graalvm.sdk:graal-sdk",
            "lesser-priority-artifacts": "org.acme:acme-fallback",
        },
        "quarkus-core",
    )
    return builder
