"""
Tests for the resolver collaborator interface.
"""

from __future__ import annotations

import pytest

from appmodel import (
    ApplicationModelBuilder,
    Artifact,
    ArtifactKey,
    DependencyResolver,
    MemoryResolver,
    populate_builder,
)

from helpers import coords, dep


class TestDependencyResolver:
    def test_protocol_methods_are_abstract(self, app_artifact):
        resolver = DependencyResolver()
        for method in ("resolve_runtime", "resolve_deployment", "resolve_full_deployment"):
            with pytest.raises(NotImplementedError):
                getattr(resolver, method)(app_artifact)


class TestMemoryResolver:
    def test_unknown_root(self, app_artifact):
        with pytest.raises(LookupError):
            MemoryResolver().resolve_runtime(app_artifact)

    def test_returns_copies(self, app_artifact):
        resolver = MemoryResolver().register(app_artifact, runtime=[dep("a:a:1")])
        resolver.resolve_runtime(app_artifact).append(dep("b:b:1"))
        assert coords(resolver.resolve_runtime(app_artifact)) == ["a:a::jar:1"]


class TestPopulateBuilder:
    def test_end_to_end(self, app_artifact):
        resolver = MemoryResolver().register(
            app_artifact,
            runtime=[
                dep("org.acme:lib:2.0", direct=True),
                dep("io.quarkus:quarkus-ide-launcher:2.0.0", direct=True),
                dep("org.legacy:old:1.0"),
            ],
            deployment=[dep("io.quarkus:quarkus-core-deployment:2.0.0", direct=True)],
            full_deployment=[
                dep("io.quarkus:quarkus-core-deployment:2.0.0", direct=True),
                dep("org.ow2.asm:asm:9.1"),
            ],
        )
        builder = populate_builder(ApplicationModelBuilder(), resolver, app_artifact)
        builder.merge_extension_descriptor(
            {"excluded-artifacts": "org.legacy:old", "parent-first-artifacts": "org.ow2.asm:asm"},
            "quarkus-core",
        )
        model = builder.build()

        assert model.app_artifact == app_artifact
        assert coords(model.runtime_deps) == ["org.acme:lib::jar:2.0"]
        assert coords(model.full_deployment_deps) == [
            "io.quarkus:quarkus-core-deployment::jar:2.0.0",
            "org.ow2.asm:asm::jar:9.1",
        ]
        assert model.is_parent_first(ArtifactKey("org.ow2.asm", "asm"))
        assert model.check_invariants() == []

    def test_root_must_be_registered(self):
        with pytest.raises(LookupError):
            populate_builder(
                ApplicationModelBuilder(), MemoryResolver(), Artifact.of("g", "a", "1")
            )
