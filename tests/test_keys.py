"""
Tests for artifact identity: ArtifactKey, Artifact and Result-style parsing.
"""

from __future__ import annotations

import pytest

from appmodel import (
    Artifact,
    ArtifactKey,
    Dependency,
    DependencyFlags,
    MalformedArtifactDescriptor,
    parse_artifact_key,
)


# ════════════════════════════════════════════════════════════════════════
# ArtifactKey parsing
# ════════════════════════════════════════════════════════════════════════


class TestArtifactKeyParsing:
    def test_group_only(self):
        key = ArtifactKey.from_string("org.acme")
        assert key == ArtifactKey("org.acme", "", "", "jar")

    def test_group_and_name_defaults(self):
        key = ArtifactKey.from_string("org.jboss.logging:jboss-logging")
        assert key.group == "org.jboss.logging"
        assert key.name == "jboss-logging"
        assert key.classifier == ""
        assert key.type == "jar"

    def test_classifier(self):
        key = ArtifactKey.from_string("org.acme:lib:tests")
        assert key == ArtifactKey("org.acme", "lib", "tests", "jar")

    def test_all_four_segments(self):
        key = ArtifactKey.from_string("org.acme:lib:tests:test-jar")
        assert key == ArtifactKey("org.acme", "lib", "tests", "test-jar")

    def test_empty_type_defaults_to_jar(self):
        assert ArtifactKey.from_string("org.acme:lib:c:").type == "jar"

    def test_from_parts(self):
        assert ArtifactKey.from_parts(["g", "a"]) == ArtifactKey("g", "a")

    @pytest.mark.parametrize("token", ["", ":lib", "org.acme:", "org.acme::c", "a:b:c:d:e"])
    def test_malformed(self, token):
        with pytest.raises(MalformedArtifactDescriptor) as exc_info:
            ArtifactKey.from_string(token)
        assert exc_info.value.token == token
        assert exc_info.value.code == "MALFORMED_ARTIFACT_DESCRIPTOR"

    def test_from_parts_empty(self):
        with pytest.raises(MalformedArtifactDescriptor):
            ArtifactKey.from_parts([])

    def test_no_whitespace_normalization(self):
        key = ArtifactKey.from_string(" org.acme:lib")
        assert key.group == " org.acme"
        assert key != ArtifactKey("org.acme", "lib")

    def test_case_sensitive(self):
        assert ArtifactKey.from_string("Org.Acme:Lib") != ArtifactKey.from_string("org.acme:lib")


class TestArtifactKeyTokens:
    @pytest.mark.parametrize(
        "token",
        ["org.acme", "org.acme:lib", "org.acme:lib:tests", "org.acme:lib:tests:test-jar",
         "org.acme:lib::pom"],
    )
    def test_canonical_token_round_trip(self, token):
        assert ArtifactKey.from_string(token).to_token() == token

    def test_default_type_is_dropped(self):
        assert ArtifactKey.from_string("org.acme:lib:tests:jar").to_token() == "org.acme:lib:tests"

    def test_str_is_full_form(self):
        assert str(ArtifactKey("org.acme", "lib")) == "org.acme:lib::jar"

    def test_dict_round_trip(self):
        key = ArtifactKey("org.acme", "lib", "tests", "test-jar")
        assert ArtifactKey.from_dict(key.to_dict()) == key


class TestArtifactKeyConstruction:
    @pytest.mark.parametrize(
        "fields, reason",
        [
            (("org.acme", "", "tests"), "empty name"),
            (("org.acme", "", "", "pom"), "empty name"),
            (("", "lib"), "empty group"),
            (("org.acme", "lib", "", ""), "empty type"),
            (("org.acme", "lib:x"), "':'"),
            (("org:acme", "lib"), "':'"),
            (("org.acme", 1), "strings"),
        ],
    )
    def test_unrepresentable_keys_are_rejected(self, fields, reason):
        with pytest.raises(MalformedArtifactDescriptor, match=reason):
            ArtifactKey(*fields)

    def test_group_only_key(self):
        key = ArtifactKey("org.acme")
        assert key.to_token() == "org.acme"
        assert ArtifactKey.from_string(key.to_token()) == key

    def test_sort_key_orders_by_fields(self):
        keys = [ArtifactKey("b", "a"), ArtifactKey("a", "b", "c"), ArtifactKey("a", "b")]
        assert sorted(keys, key=lambda k: k.sort_key) == [
            ArtifactKey("a", "b"), ArtifactKey("a", "b", "c"), ArtifactKey("b", "a"),
        ]


class TestArtifactKeyValue:
    def test_structural_equality_and_hash(self):
        a = ArtifactKey("g", "a")
        b = ArtifactKey.from_string("g:a")
        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1

    def test_frozen(self):
        key = ArtifactKey("g", "a")
        with pytest.raises(AttributeError):
            key.group = "other"


# ════════════════════════════════════════════════════════════════════════
# Result-style parsing
# ════════════════════════════════════════════════════════════════════════


class TestParseArtifactKey:
    def test_ok(self):
        result = parse_artifact_key("org.acme:lib")
        assert result.ok
        assert result.key == ArtifactKey("org.acme", "lib")
        assert result.error is None

    def test_failure_is_returned(self):
        result = parse_artifact_key("org.acme::x")
        assert not result.ok
        assert result.key is None
        assert isinstance(result.error, MalformedArtifactDescriptor)
        assert result.token == "org.acme::x"


# ════════════════════════════════════════════════════════════════════════
# Artifact
# ════════════════════════════════════════════════════════════════════════


class TestArtifact:
    def test_of(self):
        a = Artifact.of("org.acme", "lib", "2.0")
        assert a.key == ArtifactKey("org.acme", "lib")
        assert a.version == "2.0"
        assert (a.group, a.name, a.classifier, a.type) == ("org.acme", "lib", "", "jar")

    def test_version_is_part_of_identity(self):
        assert Artifact.of("g", "a", "1") != Artifact.of("g", "a", "2")
        assert Artifact.of("g", "a", "1").key == Artifact.of("g", "a", "2").key

    @pytest.mark.parametrize(
        "coords, expected",
        [
            ("org.acme:lib:2.0", Artifact.of("org.acme", "lib", "2.0")),
            ("org.acme:lib:pom:2.0", Artifact.of("org.acme", "lib", "2.0", type="pom")),
            ("org.acme:lib:tests:jar:2.0",
             Artifact.of("org.acme", "lib", "2.0", classifier="tests")),
        ],
    )
    def test_from_string(self, coords, expected):
        assert Artifact.from_string(coords) == expected

    @pytest.mark.parametrize("coords", ["", "org.acme:lib", "org.acme:lib:", "a:b:c:d:e:f"])
    def test_from_string_malformed(self, coords):
        with pytest.raises(MalformedArtifactDescriptor):
            Artifact.from_string(coords)

    def test_str(self):
        assert str(Artifact.of("io.quarkus", "quarkus-core", "2.0")) == "io.quarkus:quarkus-core::jar:2.0"

    def test_dict_round_trip(self):
        a = Artifact.of("org.acme", "lib", "2.0", classifier="tests")
        assert Artifact.from_dict(a.to_dict()) == a


# ════════════════════════════════════════════════════════════════════════
# Dependency
# ════════════════════════════════════════════════════════════════════════


class TestDependency:
    def test_default_is_transitive(self):
        d = Dependency(Artifact.of("g", "a", "1"))
        assert d.is_transitive
        assert not d.is_direct
        assert d.scope == "compile"

    def test_direct(self):
        d = Dependency.direct(Artifact.of("g", "a", "1"), flags=DependencyFlags.RUNTIME_CP)
        assert d.is_direct
        assert d.is_flag_set(DependencyFlags.RUNTIME_CP)
        assert d.is_flag_set(DependencyFlags.DIRECT | DependencyFlags.RUNTIME_CP)

    def test_with_flags_copies(self):
        d = Dependency(Artifact.of("g", "a", "1"))
        d2 = d.with_flags(DependencyFlags.DEPLOYMENT_CP)
        assert d2.is_flag_set(DependencyFlags.DEPLOYMENT_CP)
        assert not d.is_flag_set(DependencyFlags.DEPLOYMENT_CP)

    def test_key(self):
        d = Dependency(Artifact.of("g", "a", "1"))
        assert d.key == ArtifactKey("g", "a")

    def test_dict_round_trip(self):
        d = Dependency.direct(
            Artifact.of("g", "a", "1"),
            scope="runtime",
            optional=True,
            flags=DependencyFlags.WORKSPACE_MODULE,
        )
        assert Dependency.from_dict(d.to_dict()) == d
