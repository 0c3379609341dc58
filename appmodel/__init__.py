"""
appmodel — dependency model assembler for two-context class loading.

Describes, classifies and hands off the artifacts needed by:

- **augmentation** — the build-time class loader (full deployment view)
- **runtime** — the packaged application's class loader

Pieces:

- **Identity** — ``ArtifactKey`` (no version) and ``Artifact`` (versioned)
- **Capture** — ``ApplicationModelBuilder`` records resolver output in order
- **Classification** — parent-first, runner parent-first, lesser-priority,
  local-project and excluded keys, merged from extension descriptors
- **Model** — the frozen ``ApplicationModel`` with a stable encoding

Quick start::

    from appmodel import ApplicationModelBuilder, Artifact, Dependency

    builder = ApplicationModelBuilder().set_app_artifact(
        Artifact.of("org.acme", "app", "1.0")
    )
    builder.add_runtime_dep(Dependency.direct(Artifact.of("org.acme", "lib", "2.0")))
    builder.merge_extension_descriptor(
        {"parent-first-artifacts": "org.jboss.logging:jboss-logging"}, "quarkus-core"
    )
    model = builder.build()
    payload = model.to_json()
"""

__version__ = "1.0.0"

from .faults import (
    Fault,
    FaultDomain,
    Severity,
    MalformedArtifactDescriptor,
    InvalidArgumentFault,
    IncompleteModelFault,
    ModelDecodeFault,
    ConfigInvalidFault,
)
from .keys import ArtifactKey, Artifact, KeyParseResult, parse_artifact_key
from .dependency import Dependency, DependencyFlags
from .diagnostics import Diagnostic, DiagnosticReport
from .descriptor import (
    PARENT_FIRST_ARTIFACTS,
    RUNNER_PARENT_FIRST_ARTIFACTS,
    EXCLUDED_ARTIFACTS,
    LESSER_PRIORITY_ARTIFACTS,
    CLASSIFICATION_KEYS,
    ExtensionDescriptor,
    DescriptorContribution,
    parse_properties,
    read_contribution,
    split_key_list,
)
from .config import ModelSettings, SettingsLoader
from .model import ApplicationModel, LoaderPlacement, ModelIntegrity
from .builder import (
    ApplicationModelBuilder,
    LAUNCHER_GROUP,
    LAUNCHER_NAME,
    is_bootstrap_launcher,
)
from .resolver import DependencyResolver, MemoryResolver, populate_builder
from .store import ModelStore, MemoryModelStore, FilesystemModelStore

__all__ = [
    # Faults
    "Fault",
    "FaultDomain",
    "Severity",
    "MalformedArtifactDescriptor",
    "InvalidArgumentFault",
    "IncompleteModelFault",
    "ModelDecodeFault",
    "ConfigInvalidFault",
    # Identity
    "ArtifactKey",
    "Artifact",
    "KeyParseResult",
    "parse_artifact_key",
    "Dependency",
    "DependencyFlags",
    # Diagnostics
    "Diagnostic",
    "DiagnosticReport",
    # Descriptors
    "PARENT_FIRST_ARTIFACTS",
    "RUNNER_PARENT_FIRST_ARTIFACTS",
    "EXCLUDED_ARTIFACTS",
    "LESSER_PRIORITY_ARTIFACTS",
    "CLASSIFICATION_KEYS",
    "ExtensionDescriptor",
    "DescriptorContribution",
    "parse_properties",
    "read_contribution",
    "split_key_list",
    # Config
    "ModelSettings",
    "SettingsLoader",
    # Model
    "ApplicationModel",
    "LoaderPlacement",
    "ModelIntegrity",
    "ApplicationModelBuilder",
    "LAUNCHER_GROUP",
    "LAUNCHER_NAME",
    "is_bootstrap_launcher",
    # Resolver
    "DependencyResolver",
    "MemoryResolver",
    "populate_builder",
    # Store
    "ModelStore",
    "MemoryModelStore",
    "FilesystemModelStore",
]
