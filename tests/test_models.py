"""Tests for the dependency declaration model and project identifiers."""

from __future__ import annotations

import pytest

from depswap.errors import RegistryError, UnknownConfigurationError, UnknownProjectError
from depswap.graph import (
    ArtifactDependency,
    Configuration,
    ExcludeRule,
    Project,
    ProjectDependency,
    ProjectGraph,
    ProjectId,
    normalize_project_path,
)
from depswap.registry import ArtifactDescriptor, ModuleRecord, ModuleRegistry


def test_project_paths_are_normalized_and_interned() -> None:
    """Equivalent spellings of a path resolve to one identifier object."""
    assert normalize_project_path("app") == ":app"
    assert normalize_project_path(":lib:core:") == ":lib:core"
    assert normalize_project_path("") == ":"
    assert ProjectId.of("feature:login") is ProjectId.of(":feature:login")
    assert ProjectId.of(":feature:login").name == "login"


def test_artifact_notation_parsing() -> None:
    """Artifact notation carries group, name, optional version and extension."""
    dep = ArtifactDependency.parse("com.example:lib:1.2@aar")
    assert (dep.group, dep.name, dep.version, dep.extension) == (
        "com.example",
        "lib",
        "1.2",
        "aar",
    )
    assert dep.notation == "com.example:lib:1.2@aar"
    assert ArtifactDependency.parse("g:n").version is None

    with pytest.raises(ValueError):
        ArtifactDependency.parse("no-colon")


def test_artifact_equality_ignores_exclude_rules() -> None:
    """Two declarations of the same coordinates are equal regardless of excludes."""
    first = ArtifactDependency.parse("g:x:1.0")
    second = ArtifactDependency.parse("g:x:1.0")
    second.exclude("org.unwanted")

    assert first == second
    assert hash(first) == hash(second)
    assert first != ArtifactDependency.parse("g:x:2.0")


def test_artifact_exclude_is_set_like() -> None:
    """Attaching an identical rule twice keeps a single entry."""
    dep = ArtifactDependency.parse("g:x:1.0")
    assert dep.exclude("org.a", "m") is True
    assert dep.exclude("org.a", "m") is False
    assert dep.exclude("org.a") is True
    assert dep.exclude_rules == [ExcludeRule("org.a", "m"), ExcludeRule("org.a")]


def test_configuration_is_an_ordered_set() -> None:
    """Adding an equal dependency twice does not duplicate it."""
    configuration = Configuration("implementation")
    lib = ProjectDependency.on(":lib")

    assert configuration.add(lib) is True
    assert configuration.add(ProjectDependency.on("lib")) is False
    assert configuration.add(ArtifactDependency.parse("g:x:1")) is True
    assert len(configuration) == 2
    assert configuration.dependencies[0] == lib

    snapshot = configuration.snapshot()
    configuration.remove(lib)
    assert lib in snapshot
    assert lib not in configuration


def test_project_configuration_lookup() -> None:
    """Strict lookup raises while the lenient variant returns None."""
    project = Project(":app")
    api = project.add_configuration("api")

    assert project.add_configuration(Configuration("api")) is api
    assert project.has_configuration("api")
    assert not project.has_configuration("debugApi")
    assert project.find_configuration("debugApi") is None
    with pytest.raises(UnknownConfigurationError):
        project.configuration("debugApi")


def test_project_graph_resolves_source_references() -> None:
    """Project dependencies resolve to the registered project instance."""
    graph = ProjectGraph()
    app = graph.add_project(":app")
    lib = graph.add_project(Project(":lib"))

    assert graph.root is app
    assert graph.resolve(ProjectDependency.on(":lib")) is lib
    assert ":lib" in graph
    with pytest.raises(UnknownProjectError):
        graph.resolve(ProjectDependency.on(":missing"))


def test_module_registry_lookups_and_naming() -> None:
    """Records are found by path or project and named after their flavor."""
    project = Project(":feature:login")
    record = ModuleRecord(
        project_id=project.id,
        artifact=ArtifactDescriptor(group="com.example", name="login", version="1.2"),
        flavor_name="tiya",
    )
    registry = ModuleRegistry([record])

    assert registry.lookup_by_path("feature:login") is record
    assert registry.lookup_by_project(project) is record
    assert registry.lookup_by_path(":other") is None
    assert ":feature:login" in registry
    assert record.obtain_name() == "login-tiya"
    assert record.obtain_artifact_dependency().notation == "com.example:login:1.2@aar"

    with pytest.raises(RegistryError):
        registry.register(
            ModuleRecord(project_id=project.id, artifact=ArtifactDescriptor("g", "login"))
        )


def test_enabled_records_skip_disabled_modules() -> None:
    """Only enabled modules are offered for substitution."""
    on = ModuleRecord(project_id=ProjectId.of(":on"), artifact=ArtifactDescriptor("g", "on"))
    off = ModuleRecord(
        project_id=ProjectId.of(":off"), artifact=ArtifactDescriptor("g", "off"), enabled=False
    )
    registry = ModuleRegistry([on, off])

    assert registry.enabled_records() == [on]
    assert len(registry) == 2
