"""Helpers for loading a workspace manifest from TOML/JSON sources.

This module provides a single entry point `load_workspace` that accepts
various manifest sources:

* dict -> validated as-is
* Path / path-like string -> load .toml/.json from filesystem
* Inline JSON/TOML strings

and returns the project graph, module registry and rewrite settings the
manifest describes.
"""

from __future__ import annotations

import json
import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from depswap.config.schema import (
    ConfigurationModel,
    DependencyModel,
    ManifestModel,
    ModuleModel,
)
from depswap.errors import ManifestError, RegistryError
from depswap.graph.identifiers import ProjectId
from depswap.graph.models import (
    ArtifactDependency,
    Configuration,
    Dependency,
    ExcludeRule,
    Project,
    ProjectDependency,
)
from depswap.graph.workspace import ProjectGraph
from depswap.registry import ArtifactDescriptor, ModuleRecord, ModuleRegistry
from depswap.rewrite.settings import RewriteSettings

logger = logging.getLogger("depswap.config.loader")

ManifestSource = Union[str, Path, Dict[str, Any]]


@dataclass
class Workspace:
    """Everything a rewrite pass needs, built from one manifest."""

    graph: ProjectGraph
    registry: ModuleRegistry
    settings: RewriteSettings


def _read_source(source: ManifestSource) -> Dict[str, Any]:
    if isinstance(source, dict):
        logger.debug("Loading manifest from provided dict")
        return source

    if not isinstance(source, (str, Path)):
        raise TypeError(f"Unsupported manifest source type: {type(source)!r}")

    text: Optional[str] = None
    fmt: Optional[str] = None
    path = Path(source)

    # Inline TOML/JSON routinely contains newlines; only short strings are paths.
    looks_like_path = isinstance(source, Path) or "\n" not in str(source)
    try:
        is_file = looks_like_path and path.is_file()
    except OSError:
        is_file = False

    if is_file:
        text = path.read_text(encoding="utf-8")
        suffix = path.suffix.lower()
        if suffix in {".toml", ".tml"}:
            fmt = "toml"
        elif suffix == ".json":
            fmt = "json"
        else:
            fmt = "json" if text.lstrip().startswith(("{", "[")) else "toml"
        logger.info("Loading manifest from file: %s (fmt=%s)", path, fmt)
    elif isinstance(source, Path):
        raise ManifestError(f"Manifest file not found: {source}")
    else:
        text = str(source)
        fmt = "json" if text.lstrip().startswith(("{", "[")) else "toml"
        logger.info("Loading manifest from inline %s string", fmt)

    try:
        data = json.loads(text) if fmt == "json" else tomllib.loads(text)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as exc:
        raise ManifestError(f"Cannot parse {fmt} manifest: {exc}") from exc

    if not isinstance(data, dict):
        raise ManifestError("Top-level manifest must be a mapping/dict")
    return data


def load_manifest(source: ManifestSource) -> ManifestModel:
    """Parse and validate a manifest.

    Raises:
        ManifestError: If the source cannot be parsed or fails validation.
    """
    data = _read_source(source)
    try:
        return ManifestModel.model_validate(data)
    except ValidationError as exc:
        raise ManifestError(f"Invalid manifest:\n{exc}") from exc


def _build_dependency(model: DependencyModel) -> Dependency:
    if model.project:
        return ProjectDependency.on(model.project)

    try:
        dependency = ArtifactDependency.parse(model.artifact or "")
    except ValueError as exc:
        raise ManifestError(str(exc)) from exc
    for rule in model.exclude:
        dependency.exclude(rule.group, rule.module)
    return dependency


def _build_configuration(name: str, model: ConfigurationModel) -> Configuration:
    return Configuration(
        name,
        dependencies=[_build_dependency(dep) for dep in model.dependencies],
        exclude_rules=[ExcludeRule(rule.group, rule.module or None) for rule in model.exclude],
    )


def _build_record(model: ModuleModel) -> ModuleRecord:
    project_id = ProjectId.of(model.name)
    return ModuleRecord(
        project_id=project_id,
        artifact=ArtifactDescriptor(
            group=model.group,
            name=model.artifact or project_id.name,
            version=model.version,
            extension=model.extension,
        ),
        enabled=model.enabled,
        cache_valid=model.cache_valid,
        flavor_name=model.flavor,
    )


def build_workspace(manifest: ManifestModel) -> Workspace:
    """Turn a validated manifest into graph, registry and settings.

    Raises:
        ManifestError: On duplicate projects or dependencies on unknown projects.
        RegistryError: On duplicate modules or modules without a project.
    """
    graph = ProjectGraph()
    for project_model in manifest.projects:
        if project_model.path in graph:
            raise ManifestError(f"Duplicate project: {project_model.path}")
        project = graph.add_project(Project(project_model.path))
        for name, configuration_model in project_model.configurations.items():
            project.add_configuration(_build_configuration(name, configuration_model))

    for project in graph:
        for configuration, dependency in project.project_dependencies():
            if dependency.project.path not in graph:
                raise ManifestError(
                    f"{project.path}:{configuration.name} depends on unknown "
                    f"project {dependency.project.path}"
                )

    if manifest.root is not None:
        if manifest.root not in graph:
            raise ManifestError(f"Root project not declared: {manifest.root}")
        graph.set_root(manifest.root)

    registry = ModuleRegistry()
    for module_model in manifest.modules:
        if module_model.name not in graph:
            raise RegistryError(f"Module {module_model.name} has no matching project")
        registry.register(_build_record(module_model))

    logger.info(
        "Workspace loaded: %d project(s), %d module(s), root %s",
        len(graph),
        len(registry),
        graph.root.path,
    )
    return Workspace(graph=graph, registry=registry, settings=manifest.settings.to_settings())


def load_workspace(source: ManifestSource) -> Workspace:
    """Load a manifest source and build its workspace."""
    return build_workspace(load_manifest(source))


__all__ = [
    "ManifestSource",
    "Workspace",
    "build_workspace",
    "load_manifest",
    "load_workspace",
]
