"""Workspace manifest schema and loading."""

from .loader import Workspace, build_workspace, load_manifest, load_workspace
from .schema import (
    ConfigurationModel,
    DependencyModel,
    ExcludeRuleModel,
    ManifestModel,
    ModuleModel,
    ProjectModel,
    SettingsModel,
)

__all__ = [
    "ConfigurationModel",
    "DependencyModel",
    "ExcludeRuleModel",
    "ManifestModel",
    "ModuleModel",
    "ProjectModel",
    "SettingsModel",
    "Workspace",
    "build_workspace",
    "load_manifest",
    "load_workspace",
]
