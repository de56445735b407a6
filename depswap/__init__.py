"""depswap - artifact substitution and transitive dependency repair for modular builds."""

from depswap.config.loader import Workspace, load_workspace
from depswap.errors import (
    DependencyCycleError,
    DepswapError,
    ManifestError,
    RegistryError,
    UnknownConfigurationError,
    UnknownProjectError,
)
from depswap.graph import (
    ArtifactDependency,
    Configuration,
    ExcludeRule,
    Project,
    ProjectDependency,
    ProjectGraph,
    ProjectId,
)
from depswap.registry import ArtifactDescriptor, ModuleRecord, ModuleRegistry
from depswap.rewrite import (
    DependencyRewriter,
    ExclusionMode,
    RewriteResult,
    RewriteSettings,
    is_excluded,
    propagate,
)
from depswap.runtime import BuildPlan, BuildScheduler, CollectingScheduler, EventBus

__version__ = "0.1.0"

__all__ = [
    "ArtifactDependency",
    "ArtifactDescriptor",
    "BuildPlan",
    "BuildScheduler",
    "CollectingScheduler",
    "Configuration",
    "DependencyCycleError",
    "DependencyRewriter",
    "DepswapError",
    "EventBus",
    "ExcludeRule",
    "ExclusionMode",
    "ManifestError",
    "ModuleRecord",
    "ModuleRegistry",
    "Project",
    "ProjectDependency",
    "ProjectGraph",
    "ProjectId",
    "RegistryError",
    "RewriteResult",
    "RewriteSettings",
    "UnknownConfigurationError",
    "UnknownProjectError",
    "Workspace",
    "is_excluded",
    "load_workspace",
    "propagate",
]
