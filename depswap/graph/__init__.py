"""Public graph API surface."""

from depswap.graph.identifiers import ProjectId, normalize_project_path
from depswap.graph.models import (
    ArtifactDependency,
    Configuration,
    Dependency,
    ExcludeRule,
    Project,
    ProjectDependency,
)
from depswap.graph.workspace import ProjectGraph

__all__ = [
    "ArtifactDependency",
    "Configuration",
    "Dependency",
    "ExcludeRule",
    "Project",
    "ProjectDependency",
    "ProjectGraph",
    "ProjectId",
    "normalize_project_path",
]
