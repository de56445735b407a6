"""Exception hierarchy for depswap.

Expected absences (unregistered project, disabled module, cache miss,
missing variant configuration) are ordinary control flow and never raise.
The classes below cover the conditions a caller actually has to handle.
"""

from __future__ import annotations

from typing import List, Sequence


class DepswapError(Exception):
    """Base class for all depswap errors."""
    pass


class ManifestError(DepswapError):
    """Workspace manifest is malformed or references unknown entities.

    Raised while loading a TOML/JSON manifest, before any traversal runs.
    """
    pass


class RegistryError(DepswapError):
    """Module registry is inconsistent (e.g. two records for one project)."""
    pass


class UnknownProjectError(DepswapError):
    """A project dependency points at a project the workspace does not own."""

    def __init__(self, project_path: str) -> None:
        super().__init__(f"Unknown project: {project_path}")
        self.project_path = project_path


class UnknownConfigurationError(DepswapError):
    """Strict lookup of a configuration name the project does not declare."""

    def __init__(self, project_path: str, name: str) -> None:
        super().__init__(f"Project {project_path} has no configuration '{name}'")
        self.project_path = project_path
        self.name = name


class DependencyCycleError(DepswapError):
    """Source dependencies form a true cycle between projects.

    Attributes:
        cycle: Project paths along the cycle, closed (first == last).
    """

    def __init__(self, cycle: Sequence[str]) -> None:
        self.cycle: List[str] = list(cycle)
        super().__init__("Dependency cycle detected: " + " -> ".join(self.cycle))
