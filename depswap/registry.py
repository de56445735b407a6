"""Module registry.

A ``ModuleRecord`` wraps a workspace project that takes part in artifact
substitution: whether it is enabled, whether its cached artifact is still
valid, its build variant (flavor) and the coordinates to substitute on a
cache hit. Records are created once before a rewrite pass; the pass only
updates ``referenced`` and ``dependency_modules``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional

from depswap.errors import RegistryError
from depswap.graph.identifiers import PathLike, ProjectId
from depswap.graph.models import ArtifactDependency, Project

logger = logging.getLogger("depswap.registry")

DEFAULT_ARTIFACT_EXTENSION = "aar"


@dataclass(frozen=True)
class ArtifactDescriptor:
    """Coordinates of the binary artifact that replaces a module."""

    group: Optional[str]
    name: str
    version: Optional[str] = None
    extension: Optional[str] = DEFAULT_ARTIFACT_EXTENSION

    def to_dependency(self) -> ArtifactDependency:
        return ArtifactDependency(
            group=self.group,
            name=self.name,
            version=self.version,
            extension=self.extension,
        )


@dataclass(eq=False)
class ModuleRecord:
    """Build-graph metadata for one substitutable module.

    Attributes:
        project_id: Path of the wrapped project.
        artifact: Coordinates substituted in on a cache hit.
        enabled: Disabled modules are traversed but never substituted.
        cache_valid: Externally computed; True means the artifact is up to date.
        flavor_name: Build-variant name, empty when the module has none.
        referenced: Set when any traversed project depends on this module.
        dependency_modules: Modules this one was observed to depend on, in
            traversal order. Duplicates are kept.
    """

    project_id: ProjectId
    artifact: ArtifactDescriptor
    enabled: bool = True
    cache_valid: bool = False
    flavor_name: str = ""
    referenced: bool = False
    dependency_modules: List["ModuleRecord"] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.project_id.path

    def obtain_name(self) -> str:
        """Display name of the module's artifact, flavor-qualified."""
        if self.flavor_name:
            return f"{self.artifact.name}-{self.flavor_name}"
        return self.artifact.name

    def obtain_artifact_dependency(self) -> ArtifactDependency:
        """Fresh artifact dependency replacing the module's source reference."""
        return self.artifact.to_dependency()

    def __repr__(self) -> str:
        return (
            f"ModuleRecord({self.name!r}, enabled={self.enabled}, "
            f"cache_valid={self.cache_valid})"
        )


class ModuleRegistry:
    """Read-only index from project identity to its ``ModuleRecord``."""

    def __init__(self, records: Iterable[ModuleRecord] = ()) -> None:
        self._records: Dict[ProjectId, ModuleRecord] = {}
        for record in records:
            self.register(record)

    def register(self, record: ModuleRecord) -> None:
        """Add a record.

        Raises:
            RegistryError: If the project already has a record.
        """
        if record.project_id in self._records:
            raise RegistryError(f"Module already registered: {record.name}")
        self._records[record.project_id] = record
        logger.debug("Registered module %s", record.name)

    def lookup_by_path(self, path: PathLike) -> Optional[ModuleRecord]:
        return self._records.get(ProjectId.of(path))

    def lookup_by_project(self, project: Project) -> Optional[ModuleRecord]:
        """Record wrapping ``project``; ``None`` for unregistered projects."""
        return self._records.get(project.id)

    def enabled_records(self) -> List[ModuleRecord]:
        return [record for record in self._records.values() if record.enabled]

    def __iter__(self) -> Iterator[ModuleRecord]:
        return iter(self._records.values())

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, path: object) -> bool:
        if isinstance(path, (str, ProjectId)):
            return ProjectId.of(path) in self._records
        return False


__all__ = [
    "ArtifactDescriptor",
    "DEFAULT_ARTIFACT_EXTENSION",
    "ModuleRecord",
    "ModuleRegistry",
]
