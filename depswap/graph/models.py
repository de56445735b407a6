"""Dependency declaration model.

Projects own named configurations (``api``, ``implementation``,
``debugApi`` ...). A configuration is an ordered set of dependency
declarations plus configuration-wide exclude rules. A declaration is
either a source reference to another project (:class:`ProjectDependency`)
or a binary artifact addressed by coordinates (:class:`ArtifactDependency`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple, Union

from depswap.errors import UnknownConfigurationError
from depswap.graph.identifiers import PathLike, ProjectId


@dataclass(frozen=True)
class ExcludeRule:
    """Group/module filter for transitive dependencies.

    Attributes:
        group: Artifact group to exclude.
        module: Artifact name; ``None`` or empty matches any module in the group.
    """

    group: str
    module: Optional[str] = None

    @property
    def any_module(self) -> bool:
        return not self.module

    def matches(self, group: Optional[str], name: Optional[str]) -> bool:
        """Return True when the given coordinates fall under this rule."""
        if self.any_module:
            return group == self.group
        return group == self.group and name == self.module


@dataclass(frozen=True)
class ProjectDependency:
    """Source reference to another project in the same workspace."""

    project: ProjectId

    @classmethod
    def on(cls, path: PathLike) -> "ProjectDependency":
        return cls(ProjectId.of(path))

    @property
    def name(self) -> str:
        return self.project.name

    @property
    def notation(self) -> str:
        return f"project({self.project.path})"

    def __str__(self) -> str:
        return self.notation


@dataclass(eq=False)
class ArtifactDependency:
    """Binary artifact addressed by group/name/version coordinates.

    Equality and hashing use the coordinates only; per-edge exclude rules
    are mutable and do not take part in identity.
    """

    group: Optional[str]
    name: str
    version: Optional[str] = None
    extension: Optional[str] = None
    exclude_rules: List[ExcludeRule] = field(default_factory=list)

    @classmethod
    def parse(cls, notation: str) -> "ArtifactDependency":
        """Build a dependency from ``group:name[:version][@ext]`` notation.

        Raises:
            ValueError: If the notation does not carry at least group and name.
        """
        text = notation.strip()
        extension: Optional[str] = None
        if "@" in text:
            text, extension = text.rsplit("@", 1)
            extension = extension or None

        parts = text.split(":")
        if len(parts) < 2 or len(parts) > 3 or not all(parts[:2]):
            raise ValueError(f"Invalid artifact notation: {notation!r}")

        version = parts[2] if len(parts) == 3 and parts[2] else None
        return cls(group=parts[0], name=parts[1], version=version, extension=extension)

    @property
    def coordinates(self) -> Tuple[Optional[str], str, Optional[str], Optional[str]]:
        return (self.group, self.name, self.version, self.extension)

    @property
    def notation(self) -> str:
        text = f"{self.group or ''}:{self.name}"
        if self.version:
            text += f":{self.version}"
        if self.extension:
            text += f"@{self.extension}"
        return text

    def exclude(self, group: str, module: Optional[str] = None) -> bool:
        """Attach an exclude rule to this edge.

        Returns:
            bool: False when an equal rule was already attached.
        """
        rule = ExcludeRule(group=group, module=module or None)
        if rule in self.exclude_rules:
            return False
        self.exclude_rules.append(rule)
        return True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ArtifactDependency):
            return NotImplemented
        return self.coordinates == other.coordinates

    def __hash__(self) -> int:
        return hash(self.coordinates)

    def __str__(self) -> str:
        return self.notation


Dependency = Union[ProjectDependency, ArtifactDependency]


class Configuration:
    """Named, ordered set of dependency declarations plus exclude rules."""

    def __init__(
        self,
        name: str,
        dependencies: Optional[List[Dependency]] = None,
        exclude_rules: Optional[List[ExcludeRule]] = None,
    ) -> None:
        self.name = name
        self._dependencies: List[Dependency] = []
        self.exclude_rules: List[ExcludeRule] = list(exclude_rules or [])
        for dependency in dependencies or []:
            self.add(dependency)

    @property
    def dependencies(self) -> Tuple[Dependency, ...]:
        return tuple(self._dependencies)

    def add(self, dependency: Dependency) -> bool:
        """Add a dependency; adding an equal one twice is a no-op."""
        if dependency in self._dependencies:
            return False
        self._dependencies.append(dependency)
        return True

    def remove(self, dependency: Dependency) -> bool:
        try:
            self._dependencies.remove(dependency)
        except ValueError:
            return False
        return True

    def snapshot(self) -> List[Dependency]:
        """Copy of the current dependencies, safe to iterate while mutating."""
        return list(self._dependencies)

    def exclude(self, group: str, module: Optional[str] = None) -> None:
        self.exclude_rules.append(ExcludeRule(group=group, module=module or None))

    def __contains__(self, dependency: object) -> bool:
        return dependency in self._dependencies

    def __iter__(self) -> Iterator[Dependency]:
        return iter(self._dependencies)

    def __len__(self) -> int:
        return len(self._dependencies)

    def __repr__(self) -> str:
        return f"Configuration({self.name!r}, {len(self._dependencies)} deps)"


class Project:
    """A node of the build graph with its ordered configurations."""

    def __init__(self, path: PathLike) -> None:
        self.id = ProjectId.of(path)
        self.configurations: Dict[str, Configuration] = {}

    @property
    def path(self) -> str:
        return self.id.path

    @property
    def name(self) -> str:
        return self.id.name

    def add_configuration(self, configuration: Union[str, Configuration]) -> Configuration:
        """Register a configuration, returning the existing one on name clash."""
        if isinstance(configuration, str):
            configuration = Configuration(configuration)
        existing = self.configurations.get(configuration.name)
        if existing is not None:
            return existing
        self.configurations[configuration.name] = configuration
        return configuration

    def has_configuration(self, name: str) -> bool:
        return name in self.configurations

    def find_configuration(self, name: str) -> Optional[Configuration]:
        return self.configurations.get(name)

    def configuration(self, name: str) -> Configuration:
        """Strict lookup.

        Raises:
            UnknownConfigurationError: If the project does not declare ``name``.
        """
        found = self.configurations.get(name)
        if found is None:
            raise UnknownConfigurationError(self.path, name)
        return found

    def project_dependencies(self) -> Iterator[Tuple[Configuration, ProjectDependency]]:
        """Yield ``(configuration, dependency)`` for every source reference."""
        for configuration in self.configurations.values():
            for dependency in configuration:
                if isinstance(dependency, ProjectDependency):
                    yield configuration, dependency

    def __repr__(self) -> str:
        return f"Project({self.path!r})"


__all__ = [
    "ExcludeRule",
    "ProjectDependency",
    "ArtifactDependency",
    "Dependency",
    "Configuration",
    "Project",
]
