"""Workspace project graph.

``ProjectGraph`` owns every project of one workspace, keyed by interned
``ProjectId``. Project dependencies refer to their target by id and are
resolved through the graph, so there is exactly one place that knows
which projects exist.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional

import networkx as nx

from depswap.errors import UnknownProjectError
from depswap.graph.identifiers import PathLike, ProjectId
from depswap.graph.models import Project, ProjectDependency

logger = logging.getLogger("depswap.graph.workspace")


class ProjectGraph:
    """Arena of workspace projects with a designated root (apply) project."""

    def __init__(self, root: Optional[PathLike] = None) -> None:
        self._projects: Dict[ProjectId, Project] = {}
        self._root_id: Optional[ProjectId] = ProjectId.of(root) if root is not None else None

    def add_project(self, project: Project | PathLike) -> Project:
        """Add a project, returning the registered instance for its id."""
        if not isinstance(project, Project):
            project = Project(project)
        existing = self._projects.get(project.id)
        if existing is not None:
            return existing
        self._projects[project.id] = project
        if self._root_id is None:
            self._root_id = project.id
        return project

    @property
    def root(self) -> Project:
        """The project a rewrite pass starts from.

        Raises:
            UnknownProjectError: If the graph is empty or the root is not registered.
        """
        if self._root_id is None:
            raise UnknownProjectError("<root>")
        return self.get(self._root_id)

    def set_root(self, path: PathLike) -> None:
        self._root_id = self.get(path).id

    def get(self, path: PathLike) -> Project:
        project = self.find(path)
        if project is None:
            raise UnknownProjectError(str(path))
        return project

    def find(self, path: PathLike) -> Optional[Project]:
        return self._projects.get(ProjectId.of(path))

    def resolve(self, dependency: ProjectDependency) -> Project:
        """Return the project a source reference points at."""
        return self.get(dependency.project)

    def __contains__(self, path: object) -> bool:
        if isinstance(path, Project):
            return self._projects.get(path.id) is path
        if isinstance(path, (str, ProjectId)):
            return ProjectId.of(path) in self._projects
        return False

    def __iter__(self) -> Iterator[Project]:
        return iter(list(self._projects.values()))

    def __len__(self) -> int:
        return len(self._projects)

    def to_networkx(self) -> nx.DiGraph:
        """Project the source-reference edges onto a NetworkX DiGraph.

        Nodes are project paths; each edge carries the sorted list of
        configurations that declare it under ``configurations``.
        """
        graph = nx.DiGraph()
        for project in self._projects.values():
            graph.add_node(project.path, type="project")

        for project in self._projects.values():
            for configuration, dependency in project.project_dependencies():
                target = dependency.project.path
                if not graph.has_node(target):
                    graph.add_node(target, type="project", provisional=True)
                if graph.has_edge(project.path, target):
                    names = graph.edges[project.path, target]["configurations"]
                    if configuration.name not in names:
                        names.append(configuration.name)
                        names.sort()
                else:
                    graph.add_edge(
                        project.path, target, configurations=[configuration.name]
                    )
        return graph

    def find_cycles(self, limit: Optional[int] = None) -> List[List[str]]:
        """Enumerate source-dependency cycles between distinct projects.

        Self references are not reported; the rewrite skips them.
        """
        cycles: List[List[str]] = []
        max_cycles = limit if limit and limit > 0 else None

        for cycle in nx.simple_cycles(self.to_networkx()):
            if len(cycle) < 2:
                continue
            cycles.append([str(node) for node in cycle])
            if max_cycles and len(cycles) >= max_cycles:
                break

        logger.debug("Found %d source-dependency cycle(s)", len(cycles))
        return cycles


__all__ = ["ProjectGraph"]
