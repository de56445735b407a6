"""Recursive dependency rewrite.

Starting from the workspace root, every project reachable through project
dependencies is visited depth-first. For each source reference to an
enabled module the edge is either swapped for the module's cached
artifact (cache hit) or left alone and turned into a build request (cache
miss). When a cache-hit module's subtree is done, its own dependencies are
propagated into the parent for every variant prefix.

Projects already finished earlier in the pass are visited again when
reached from another parent so every parent receives propagation. A
project that is re-entered while still on the current recursion path is
a true cycle.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from depswap.errors import DependencyCycleError
from depswap.graph.models import Configuration, Dependency, Project, ProjectDependency
from depswap.graph.workspace import ProjectGraph
from depswap.registry import ModuleRecord, ModuleRegistry
from depswap.rewrite.propagation import propagate, variant_prefixes
from depswap.rewrite.settings import RewriteSettings
from depswap.runtime.eventbus import EventBus, EventType
from depswap.runtime.scheduler import BuildPlan, BuildRequest, BuildScheduler

logger = logging.getLogger("depswap.rewrite.traversal")


@dataclass(frozen=True)
class Substitution:
    """A source reference replaced by an artifact."""

    project: str
    configuration: str
    module: str
    artifact: str


@dataclass
class RewriteResult:
    """Outcome of one rewrite pass.

    Attributes:
        plan: Modules whose artifact must be rebuilt.
        substitutions: Edges swapped for artifacts, in traversal order.
        propagated: Number of dependencies copied into parent projects.
        visited: Project paths in visit order; re-visits are repeated.
        cycles: Cycles skipped when ``fail_on_cycle`` is disabled.
    """

    plan: BuildPlan = field(default_factory=BuildPlan)
    substitutions: List[Substitution] = field(default_factory=list)
    propagated: int = 0
    visited: List[str] = field(default_factory=list)
    cycles: List[List[str]] = field(default_factory=list)


class DependencyRewriter:
    """Rewrites a workspace graph against a module registry.

    At most one pass runs at a time on a given graph; the rewriter keeps
    its per-pass state on the instance.
    """

    def __init__(
        self,
        graph: ProjectGraph,
        registry: ModuleRegistry,
        settings: Optional[RewriteSettings] = None,
        eventbus: Optional[EventBus] = None,
    ) -> None:
        self.graph = graph
        self.registry = registry
        self.settings = settings or RewriteSettings()
        self.eventbus = eventbus or EventBus()
        self._path: List[Project] = []
        self._result = RewriteResult()

    def run(self, scheduler: Optional[BuildScheduler] = None) -> RewriteResult:
        """Rewrite from the workspace root, then dispatch the build plan.

        Args:
            scheduler: Receives every cache-miss module once, after the
                traversal has completed. When omitted the plan is only
                returned.

        Returns:
            RewriteResult: Outcome of the pass.
        """
        result = self.rewrite(self.graph.root)
        if scheduler is not None:
            result.plan.dispatch(scheduler)
        self.eventbus.emit(
            EventType.REWRITE_COMPLETED,
            self.graph.root.path,
            substitutions=len(result.substitutions),
            builds=len(result.plan),
            propagated=result.propagated,
        )
        return result

    def rewrite(self, project: Project, parent: Optional[Project] = None) -> RewriteResult:
        """Run one pass starting at ``project``.

        Raises:
            DependencyCycleError: If project dependencies form a cycle and
                ``fail_on_cycle`` is enabled.
        """
        self._path = []
        self._result = RewriteResult()
        logger.info("Rewriting dependencies from %s", project.path)
        self._visit(project, parent)
        logger.info(
            "Rewrite finished: %d substitution(s), %d build request(s), "
            "%d propagated dependencies",
            len(self._result.substitutions),
            len(self._result.plan),
            self._result.propagated,
        )
        return self._result

    def _visit(self, project: Project, parent: Optional[Project]) -> None:
        if any(entry is project for entry in self._path):
            self._on_cycle(project)
            return

        self._result.visited.append(project.path)
        self.eventbus.emit(
            EventType.PROJECT_VISITED,
            project.path,
            parent=parent.path if parent is not None else None,
        )
        module_record = self.registry.lookup_by_project(project)

        self._path.append(project)
        try:
            for configuration in list(project.configurations.values()):
                for dependency in configuration.snapshot():
                    self.handle_edge(configuration, dependency, project)
        finally:
            self._path.pop()

        if parent is not None and module_record is not None and module_record.cache_valid:
            self._propagate_variants(project, parent, module_record)

    def _on_cycle(self, project: Project) -> None:
        start = next(i for i, entry in enumerate(self._path) if entry is project)
        cycle = [entry.path for entry in self._path[start:]] + [project.path]

        self.eventbus.emit(EventType.CYCLE_DETECTED, project.path, cycle=cycle)
        if self.settings.fail_on_cycle:
            raise DependencyCycleError(cycle)

        logger.warning("Skipping dependency cycle: %s", " -> ".join(cycle))
        self._result.cycles.append(cycle)

    def handle_edge(
        self,
        configuration: Configuration,
        dependency: Dependency,
        current_project: Project,
    ) -> None:
        """Substitute or schedule one dependency edge, then recurse into its target."""
        if not isinstance(dependency, ProjectDependency):
            return

        dependency_project = self.graph.resolve(dependency)
        if dependency_project is current_project:
            logger.debug("Ignoring self reference in %s:%s", current_project.path, configuration.name)
            return

        dependency_record = self.registry.lookup_by_project(dependency_project)

        if dependency_record is not None and dependency_record.enabled:
            dependency_record.referenced = True
            logger.info("Handle dependency: %s:%s", current_project.name, dependency.name)

            if dependency_record.cache_valid:
                self._substitute(configuration, dependency, current_project, dependency_record)
            else:
                logger.info(
                    "%s depends on %s: cache miss",
                    current_project.name,
                    dependency_record.obtain_name(),
                )
                request = BuildRequest(
                    record=dependency_record,
                    requested_by=current_project.path,
                    configuration=configuration.name,
                )
                self._result.plan.add(request)
                self.eventbus.emit(
                    EventType.BUILD_REQUESTED,
                    current_project.path,
                    module=dependency_record.name,
                    configuration=configuration.name,
                )

        current_record = self.registry.lookup_by_project(current_project)
        if dependency_record is not None and current_record is not None:
            current_record.dependency_modules.append(dependency_record)

        self._visit(dependency_project, current_project)

    def _substitute(
        self,
        configuration: Configuration,
        dependency: ProjectDependency,
        current_project: Project,
        record: ModuleRecord,
    ) -> None:
        artifact = record.obtain_artifact_dependency()
        logger.info(
            "%s depends on %s: cache hit (%s)",
            current_project.name,
            record.obtain_name(),
            configuration.name,
        )
        configuration.remove(dependency)
        configuration.add(artifact)

        self._result.substitutions.append(
            Substitution(
                project=current_project.path,
                configuration=configuration.name,
                module=record.name,
                artifact=artifact.notation,
            )
        )
        self.eventbus.emit(
            EventType.DEPENDENCY_SUBSTITUTED,
            current_project.path,
            configuration=configuration.name,
            module=record.name,
            artifact=artifact.notation,
        )

    def _propagate_variants(
        self, project: Project, parent: Project, record: ModuleRecord
    ) -> None:
        total = 0
        for prefix in variant_prefixes(record.flavor_name):
            total += propagate(
                project,
                parent,
                prefix,
                mode=self.settings.exclusion_mode,
                base_names=self.settings.propagated_configurations,
            )

        self._result.propagated += total
        if total:
            logger.debug("Propagated %d dependencies from %s to %s", total, project.path, parent.path)
            self.eventbus.emit(
                EventType.DEPENDENCIES_PROPAGATED,
                project.path,
                parent=parent.path,
                count=total,
            )


__all__ = ["DependencyRewriter", "RewriteResult", "Substitution"]
