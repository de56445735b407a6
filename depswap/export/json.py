"""JSON export for rewritten workspaces."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

import networkx as nx

from depswap.graph.models import ArtifactDependency, Configuration, Dependency
from depswap.graph.workspace import ProjectGraph
from depswap.registry import ModuleRecord, ModuleRegistry
from depswap.runtime.scheduler import BuildPlan

logger = logging.getLogger("depswap.export.json")


def _dependency_data(dependency: Dependency) -> Dict[str, Any]:
    if isinstance(dependency, ArtifactDependency):
        data: Dict[str, Any] = {"artifact": dependency.notation}
        if dependency.exclude_rules:
            data["exclude"] = [
                {"group": rule.group, "module": rule.module}
                for rule in dependency.exclude_rules
            ]
        return data
    return {"project": dependency.project.path}


def _configuration_data(configuration: Configuration) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "dependencies": [_dependency_data(dep) for dep in configuration],
    }
    if configuration.exclude_rules:
        data["exclude"] = [
            {"group": rule.group, "module": rule.module}
            for rule in configuration.exclude_rules
        ]
    return data


def _module_data(record: ModuleRecord) -> Dict[str, Any]:
    return {
        "name": record.name,
        "artifact": record.artifact.to_dependency().notation,
        "enabled": record.enabled,
        "cache_valid": record.cache_valid,
        "flavor": record.flavor_name,
        "referenced": record.referenced,
        "dependency_modules": [dep.name for dep in record.dependency_modules],
    }


def workspace_data(graph: ProjectGraph, registry: ModuleRegistry) -> Dict[str, Any]:
    """Serializable view of the (rewritten) workspace."""
    return {
        "root": graph.root.path,
        "projects": [
            {
                "path": project.path,
                "configurations": {
                    name: _configuration_data(configuration)
                    for name, configuration in project.configurations.items()
                },
            }
            for project in graph
        ],
        "modules": [_module_data(record) for record in registry],
    }


def module_graph_data(graph: ProjectGraph) -> Dict[str, Any]:
    """Node-link data of the remaining project-to-project edges."""
    return nx.readwrite.json_graph.node_link_data(graph.to_networkx(), edges="edges")


def build_plan_data(plan: BuildPlan) -> Dict[str, Any]:
    modules: List[Dict[str, Any]] = [
        {
            "name": record.name,
            "artifact": record.artifact.to_dependency().notation,
            "flavor": record.flavor_name,
        }
        for record in plan.modules
    ]
    requests = [
        {
            "module": request.module,
            "requested_by": request.requested_by,
            "configuration": request.configuration,
        }
        for request in plan.requests
    ]
    return {"modules": modules, "requests": requests}


def write_json(data: Dict[str, Any], output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def export_workspace(
    graph: ProjectGraph, registry: ModuleRegistry, output_path: Path
) -> None:
    """Export the workspace to JSON.

    Args:
        graph: Project graph, usually after a rewrite pass.
        registry: Module registry with the pass's bookkeeping.
        output_path: Output file path.
    """
    logger.info("Exporting workspace to JSON: %s", output_path)
    write_json(workspace_data(graph, registry), output_path)
    logger.info("JSON export completed: %d projects, %d modules", len(graph), len(registry))


__all__ = [
    "build_plan_data",
    "export_workspace",
    "module_graph_data",
    "workspace_data",
    "write_json",
]
