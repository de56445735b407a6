"""Exporters for rewritten workspaces and build plans."""

from depswap.export.json import (
    build_plan_data,
    export_workspace,
    module_graph_data,
    workspace_data,
    write_json,
)

__all__ = [
    "build_plan_data",
    "export_workspace",
    "module_graph_data",
    "workspace_data",
    "write_json",
]
