"""Rewrite command implementation."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from depswap.config.loader import load_workspace
from depswap.errors import DepswapError
from depswap.export.json import build_plan_data, export_workspace, write_json
from depswap.rewrite.exclusion import ExclusionMode
from depswap.rewrite.traversal import DependencyRewriter
from depswap.runtime.eventbus import Event, EventBus, EventType
from depswap.runtime.scheduler import CollectingScheduler

logger = logging.getLogger("depswap.cli.rewrite")


class RewriteSummary:
    """Collects the rewrite events shown in the command's summary."""

    def __init__(self, eventbus: EventBus) -> None:
        self.substitutions: List[Tuple[str, str, str, str]] = []
        self.builds: List[str] = []
        self.propagated = 0
        self.cycles: List[List[str]] = []
        eventbus.subscribe(
            self.on_event,
            EventType.DEPENDENCY_SUBSTITUTED,
            EventType.BUILD_REQUESTED,
            EventType.DEPENDENCIES_PROPAGATED,
            EventType.CYCLE_DETECTED,
        )

    def on_event(self, event: Event) -> None:
        data = event.data
        if event.event_type is EventType.DEPENDENCY_SUBSTITUTED:
            self.substitutions.append(
                (event.source, data["configuration"], data["module"], data["artifact"])
            )
        elif event.event_type is EventType.BUILD_REQUESTED:
            # the build plan holds each module once
            if data["module"] not in self.builds:
                self.builds.append(data["module"])
        elif event.event_type is EventType.DEPENDENCIES_PROPAGATED:
            self.propagated += data["count"]
        elif event.event_type is EventType.CYCLE_DETECTED:
            self.cycles.append(data["cycle"])

    def render(self, console: Console) -> None:
        table = Table(title="Substituted dependencies", show_lines=False)
        table.add_column("Project")
        table.add_column("Configuration")
        table.add_column("Module")
        table.add_column("Artifact")
        for row in self.substitutions:
            table.add_row(*row)
        console.print(table)

        stats = Text()
        stats.append(f"{len(self.substitutions)} cache hit(s)", style="green")
        stats.append("  ")
        stats.append(
            f"{len(self.builds)} module(s) to build: {', '.join(self.builds) or 'none'}",
            style="yellow",
        )
        stats.append("  ")
        stats.append(f"{self.propagated} propagated dependencies")
        if self.cycles:
            stats.append("  ")
            stats.append(f"{len(self.cycles)} cycle(s) skipped", style="red")

        console.print(Panel(stats, title=Text("depswap", style="bold yellow"), border_style="yellow"))


def rewrite_command(args, console: Optional[Console] = None) -> int:
    """Execute rewrite command.

    Args:
        args: Parsed command-line arguments containing:
            - manifest: Workspace manifest path or inline TOML/JSON
            - output: Optional path for the rewritten workspace JSON
            - plan: Optional path for the build plan JSON
            - exclusion_mode: Optional override of the manifest setting

    Returns:
        int: Exit code (0 for success, non-zero for failure).
    """
    console = console or Console()

    try:
        workspace = load_workspace(args.manifest)

        mode = getattr(args, "exclusion_mode", None)
        if mode:
            workspace.settings.exclusion_mode = ExclusionMode(mode)

        eventbus = EventBus()
        summary = RewriteSummary(eventbus)
        rewriter = DependencyRewriter(
            workspace.graph, workspace.registry, workspace.settings, eventbus=eventbus
        )
        scheduler = CollectingScheduler()
        result = rewriter.run(scheduler)

        output = getattr(args, "output", None)
        if output:
            export_workspace(workspace.graph, workspace.registry, Path(output))

        plan_path = getattr(args, "plan", None)
        if plan_path:
            write_json(build_plan_data(result.plan), Path(plan_path))
            logger.info("Build plan written to %s", plan_path)

        summary.render(console)
        return 0

    except DepswapError as e:
        logger.error("Rewrite failed: %s", e)
        return 1
