"""CLI command to inspect a workspace for project dependency cycles.

A rewrite pass cannot complete over a true cycle between projects. This
command lists the cycles up front and, when requested, fails the process
so that CI pipelines can enforce acyclicity.
"""

from __future__ import annotations

import logging
from typing import List

from depswap.config.loader import load_workspace
from depswap.errors import DepswapError

logger = logging.getLogger("depswap.cli.cycles")


def cycles_command(args) -> int:
    """Execute cycle inspection command.

    Args:
        args: Parsed command-line arguments.

    Returns:
        int: Exit code (0 for success, non-zero for failure).
    """
    try:
        limit_arg = getattr(args, "limit", None)
        fail_on_cycle = getattr(args, "fail_on_cycle", False)

        workspace = load_workspace(args.manifest)

        limit = limit_arg if isinstance(limit_arg, int) and limit_arg > 0 else None
        cycles: List[List[str]] = workspace.graph.find_cycles(limit=limit)
        if not cycles:
            logger.info("Workspace has no project dependency cycles")
            return 0

        logger.warning("Detected %d cycle(s) between projects", len(cycles))

        for idx, cycle in enumerate(cycles, start=1):
            # A -> B -> C -> A
            pretty_cycle = cycle + [cycle[0]] if cycle[0] != cycle[-1] else cycle
            logger.warning("Cycle %d: %s", idx, " -> ".join(pretty_cycle))

            for path in cycle:
                record = workspace.registry.lookup_by_path(path)
                status = "unregistered"
                if record is not None:
                    status = "enabled" if record.enabled else "disabled"
                logger.warning("    - %s (module: %s)", path, status)

        if fail_on_cycle:
            logger.error("Cycle validation failed: project dependency cycles detected")
            return 1

        return 0

    except DepswapError as e:
        logger.error("Cycles command failed: %s", e)
        return 1
