"""Main CLI entry point for depswap.

Provides commands: rewrite, cycles
"""

import argparse
import logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from depswap.cli.cycles import cycles_command
from depswap.cli.rewrite import rewrite_command
from depswap.rewrite.exclusion import ExclusionMode

logger = logging.getLogger("depswap.cli")


def setup_logging(
    verbose: bool = False,
    console: Optional[Console] = None,
    log_file: Optional[str] = None,
) -> None:
    """Setup logging configuration with Rich integration.

    Args:
        verbose: Enable verbose logging.
        console: Rich Console instance for coordinated output (optional).
        log_file: Additionally write plain-text logs to this file (optional).
    """
    level = logging.DEBUG if verbose else logging.INFO

    handlers: list[logging.Handler] = [
        RichHandler(
            console=console,
            show_time=True,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            log_time_format="[%H:%M:%S]",
        )
    ]
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s [%(name)s] [%(levelname)s] %(message)s")
        )
        handlers.append(file_handler)

    logging.basicConfig(
        level=level,
        format="[%(name)s] %(message)s",
        handlers=handlers,
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="depswap",
        description="Depswap - substitute cached module artifacts for project dependencies",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--log-file",
        help="Also write logs to this file.",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    rewrite_parser = subparsers.add_parser(
        "rewrite",
        help="Rewrite project dependencies against cached module artifacts",
    )
    rewrite_parser.add_argument(
        "manifest",
        help="Workspace manifest: path to a TOML/JSON file or an inline TOML/JSON string",
    )
    rewrite_parser.add_argument(
        "-o",
        "--output",
        help="Write the rewritten workspace as JSON to this file",
    )
    rewrite_parser.add_argument(
        "--plan",
        help="Write the build plan (modules with a stale artifact) as JSON to this file",
    )
    rewrite_parser.add_argument(
        "--exclusion-mode",
        choices=[mode.value for mode in ExclusionMode],
        help="Override the manifest's exclusion_mode setting",
    )

    cycles_parser = subparsers.add_parser(
        "cycles",
        help="List project dependency cycles in a workspace",
    )
    cycles_parser.add_argument(
        "manifest",
        help="Workspace manifest: path to a TOML/JSON file or an inline TOML/JSON string",
    )
    cycles_parser.add_argument(
        "--limit",
        type=int,
        default=20,
        help="Maximum number of cycles to report (default: 20). Use <=0 for no limit.",
    )
    cycles_parser.add_argument(
        "--fail-on-cycle",
        action="store_true",
        help="Exit with non-zero status when cycles are found. Useful for CI validation.",
    )
    return parser


def main() -> int:
    """Main CLI entry point.

    Returns:
        int: Exit code.
    """
    parser = build_parser()
    args = parser.parse_args()

    console = Console()
    setup_logging(args.verbose, console=console, log_file=args.log_file)

    if args.command == "rewrite":
        return rewrite_command(args, console=console)
    elif args.command == "cycles":
        return cycles_command(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
