"""Command-line interface: ``repo-traffic --out-dir DIR <command> <owner/repo>``."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from repo_traffic import __version__
from repo_traffic.config import LOG_FORMAT, LOG_LEVEL
from repo_traffic.errors import RepoTrafficError
from repo_traffic.github_client import make_client
from repo_traffic.orchestrator import Command, CommandKind, run_command

logger = logging.getLogger(__name__)

_COMMAND_HELP = """\
These are the available commands:

    traffic    Fetch traffic data.
    clones     Fetch clones data.
    repo       Fetch repo data (stars, forks, watchers, subscribers)
"""


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="repo-traffic",
        description="Snapshot GitHub traffic, clones and repository statistics as dated JSON files.",
        epilog=_COMMAND_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s v{__version__}",
    )
    parser.add_argument(
        "--out-dir",
        type=Path,
        required=True,
        help="Root directory the JSON files are written under",
    )
    parser.add_argument(
        "--transport",
        choices=("http", "gh"),
        default=None,
        help="Talk to the REST API directly (http) or through the GitHub CLI (gh)",
    )
    parser.add_argument("command", choices=[kind.value for kind in CommandKind])
    parser.add_argument("repo", help="Repository as owner/name")
    return parser


async def _run(command: Command, out_dir: Path, transport: str | None) -> list[Path]:
    async with make_client(transport) as client:
        return await run_command(command, out_dir, client)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
    args = create_parser().parse_args(argv)

    try:
        command = Command.parse(args.command, args.repo)
        written = asyncio.run(_run(command, args.out_dir, args.transport))
    except RepoTrafficError as exc:
        logger.error("%s", exc)
        return 1

    logger.info("Done: %d file(s) written.", len(written))
    return 0


if __name__ == "__main__":
    sys.exit(main())
