#!/usr/bin/env python3

# Torwiz - Interactive terminal wizard for torrent search
# Copyright (C) 2024  Anton Larionov
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

import argparse
import asyncio
import sys

from rich.console import Console

from .config import (
    TrackSetAction,
    TrackSetBooleanAction,
    WizardConfig,
    build_config,
    create_default_config,
    get_config_path,
    load_config,
    merge_config_with_args,
)
from .search.client import (
    DEFAULT_PROVIDER_ORDER,
    ProviderClient,
    print_available_providers,
)
from .search.manager import SearchOrchestrator
from .search.models import Category
from .ui.progress import ProgressReporter
from .ui.prompt import TerminalPrompts
from .ui.table import TableFormatter
from .util.log import get_logger, init_logger, log_time
from .version import __version__
from .wizard import Wizard

logger = get_logger()


def _setup_argument_parser(version: str) -> argparse.ArgumentParser:
    """Set up and return the argument parser."""
    p = argparse.ArgumentParser(
        prog="torwiz",
        description="Search torrent providers, pick a result and open "
        "or copy its magnet link",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    p.add_argument(
        "search",
        nargs="*",
        help="Name of torrent to search for. "
        "If omitted, the wizard asks for it",
    )

    # Search
    p.add_argument(
        "-p",
        "--provider",
        type=str,
        choices=DEFAULT_PROVIDER_ORDER,
        action=TrackSetAction,
        help="First provider to search",
    )
    p.add_argument(
        "--providers",
        type=str,
        nargs="+",
        choices=DEFAULT_PROVIDER_ORDER,
        action=TrackSetAction,
        help="Space-separated list of enabled search providers. "
        "Order matters: providers are tried in this order "
        "(default: all, see --list-providers)",
    )
    p.add_argument(
        "-c",
        "--cat",
        "--category",
        dest="category",
        type=str,
        default=Category.ALL.value,
        choices=Category.names(),
        action=TrackSetAction,
        help="Limit torrent search to a category "
        "(some providers use different categories)",
    )
    p.add_argument(
        "-r",
        "--rows",
        type=int,
        default=30,
        action=TrackSetAction,
        help="Number of rows to list in search",
    )
    p.add_argument(
        "-A",
        "--all-providers",
        default=False,
        action=TrackSetBooleanAction,
        help="Search all providers simultaneously",
    )
    p.add_argument(
        "--timeout",
        type=float,
        default=30,
        action=TrackSetAction,
        help="Deadline in seconds for a single provider call "
        "(0: no deadline)",
    )
    p.add_argument(
        "--list-providers",
        action="store_true",
        help="List available search providers and exit",
    )

    # Display
    p.add_argument(
        "-t",
        "--truncate",
        type=int,
        default=40,
        action=TrackSetAction,
        help="Number of characters to show before truncating "
        "torrent titles",
    )
    p.add_argument(
        "--details",
        default=True,
        action=TrackSetBooleanAction,
        help="Show torrent details before opening",
    )
    p.add_argument(
        "--progress",
        default=True,
        action=TrackSetBooleanAction,
        help="Show progress bars",
    )

    # Open
    p.add_argument(
        "-b",
        "--copy",
        "--clipboard",
        dest="clipboard",
        default=False,
        action=TrackSetBooleanAction,
        help="Copy selected torrent's magnet link to clipboard",
    )
    p.add_argument(
        "-o",
        "--default",
        "--open-default",
        dest="open_default",
        default=True,
        action=TrackSetBooleanAction,
        help="Open selected torrent in default torrent app",
    )
    p.add_argument(
        "-a",
        "--app",
        "--open-app",
        dest="open_app",
        type=str,
        metavar="NAME",
        action=TrackSetAction,
        help="Name of app to open selected torrent in "
        '(e.g. "qbittorrent"). Overrides --open-default',
    )

    # Other
    p.add_argument(
        "--create-config",
        action="store_true",
        help="Create default configuration file and exit",
    )
    p.add_argument(
        "--log-level",
        type=str,
        default="info",
        choices=["debug", "info", "warning", "error", "critical"],
        action=TrackSetAction,
        help="Set logging level",
    )
    p.add_argument(
        "-v",
        "--version",
        action="version",
        version="%(prog)s " + version,
        help="Show version and exit",
    )

    return p


def _handle_list_providers_command():
    """Handle --list-providers command."""
    print_available_providers()
    sys.exit(0)


def _handle_create_config_command():
    """Handle --create-config command to create config file."""
    config_path = get_config_path()
    create_default_config(config_path)
    print(f"Config file created: {config_path}")
    sys.exit(0)


@log_time
def _handle_commands(args) -> None:
    # Handle --list-providers (list providers and exit)
    if args.list_providers:
        logger.info("Listing available search providers")
        _handle_list_providers_command()

    # Handle --create-config (must happen before other processing)
    if args.create_config:
        logger.info("Creating default configuration file")
        _handle_create_config_command()


def create_wizard(config: WizardConfig) -> Wizard:
    """Wire wizard components for the configuration."""
    client = ProviderClient(request_timeout=config.provider_timeout)
    console = Console()

    return Wizard(
        config=config,
        client=client,
        orchestrator=SearchOrchestrator(client, config.provider_timeout),
        prompts=TerminalPrompts(console),
        reporter=ProgressReporter(),
        formatter=TableFormatter(config.columns),
        console=console,
    )


@log_time
def create_wizard_from_args(argv: list[str] | None = None):
    """Parse arguments and return the wizard and initial query."""
    parser = _setup_argument_parser(__version__)
    args = parser.parse_args(argv)

    _handle_commands(args)

    # Load config file and merge with CLI arguments
    config = load_config()
    merge_config_with_args(config, args)

    # Initialize logging
    init_logger(args.log_level)

    logger.info(f"Start Torwiz {__version__}...")
    logger.info(f"Loaded CLI options: {args}")

    try:
        wizard_config = build_config(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    # Space-separated words form one query
    query = " ".join(args.search).strip() or None

    return create_wizard(wizard_config), query


def cli():
    """CLI entry point. Creates and runs the wizard."""
    wizard, query = create_wizard_from_args()

    logger.info("Starting Torwiz wizard")
    try:
        asyncio.run(wizard.run(query))
    except KeyboardInterrupt:
        logger.info("Wizard interrupted by user")
        sys.exit(0)
    except Exception as e:
        logger.exception("Wizard failed")
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    cli()
