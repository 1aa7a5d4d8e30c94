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

import configparser
import sys
from argparse import Action, BooleanOptionalAction, Namespace
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_config_dir

from .search.client import parse_provider_set
from .search.models import Category, ProviderSet


class TrackSetAction(Action):
    SET_POSTFIX = "_was_set"

    def __call__(self, parser, namespace, values, option_string=None):
        setattr(namespace, self.dest, values)
        setattr(namespace, f"{self.dest}{self.SET_POSTFIX}", True)


class TrackSetBooleanAction(BooleanOptionalAction):
    def __call__(self, parser, namespace, values, option_string=None):
        super().__call__(parser, namespace, values, option_string)
        setattr(namespace, f"{self.dest}{TrackSetAction.SET_POSTFIX}", True)


@dataclass(frozen=True)
class DisplayColumns:
    """Optional table columns enabled by configuration."""

    seeds: bool = True
    peers: bool = True
    size: bool = True
    date: bool = True


@dataclass(frozen=True)
class WizardConfig:
    """Immutable wizard options, built once from defaults, file and CLI."""

    providers: ProviderSet
    provider: str | None = None
    category: Category = Category.ALL
    rows: int = 30
    truncate: int = 40
    clipboard: bool = False
    open_default: bool = True
    open_app: str | None = None
    show_details: bool = True
    show_progress: bool = True
    search_all: bool = False
    provider_timeout: float = 30
    columns: DisplayColumns = field(default_factory=DisplayColumns)

    def __post_init__(self):
        if self.rows < 1:
            raise ValueError(f"Number of rows must be positive: {self.rows}")
        if self.truncate < 1:
            raise ValueError(
                f"Truncate length must be positive: {self.truncate}"
            )


def get_config_dir() -> Path:
    """
    Get the configuration directory path using platformdirs.

    Returns the platform-appropriate user config directory for torwiz.
    """
    return Path(user_config_dir("torwiz", appauthor=False))


def get_config_path() -> Path:
    return get_config_dir() / "torwiz.conf"


def _get_string_option(
    parser: configparser.ConfigParser, section: str, option: str
) -> str | None:
    """Get string option, returning None if empty or missing."""
    if parser.has_option(section, option):
        val = parser.get(section, option)
        # Return None if value is empty or contains only whitespace
        return val.strip() if val and val.strip() else None
    return None


def _get_list_option(
    parser: configparser.ConfigParser, section: str, option: str
) -> list[str] | None:
    """Get list option from comma-separated string, returning None if empty.

    Args:
        parser: ConfigParser instance
        section: Section name
        option: Option name

    Returns:
        List of stripped string values, or None if empty or missing
    """
    val = _get_string_option(parser, section, option)
    if val is None:
        return None
    items = [item.strip() for item in val.split(",") if item.strip()]
    return items if items else None


def _get_int_option(
    parser: configparser.ConfigParser, section: str, option: str
) -> int | None:
    """Get int option, returning None if empty, missing, or invalid."""
    val = _get_string_option(parser, section, option)
    if val is not None:
        try:
            return int(val)
        except ValueError as e:
            print(
                f"Warning: Invalid {option} value in config: {e}",
                file=sys.stderr,
            )
    return None


def _get_float_option(
    parser: configparser.ConfigParser, section: str, option: str
) -> float | None:
    val = _get_string_option(parser, section, option)
    if val is not None:
        try:
            return float(val)
        except ValueError as e:
            print(
                f"Warning: Invalid {option} value in config: {e}",
                file=sys.stderr,
            )
    return None


def _get_bool_option(
    parser: configparser.ConfigParser, section: str, option: str
) -> bool | None:
    """Get bool option, returning None if missing or invalid."""
    if _get_string_option(parser, section, option) is None:
        return None
    try:
        return parser.getboolean(section, option)
    except ValueError as e:
        print(
            f"Warning: Invalid {option} value in config: {e}",
            file=sys.stderr,
        )
    return None


def _load_search_section(
    parser: configparser.ConfigParser, config: dict
) -> None:
    """Load [search] section options into config dict."""
    if not parser.has_section("search"):
        return

    val = _get_list_option(parser, "search", "providers")
    if val:
        config["providers"] = val
    val = _get_string_option(parser, "search", "provider")
    if val:
        config["provider"] = val
    val = _get_string_option(parser, "search", "category")
    if val:
        config["category"] = val
    val = _get_int_option(parser, "search", "rows")
    if val is not None:
        config["rows"] = val
    val = _get_float_option(parser, "search", "timeout")
    if val is not None:
        config["timeout"] = val
    val = _get_bool_option(parser, "search", "all_providers")
    if val is not None:
        config["all_providers"] = val


def _load_display_section(
    parser: configparser.ConfigParser, config: dict
) -> None:
    """Load [display] section options into config dict."""
    if not parser.has_section("display"):
        return

    val = _get_int_option(parser, "display", "truncate")
    if val is not None:
        config["truncate"] = val
    val = _get_bool_option(parser, "display", "details")
    if val is not None:
        config["details"] = val
    val = _get_bool_option(parser, "display", "progress")
    if val is not None:
        config["progress"] = val

    for column in ("seeds", "peers", "size", "date"):
        val = _get_bool_option(parser, "display", column)
        if val is not None:
            config[f"column_{column}"] = val


def _load_open_section(
    parser: configparser.ConfigParser, config: dict
) -> None:
    """Load [open] section options into config dict."""
    if not parser.has_section("open"):
        return

    val = _get_bool_option(parser, "open", "clipboard")
    if val is not None:
        config["clipboard"] = val
    val = _get_bool_option(parser, "open", "default")
    if val is not None:
        config["open_default"] = val
    val = _get_string_option(parser, "open", "app")
    if val:
        config["open_app"] = val


def _load_debug_section(
    parser: configparser.ConfigParser, config: dict
) -> None:
    """Load [debug] section options into config dict."""
    if not parser.has_section("debug"):
        return

    val = _get_string_option(parser, "debug", "log_level")
    if val:
        config["log_level"] = val


def load_config(config_path: Path | None = None) -> dict:
    """
    Load configuration from INI file.

    Args:
        config_path: Path to the config file, default location if None

    Returns:
        Dictionary with config values. Returns empty dict if file
        doesn't exist or on parsing errors.
    """
    config = {}
    config_path = config_path or get_config_path()

    if not config_path.exists():
        return config

    parser = configparser.ConfigParser()
    try:
        parser.read(config_path)
    except configparser.Error as e:
        print(
            f"Warning: Failed to parse config file {config_path}: {e}",
            file=sys.stderr,
        )
        print("Continuing with default values...", file=sys.stderr)
        return config

    _load_search_section(parser, config)
    _load_display_section(parser, config)
    _load_open_section(parser, config)
    _load_debug_section(parser, config)

    return config


def create_default_config(path: Path) -> None:
    """
    Create a default configuration file with comments.

    Args:
        path: Path where the config file should be created
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    config_content = """\
# Torwiz Configuration File
# This file uses INI format. Empty values use defaults.
# Command line options take priority over values in this file.

[search]
# Comma-separated list of enabled search providers: tpb, yts, torrentscsv,
# nyaa. Order matters: providers are tried in this order.
providers =

# Provider to search first, then the enabled providers in their order
provider =

# Default category: All, Movies, TV, Music, Games, Apps, Books, Top100
category =

# Number of rows to list in search
rows =

# Deadline in seconds for a single provider call (0: no deadline)
timeout =

# Search all providers simultaneously: true or false
all_providers =

[display]
# Number of characters to show before truncating torrent titles
truncate =

# Show torrent details before opening: true or false
details =

# Show progress bars: true or false
progress =

# Optional table columns: true or false
seeds =
peers =
size =
date =

[open]
# Copy magnet link to clipboard: true or false
clipboard =

# Open magnet link in default torrent app: true or false
default =

# Name of app to open magnet links in (overrides default)
app =

[debug]
# Log level: debug, info, warning, error, critical
log_level =

"""

    try:
        path.write_text(config_content)
    except OSError as e:
        print(
            f"Error: Failed to create config file {path}: {e}", file=sys.stderr
        )
        sys.exit(1)


def merge_config_with_args(config: dict, args: Namespace) -> None:
    """
    Merge config file values with CLI arguments.

    CLI arguments take priority over config file values.
    Modifies args in place.

    Args:
        config: Dictionary of config values from load_config()
        args: Parsed command-line arguments from argparse
    """

    for key, value in config.items():
        if not hasattr(args, f"{key}{TrackSetAction.SET_POSTFIX}"):
            setattr(args, key, value)


def build_config(args: Namespace) -> WizardConfig:
    """
    Build immutable wizard configuration from merged arguments.

    Raises:
        ValueError: If an option has an invalid value
    """
    provider = None
    if args.provider:
        provider = parse_provider_set([args.provider])[0]

    return WizardConfig(
        providers=parse_provider_set(args.providers),
        provider=provider,
        category=Category.from_name(args.category),
        rows=args.rows,
        truncate=args.truncate,
        clipboard=args.clipboard,
        open_default=args.open_default,
        open_app=args.open_app,
        show_details=args.details,
        show_progress=args.progress,
        search_all=args.all_providers,
        provider_timeout=args.timeout,
        columns=DisplayColumns(
            seeds=getattr(args, "column_seeds", True),
            peers=getattr(args, "column_peers", True),
            size=getattr(args, "column_size", True),
            date=getattr(args, "column_date", True),
        ),
    )
