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

import logging
import time
from functools import wraps
from pathlib import Path

from platformdirs import user_log_dir


def get_logger() -> logging.Logger:
    """Get the Torwiz logger instance.

    Returns:
        Logger instance for Torwiz application
    """
    return logging.getLogger("torwiz")


def init_logger(log_level: str) -> None:
    """Initialize logging configuration.

    Log records go to a file only, the terminal is reserved for the wizard.

    Args:
        log_level: Log level (debug, info, warning, error, critical)
    """
    level_map = {
        "debug": logging.DEBUG,
        "info": logging.INFO,
        "warning": logging.WARNING,
        "error": logging.ERROR,
        "critical": logging.CRITICAL,
    }

    level = level_map.get(log_level.lower(), logging.WARNING)

    log_dir = Path(user_log_dir("torwiz", appauthor=False))
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "torwiz.log"
    logging.basicConfig(
        filename=str(log_file),
        encoding="utf-8",
        format="%(asctime)s.%(msecs)03d %(module)-15s "
        "%(levelname)-8s %(message)s",
        level=level,
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logger = get_logger()
    logger.info(
        f"Logging initialized: level={log_level.upper()}, file={log_file}"
    )


def _log_elapsed(func, start_time: float) -> None:
    total_time_ms = (time.perf_counter() - start_time) * 1000

    if total_time_ms > 1:
        get_logger().debug(
            f'Function "{func.__qualname__}": {total_time_ms:.4f} ms'
        )


def log_time(func):
    """Decorator to log function execution time if it exceeds 1ms."""

    @wraps(func)
    def log_time_wrapper(*args, **kwargs):
        start_time = time.perf_counter()

        result = func(*args, **kwargs)

        _log_elapsed(func, start_time)

        return result

    return log_time_wrapper


def log_time_async(func):
    """Coroutine counterpart of log_time."""

    @wraps(func)
    async def log_time_wrapper(*args, **kwargs):
        start_time = time.perf_counter()

        result = await func(*args, **kwargs)

        _log_elapsed(func, start_time)

        return result

    return log_time_wrapper
