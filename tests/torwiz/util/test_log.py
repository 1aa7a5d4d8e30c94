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

import asyncio
import logging
import time
from unittest.mock import MagicMock, patch

from src.torwiz.util.log import (
    get_logger,
    init_logger,
    log_time,
    log_time_async,
)


class TestGetLogger:
    """Test cases for get_logger function."""

    def test_returns_logger_instance(self):
        """Test that get_logger returns a Logger instance."""
        logger = get_logger()
        assert isinstance(logger, logging.Logger)

    def test_logger_name(self):
        assert get_logger().name == "torwiz"

    def test_returns_same_instance(self):
        """Test that get_logger returns the same instance on multiple calls."""
        assert get_logger() is get_logger()


class TestInitLogger:
    """Test cases for init_logger function."""

    @patch("src.torwiz.util.log.user_log_dir")
    @patch("src.torwiz.util.log.Path.mkdir")
    @patch("src.torwiz.util.log.logging.basicConfig")
    def test_configures_file_logging(
        self, mock_basic_config, mock_mkdir, mock_user_log_dir
    ):
        """Test that init_logger writes to a file in the user log dir."""
        mock_user_log_dir.return_value = "/tmp/test_logs"

        init_logger("debug")

        mock_user_log_dir.assert_called_once_with("torwiz", appauthor=False)
        mock_mkdir.assert_called_once_with(parents=True, exist_ok=True)

        mock_basic_config.assert_called_once()
        call_kwargs = mock_basic_config.call_args[1]
        assert call_kwargs["filename"].endswith("torwiz.log")
        assert call_kwargs["encoding"] == "utf-8"
        assert call_kwargs["level"] == logging.DEBUG
        assert "stream" not in call_kwargs

    @patch("src.torwiz.util.log.user_log_dir")
    @patch("src.torwiz.util.log.Path.mkdir")
    @patch("src.torwiz.util.log.logging.basicConfig")
    def test_level_is_case_insensitive(
        self, mock_basic_config, mock_mkdir, mock_user_log_dir
    ):
        mock_user_log_dir.return_value = "/tmp/test_logs"

        init_logger("ERROR")

        assert mock_basic_config.call_args[1]["level"] == logging.ERROR

    @patch("src.torwiz.util.log.user_log_dir")
    @patch("src.torwiz.util.log.Path.mkdir")
    @patch("src.torwiz.util.log.logging.basicConfig")
    def test_unknown_level_falls_back_to_warning(
        self, mock_basic_config, mock_mkdir, mock_user_log_dir
    ):
        mock_user_log_dir.return_value = "/tmp/test_logs"

        init_logger("verbose")

        assert mock_basic_config.call_args[1]["level"] == logging.WARNING


class TestLogTimeDecorator:
    """Test cases for log_time decorator."""

    def test_decorated_function_returns_value(self):
        """Test that decorated function returns its value."""

        @log_time
        def add(a, b=0):
            return a + b

        assert add(5, b=3) == 8

    @patch("src.torwiz.util.log.get_logger")
    def test_logs_when_execution_exceeds_threshold(self, mock_get_logger):
        """Test that log_time logs when execution time exceeds 1ms."""
        mock_logger = MagicMock()
        mock_get_logger.return_value = mock_logger

        @log_time
        def slow_function():
            time.sleep(0.002)
            return "done"

        assert slow_function() == "done"

        mock_logger.debug.assert_called_once()
        message = mock_logger.debug.call_args[0][0]
        assert "slow_function" in message
        assert "ms" in message

    @patch("src.torwiz.util.log.get_logger")
    def test_does_not_log_fast_function(self, mock_get_logger):
        """Test that log_time doesn't log when execution is below 1ms."""
        mock_logger = MagicMock()
        mock_get_logger.return_value = mock_logger

        @log_time
        def fast_function():
            return "done"

        assert fast_function() == "done"
        mock_logger.debug.assert_not_called()

    def test_preserves_function_metadata(self):
        @log_time
        def documented_function():
            """This is a docstring."""

        assert documented_function.__name__ == "documented_function"
        assert documented_function.__doc__ == "This is a docstring."


class TestLogTimeAsyncDecorator:
    """Test cases for log_time_async decorator."""

    def test_awaits_coroutine_result(self):
        @log_time_async
        async def answer():
            return 42

        assert asyncio.run(answer()) == 42

    @patch("src.torwiz.util.log.get_logger")
    def test_measures_whole_coroutine(self, mock_get_logger):
        """Test that time spent suspended in the coroutine is measured."""
        mock_logger = MagicMock()
        mock_get_logger.return_value = mock_logger

        @log_time_async
        async def slow_coroutine():
            await asyncio.sleep(0.005)

        asyncio.run(slow_coroutine())

        mock_logger.debug.assert_called_once()
        assert "slow_coroutine" in mock_logger.debug.call_args[0][0]
