"""Clipboard utilities for putting magnet links on the system clipboard."""

import pyperclip

from .log import get_logger, log_time

logger = get_logger()


class ClipboardError(Exception):
    pass


@log_time
def copy(text: str) -> None:
    """
    Put text content on the system clipboard.

    Raises:
        ClipboardError: If no clipboard mechanism is available
    """
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as e:
        logger.warning(f"Failed to access clipboard: {e}")
        raise ClipboardError(str(e)) from e
