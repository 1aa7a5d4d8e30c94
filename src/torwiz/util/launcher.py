"""Open magnet links with the default or a named application."""

import os
import platform
import subprocess

from .log import get_logger, log_time

logger = get_logger()


class LauncherError(Exception):
    pass


def _command(uri: str, app: str | None, system: str) -> list[str]:
    if system == "Darwin":
        return ["open", "-a", app, uri] if app else ["open", uri]
    elif system == "Windows":
        return ["cmd", "/c", "start", "", app, uri] if app else []
    else:
        return [app, uri] if app else ["xdg-open", uri]


@log_time
def open_uri(uri: str, app: str | None = None) -> None:
    """Open URI in the named application or the system default handler.

    Args:
        uri: URI to open, usually a magnet link
        app: Application name or executable, None for the default handler

    Raises:
        LauncherError: If the application could not be started
    """
    system = platform.system()
    logger.info(f"Opening URI with {app or 'default application'}")

    try:
        if system == "Windows" and not app:
            os.startfile(uri)
        elif system == "Darwin" or not app:
            subprocess.run(
                _command(uri, app, system), check=True, capture_output=True
            )
        else:
            # GUI clients keep running, don't wait for them
            subprocess.Popen(
                _command(uri, app, system),
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
    except (OSError, subprocess.CalledProcessError) as e:
        logger.warning(f"Failed to open URI: {e}")
        raise LauncherError(str(e)) from e
