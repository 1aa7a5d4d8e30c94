"""Progress bars for long-running wizard phases."""

import asyncio
import contextlib
import math
from collections.abc import Awaitable
from typing import TypeVar

from rich.console import Console
from rich.text import Text

T = TypeVar("T")


class NullProgress:
    """Progress handle for non-interactive output, does nothing."""

    active = False

    def update(self, current: float) -> None:
        pass

    def complete(self) -> None:
        pass

    def stop(self, message: Text | str = "") -> None:
        pass


class ProgressBar:
    """Fixed-width bar redrawn in place on the console's terminal."""

    active = True

    FILLED = "█"
    EMPTY = "░"

    def __init__(
        self, console: Console, total: float, label: str, width: int = 40
    ):
        self._console = console
        self._total = total if total > 0 else 1
        self._label = label
        self._width = width
        self._last_line = ""
        self._last_percent: int | None = None

    @property
    def total(self) -> float:
        return self._total

    @property
    def percent(self) -> int | None:
        return self._last_percent

    def update(self, current: float) -> None:
        """Redraw bar if the displayed percentage changed."""
        current = min(max(current, 0), self._total)
        percent = math.floor(current / self._total * 100)
        if percent == self._last_percent:
            return
        self._last_percent = percent

        filled = math.floor(self._width * current / self._total)
        bar = self.FILLED * filled + self.EMPTY * (self._width - filled)
        line = f"{self._label} {bar} {percent}%"

        # Blank out leftovers of a longer previous line
        padding = " " * max(len(self._last_line) - len(line), 0)
        self._write(f"\r{line}{padding}")
        self._last_line = line

    def complete(self) -> None:
        self.update(self._total)

    def stop(self, message: Text | str = "") -> None:
        """Clear the bar and print a one-line summary."""
        if self._last_line:
            self._write("\r" + " " * len(self._last_line) + "\r")
            self._last_line = ""
        self._console.print(message)

    def _write(self, value: str) -> None:
        self._console.file.write(value)
        self._console.file.flush()


class ProgressReporter:
    """Creates progress handles and drives simulated progress.

    Provider calls don't report progress, so while one runs the bar is
    advanced by a fixed step at a fixed interval, up to a ceiling below
    100%. The bar only reaches 100% once the call has finished. This is
    an approximation for the user's benefit, not a measurement.
    """

    def __init__(
        self,
        console: Console | None = None,
        width: int = 40,
        tick_interval: float = 0.2,
        tick_step: float = 5,
        ceiling: float = 95,
    ):
        self.console = console or Console(stderr=True)
        self._width = width
        self._tick_interval = tick_interval
        self._tick_step = tick_step
        self._ceiling = ceiling

    @property
    def interactive(self) -> bool:
        return self.console.is_terminal

    def begin(
        self, total: float = 100, label: str = "Progress"
    ) -> ProgressBar | NullProgress:
        if not self.interactive:
            return NullProgress()
        return ProgressBar(self.console, total, label, self._width)

    async def track(
        self, handle: ProgressBar | NullProgress, operation: Awaitable[T]
    ) -> T:
        """Await operation while ticking the handle's bar.

        The ticker is stopped however the operation ends. Stopping the
        handle is left to the caller.
        """
        if not handle.active:
            return await operation

        ticker = asyncio.create_task(self._tick(handle))
        try:
            result = await operation
        finally:
            ticker.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await ticker

        handle.complete()
        return result

    async def animate(
        self,
        handle: ProgressBar | NullProgress,
        until: int = 90,
        step: int = 15,
        delay: float = 0.05,
    ) -> None:
        """Advance the bar in fixed steps with a fixed delay."""
        if not handle.active:
            return

        for current in range(0, until + 1, step):
            handle.update(current)
            await asyncio.sleep(delay)

    async def _tick(self, handle: ProgressBar) -> None:
        # Ticks are in percent of the handle's total
        progress = 0
        handle.update(0)
        while True:
            await asyncio.sleep(self._tick_interval)
            progress = min(progress + self._tick_step, self._ceiling)
            handle.update(handle.total * progress / 100)
