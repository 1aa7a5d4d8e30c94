"""Interactive search session driven as an explicit state machine."""

import asyncio
from collections.abc import Callable
from enum import Enum

from rich.console import Console
from rich.text import Text

from .config import WizardConfig
from .search.client import ProviderClient
from .search.manager import SearchOrchestrator
from .search.models import (
    MagnetError,
    SearchMode,
    SearchRequest,
    TorrentRecord,
)
from .ui.details import display_torrent_details
from .ui.progress import NullProgress, ProgressBar, ProgressReporter
from .ui.prompt import TerminalPrompts
from .ui.table import Choice, TableFormatter
from .util import clipboard, launcher
from .util.log import get_logger, log_time_async

logger = get_logger()

ALL_PROVIDERS = "All Providers"

DOWNLOAD = "Download/Open Magnet"
BACK = "Back to Search"
EXIT = "Exit"


class WizardState(Enum):
    SEARCHING = "searching"
    REVIEWING = "reviewing"
    CONFIRMING = "confirming"
    DOWNLOADING = "downloading"
    DONE = "done"


class WizardExit(Exception):
    """User asked to end the session."""


def _status(message: str, style: str, bold: str | None = None) -> Text:
    """Colored status line, with an optional bold quoted part."""
    if bold is None:
        return Text(message, style=style)
    before, _, after = message.partition("{}")
    return Text.assemble(
        (before, style), (bold, f"bold {style}"), (after, style)
    )


def _plain_choices(*values: str) -> list[Choice]:
    return [Choice(name=v, short=v, value=v) for v in values]


class Wizard:
    """Search, pick and open torrents until the user is done.

    States:
    - SEARCHING: ask for a query (unless given) and search providers,
      offering an all-provider search when nothing was found
    - REVIEWING: pick a torrent from the result table
    - CONFIRMING: show torrent details, then download, go back or exit
    - DOWNLOADING: resolve the magnet link, copy and/or open it
    - DONE: session is over

    After a download (or a failed one) the wizard asks whether to find
    another torrent before searching again.
    """

    def __init__(
        self,
        config: WizardConfig,
        client: ProviderClient,
        orchestrator: SearchOrchestrator,
        prompts: TerminalPrompts,
        reporter: ProgressReporter,
        formatter: TableFormatter | None = None,
        console: Console | None = None,
        copy: Callable[[str], None] = clipboard.copy,
        open_uri: Callable[..., None] = launcher.open_uri,
    ):
        self.config = config
        self.client = client
        self.orchestrator = orchestrator
        self.prompts = prompts
        self.reporter = reporter
        self.formatter = formatter or TableFormatter(config.columns)
        self.console = console or Console()
        self._copy = copy
        self._open_uri = open_uri

        self.state = WizardState.SEARCHING
        self.search_all = config.search_all
        self.query: str | None = None
        self.records: list[TorrentRecord] = []
        self.selected: TorrentRecord | None = None
        self._ask_another = False

    async def run(self, query: str | None = None) -> None:
        """Run the session until the user ends it."""
        self.query = query
        handlers = {
            WizardState.SEARCHING: self._searching,
            WizardState.REVIEWING: self._reviewing,
            WizardState.CONFIRMING: self._confirming,
            WizardState.DOWNLOADING: self._downloading,
        }

        while self.state != WizardState.DONE:
            logger.debug(f"Wizard state: {self.state.value}")
            try:
                self.state = await handlers[self.state]()
            except WizardExit:
                self.state = WizardState.DONE

        logger.info("Wizard session finished")

    # States

    async def _searching(self) -> WizardState:
        if self._ask_another:
            self._ask_another = False
            answer = await self._select(
                "Find another torrent?", _plain_choices("Yes", "No")
            )
            if answer == "No":
                return WizardState.DONE

        while True:
            query = self.query or self.prompts.ask_text(
                "What do you want to download?"
            )
            try:
                request = SearchRequest(
                    query=query,
                    category=self.config.category,
                    row_limit=self.config.rows,
                    truncate_width=self.config.truncate,
                )
            except ValueError:
                self.query = None
                continue

            self.records = await self.find(request)
            if self.records:
                self.query = request.query
                return WizardState.REVIEWING

            self.console.print(
                _status(
                    "No torrents found for {}, try another query.",
                    "yellow",
                    f'"{request.query}"',
                )
            )
            self.query = None

    async def _reviewing(self) -> WizardState:
        choices = self.formatter.format(self.records, self.config.truncate)
        self.selected = await self._select(
            "Which torrent would you like to view?", choices
        )
        self.records = []

        if self.config.show_details:
            return WizardState.CONFIRMING
        return WizardState.DOWNLOADING

    async def _confirming(self) -> WizardState:
        display_torrent_details(
            self.console,
            self.selected,
            self.client.provider_name(self.selected.provider),
        )

        action = await self._select(
            "What would you like to do?",
            _plain_choices(DOWNLOAD, BACK, EXIT),
        )
        if action == BACK:
            return WizardState.SEARCHING
        if action == EXIT:
            return WizardState.DONE
        return WizardState.DOWNLOADING

    async def _downloading(self) -> WizardState:
        record = self.selected
        self.selected = None
        self.query = None
        self._ask_another = True

        magnet = await self.resolve_magnet(record)
        if magnet is not None:
            await self.deliver(magnet, record)
        return WizardState.SEARCHING

    # Phases

    @log_time_async
    async def find(self, request: SearchRequest) -> list[TorrentRecord]:
        """Search providers, offering a search across all of them.

        Returns:
            Found records, empty list if the user gave up
        """
        while True:
            provider = self.config.provider
            if not provider and not self.search_all:
                provider = await self._select_provider()
                if provider is None:
                    self.search_all = True

            where = (
                "across all providers"
                if self.search_all
                else f'on "{self.client.provider_name(provider)}"'
            )
            handle = self._begin(
                "Searching",
                _status(
                    f"Searching for {{}} {where}...",
                    "blue",
                    f'"{request.query}"',
                ),
            )

            mode = (
                SearchMode.ALL_PROVIDERS_PARALLEL
                if self.search_all
                else SearchMode.FIXED_WITH_FALLBACK
            )
            records = await self.reporter.track(
                handle,
                self.orchestrator.search(
                    request, self.config.providers, mode, start=provider
                ),
            )

            if records:
                if not self.search_all:
                    name = self.client.provider_name(
                        self.orchestrator.current_provider
                    )
                    where = f'on "{name}"'
                self._finish(
                    handle,
                    _status(
                        f"✓ Found {len(records)} results {where}", "green"
                    ),
                )
                return records

            if self.search_all:
                self._finish(
                    handle,
                    _status(
                        "✗ No torrents found across any providers", "yellow"
                    ),
                )
                return []

            tried = f'"{", ".join(self.orchestrator.attempted)}"'
            message = _status("✗ No torrents found via {}", "yellow", tried)
            self._finish(handle, message)
            self.console.print(
                _status(
                    "Would you like to try searching across all providers?",
                    "cyan",
                )
            )
            if not self.prompts.confirm(
                "Search across all providers?", default=True
            ):
                return []
            self.search_all = True

    @log_time_async
    async def resolve_magnet(self, record: TorrentRecord) -> str | None:
        """Get the record's magnet link, None if it can't be resolved."""
        handle = self._begin(
            "Getting magnet link", _status("Getting magnet link...", "blue")
        )
        await self.reporter.animate(handle, until=90, step=15, delay=0.05)

        try:
            magnet = await self.client.get_magnet(record)
        except MagnetError as e:
            logger.warning(f"Failed to get magnet for {record.title}: {e}")
            self._finish(
                handle,
                _status("Unable to get magnet for torrent.", "red"),
            )
            return None

        handle.complete()
        self._finish(
            handle, _status("✓ Magnet link retrieved successfully", "green")
        )
        return magnet

    @log_time_async
    async def deliver(self, magnet: str, record: TorrentRecord) -> None:
        """Copy the magnet link and/or open it, as configured."""
        if self.config.clipboard:
            self._copy_magnet(magnet, record)

        app = self.config.open_app
        if not (app or self.config.open_default):
            return

        handle = self._begin(
            "Opening torrent", _status("Opening torrent...", "blue")
        )
        await self.reporter.animate(handle, until=90, step=10, delay=0.03)

        try:
            await asyncio.to_thread(self._open_uri, magnet, app)
        except launcher.LauncherError as e:
            logger.warning(f"Failed to open magnet link: {e}")
            self._finish(
                handle, _status(f"✗ Unable to open torrent: {e}", "yellow")
            )
            return

        handle.complete()
        where = app if app else "default application"
        self._finish(handle, _status(f"✓ Opened in {where}", "green"))

    # Helpers

    def _copy_magnet(self, magnet: str, record: TorrentRecord) -> None:
        try:
            self._copy(magnet)
        except clipboard.ClipboardError as e:
            logger.warning(f"Failed to copy magnet link: {e}")
            self.console.print(
                _status(f"✗ Unable to copy to clipboard: {e}", "yellow")
            )
            return

        self.console.print(
            Text.assemble(
                ("Magnet link for ", "bold"),
                (record.title, "cyan"),
                (" copied to clipboard.", "bold"),
            )
        )

    async def _select(self, message: str, choices: list[Choice]):
        selected = await self.prompts.select(message, choices)
        if selected is None:
            raise WizardExit()
        return selected.value

    async def _select_provider(self) -> str | None:
        """Ask for the provider to search, None for all providers."""
        choices = [
            Choice(
                name=self.client.provider_name(p),
                short=self.client.provider_name(p),
                value=p,
            )
            for p in self.config.providers
        ]
        choices.append(Choice(name=ALL_PROVIDERS, short=ALL_PROVIDERS))
        return await self._select(
            "Which torrent provider would you like to use?", choices
        )

    def _begin(
        self, label: str, status: Text
    ) -> ProgressBar | NullProgress:
        handle = (
            self.reporter.begin(100, label)
            if self.config.show_progress
            else NullProgress()
        )
        if not handle.active:
            self.console.print(status)
        return handle

    def _finish(self, handle: ProgressBar | NullProgress, message: Text):
        if handle.active:
            handle.stop(message)
        else:
            self.console.print(message)
