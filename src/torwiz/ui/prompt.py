"""Interactive prompts: single-select list, text input and confirmation."""

import shutil

from rich.console import Console
from rich.prompt import Confirm, Prompt
from rich.text import Text
from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Label, OptionList
from textual.widgets.option_list import Option

from ..util.log import log_time, log_time_async
from .table import Choice
from .util import subtitle_keys


def question(message: str) -> Text:
    return Text.assemble(("? ", "bold green"), (message, "bold"))


def page_size(rows: int | None = None) -> int:
    """Number of visible list rows: 70% of terminal height."""
    if rows is None:
        rows = shutil.get_terminal_size().lines
    return max(int(rows * 0.7), 3)


class SelectApp(App[Choice | None]):
    """Inline single-select list.

    Returns the selected choice, or None if the prompt was cancelled.
    """

    CSS = """
    Screen {
        height: auto;
    }

    OptionList {
        height: auto;
        border: none;
        padding: 0;
    }

    #hint {
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("escape", "close", "[Navigation] Cancel"),
        Binding("k", "cursor_up", "[Navigation] Move up", show=False),
        Binding("j", "cursor_down", "[Navigation] Move down", show=False),
    ]

    @log_time
    def __init__(
        self, message: str, choices: list[Choice], max_rows: int
    ) -> None:
        self.message = message
        self.choices = choices
        self.max_rows = max_rows
        super().__init__()

    @log_time
    def compose(self) -> ComposeResult:
        yield Label(question(self.message))
        yield OptionList(
            *(
                Option(c.name, id=str(i), disabled=c.disabled)
                for i, c in enumerate(self.choices)
            )
        )
        yield Label(
            subtitle_keys(
                ("↑/↓", "Move"), ("Enter", "Select"), ("ESC", "Exit")
            ),
            id="hint",
        )

    @log_time
    def on_mount(self) -> None:
        option_list = self.query_one(OptionList)
        option_list.styles.max_height = self.max_rows
        option_list.focus()

        for i, choice in enumerate(self.choices):
            if not choice.disabled:
                option_list.highlighted = i
                break

    @on(OptionList.OptionSelected)
    @log_time
    def handle_selected(self, event: OptionList.OptionSelected) -> None:
        self.exit(self.choices[int(event.option.id)])

    @log_time
    def action_cursor_up(self) -> None:
        self.query_one(OptionList).action_cursor_up()

    @log_time
    def action_cursor_down(self) -> None:
        self.query_one(OptionList).action_cursor_down()

    @log_time
    def action_close(self) -> None:
        self.exit(None)


class TerminalPrompts:
    """Prompt capability backed by textual (lists) and rich (text input).

    Every method returns None (select) or raises KeyboardInterrupt
    (ask_text, confirm) when the user aborts the prompt.
    """

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    @log_time_async
    async def select(
        self, message: str, choices: list[Choice]
    ) -> Choice | None:
        """Show a single-select list and wait for the user's choice."""
        app = SelectApp(message, choices, page_size())
        await app.run_async(inline=True)
        selected = app.return_value

        if selected is not None:
            short = selected.short or str(selected.name)
            self.console.print(
                Text.assemble(
                    ("? ", "bold green"),
                    (message, "bold"),
                    " ",
                    (short, "cyan"),
                )
            )
        return selected

    @log_time
    def ask_text(self, message: str) -> str:
        return Prompt.ask(
            question(message),
            console=self.console,
        )

    @log_time
    def confirm(self, message: str, default: bool = True) -> bool:
        return Confirm.ask(
            question(message),
            console=self.console,
            default=default,
        )
