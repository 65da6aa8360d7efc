"""Interactive prompts.

The workflow only depends on :class:`Prompter`; :class:`ConsolePrompter` is the
terminal implementation (arrow-key selection through readchar and a Rich Live
panel, validated free-text input through ``rich.prompt``).
"""

import sys
from typing import Any, Callable, NamedTuple, Optional, Protocol, Sequence, Union

import readchar
import typer
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.prompt import IntPrompt, Prompt
from rich.table import Table

# A validator returns True for accepted input, or the message to show before re-prompting.
Validator = Callable[[str], Union[bool, str]]


class Choice(NamedTuple):
    label: str
    value: Any
    description: str = ""


class Prompter(Protocol):
    def choose(self, message: str, choices: Sequence[Choice]) -> Any:
        ...

    def ask_text(self, message: str, validate: Optional[Validator] = None) -> str:
        ...


def non_empty(message: str) -> Validator:
    def validate(text: str) -> Union[bool, str]:
        return bool(text.strip()) or message

    return validate


def get_key():
    """Get a single keypress in a cross-platform way using readchar."""
    key = readchar.readkey()

    if key == readchar.key.UP:
        return 'up'
    if key == readchar.key.DOWN:
        return 'down'
    if key == readchar.key.ENTER:
        return 'enter'
    if key == readchar.key.ESC:
        return 'escape'
    if key == readchar.key.CTRL_C:
        raise KeyboardInterrupt

    return key


def select_with_arrows(console: Console, choices: Sequence[Choice], prompt_text: str = "Select an option") -> int:
    """
    Interactive selection using arrow keys with Rich Live display.

    Args:
        console: Console to render the panel on
        choices: Options to present, in display order
        prompt_text: Text to show above the options

    Returns:
        Index of the selected choice
    """
    selected_index = 0
    confirmed = False

    def create_selection_panel():
        table = Table.grid(padding=(0, 2))
        table.add_column(style="cyan", justify="left", width=3)
        table.add_column(style="white", justify="left")

        for i, choice in enumerate(choices):
            marker = "▶" if i == selected_index else " "
            line = f"[cyan]{choice.label}[/cyan]"
            if choice.description:
                line += f" [dim]({choice.description})[/dim]"
            table.add_row(marker, line)

        table.add_row("", "")
        table.add_row("", "[dim]Use ↑/↓ to navigate, Enter to select, Esc to cancel[/dim]")

        return Panel(
            table,
            title=f"[bold]{prompt_text}[/bold]",
            border_style="cyan",
            padding=(1, 2)
        )

    console.print()

    with Live(create_selection_panel(), console=console, transient=True, auto_refresh=False) as live:
        while True:
            try:
                key = get_key()
            except KeyboardInterrupt:
                console.print("\n[yellow]Selection cancelled[/yellow]")
                raise typer.Exit(1)
            if key == 'up':
                selected_index = (selected_index - 1) % len(choices)
            elif key == 'down':
                selected_index = (selected_index + 1) % len(choices)
            elif key == 'enter':
                confirmed = True
                break
            elif key == 'escape':
                console.print("\n[yellow]Selection cancelled[/yellow]")
                raise typer.Exit(1)

            live.update(create_selection_panel(), refresh=True)

    if not confirmed:
        console.print("\n[red]Selection failed.[/red]")
        raise typer.Exit(1)

    return selected_index


class ConsolePrompter:
    """Prompter that talks to the user's terminal."""

    def __init__(self, console: Console, interactive: Optional[bool] = None):
        self.console = console
        self.interactive = sys.stdin.isatty() if interactive is None else interactive

    def choose(self, message: str, choices: Sequence[Choice]) -> Any:
        if not choices:
            raise ValueError("choose() needs at least one choice")
        if self.interactive:
            index = select_with_arrows(self.console, choices, message)
        else:
            index = self._choose_by_number(message, choices)
        selected = choices[index]
        self.console.print(f"[cyan]{message}[/cyan] {selected.label}")
        return selected.value

    def _choose_by_number(self, message: str, choices: Sequence[Choice]) -> int:
        self.console.print(f"[bold]{message}[/bold]")
        for number, choice in enumerate(choices, start=1):
            line = f"  {number}. [cyan]{choice.label}[/cyan]"
            if choice.description:
                line += f" [dim]({choice.description})[/dim]"
            self.console.print(line)
        numbers = [str(n) for n in range(1, len(choices) + 1)]
        answer = IntPrompt.ask("Enter a number", console=self.console, choices=numbers, default=1)
        return answer - 1

    def ask_text(self, message: str, validate: Optional[Validator] = None) -> str:
        while True:
            answer = Prompt.ask(message, console=self.console, default="", show_default=False)
            verdict = validate(answer) if validate else True
            if verdict is True:
                return answer
            self.console.print(f"[red]{verdict or 'Invalid input'}[/red]")
