#!/usr/bin/env python3
"""
Repo Bridge - bring an organisation repository into the current directory

Usage:
    repo-bridge

Run it inside the folder that should receive the repository (for example a
local WordPress site's wp-content). It asks whether you are starting a new
project or continuing an existing one, creates the repository on GitHub when
needed, then clones it and moves its contents into the current directory.

Configuration comes from the environment:
    REPO_BRIDGE_ORG         organisation to list and create repositories in
    REPO_BRIDGE_GIT_HOST    SSH host used in clone URLs
    REPO_BRIDGE_VISIBILITY  visibility of created repositories
    REPO_BRIDGE_LOG_LEVEL   logging level (DEBUG shows every command run)
"""

import logging
from pathlib import Path

import typer
from rich.align import Align
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.text import Text

from .config import BridgeConfig
from .errors import BridgeError, ToolMissingError
from .hosting import GhCliHost, ensure_tools
from .prompts import ConsolePrompter
from .provisioner import provision
from .tracker import StepTracker

BANNER = """
╦═╗╔═╗╔═╗╔═╗  ╔╗ ╦═╗╦╔╦╗╔═╗╔═╗
╠╦╝║╣ ╠═╝║ ║  ╠╩╗╠╦╝║ ║║║ ╦║╣
╩╚═╚═╝╩  ╚═╝  ╚═╝╩╚═╩═╩╝╚═╝╚═╝
"""

TAGLINE = "The bridge between local WordPress and your organisation's Git"

OVERWRITE_WARNING = (
    "If you select a template or existing repository to clone, its contents will override any "
    "existing files and folders with matching names.\n\n"
    "For example, cloning a repository that contains a [cyan]plugins[/cyan] folder will completely "
    "replace the existing [cyan]plugins[/cyan] folder in this site's wp-content."
)

console = Console()

log = logging.getLogger("repo_bridge")

app = typer.Typer(
    name="repo-bridge",
    help="Create or fetch an organisation repository and merge it into the current directory",
    add_completion=False,
)


def show_banner():
    """Display the ASCII art banner."""
    banner_lines = BANNER.strip().split('\n')
    colors = ["bright_blue", "blue", "cyan"]

    styled_banner = Text()
    for i, line in enumerate(banner_lines):
        color = colors[i % len(colors)]
        styled_banner.append(line + "\n", style=color)

    console.print(Align.center(styled_banner))
    console.print(Align.center(Text(TAGLINE, style="italic bright_yellow")))
    console.print()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
    )
    log.setLevel(level)


def new_tracker() -> StepTracker:
    tracker = StepTracker("Prepare Repository")
    for key, label in [
        ("create", "Create repository"),
        ("clone", "Clone repository"),
        ("merge", "Move files into current folder"),
        ("cleanup", "Remove temporary directory"),
    ]:
        tracker.add(key, label)
    return tracker


@app.command()
def bridge():
    """
    Create or select an organisation repository and merge it into the current directory.

    This command will:
    1. Ask whether you are starting a new project or continuing an existing one
    2. For a new project, ask for its name and an optional template, then create it
    3. For an existing project, let you pick one of the organisation's repositories
    4. Clone the repository and move its contents into the current directory,
       replacing files and folders with the same names
    """
    show_banner()

    try:
        config = BridgeConfig.from_env()
    except BridgeError as e:
        console.print(Panel(str(e), title="[red]Configuration Error[/red]", border_style="red"))
        raise typer.Exit(1)
    configure_logging(config.log_level)

    try:
        ensure_tools()
    except ToolMissingError as e:
        console.print(Panel(
            f"[cyan]{e.tool}[/cyan] not found\n"
            f"Install with: [cyan]{e.install_hint}[/cyan]",
            title="[red]Missing Tool[/red]",
            border_style="red",
            padding=(1, 2)
        ))
        raise typer.Exit(1)

    workdir = Path.cwd()
    setup_lines = [
        "[cyan]Repository Setup[/cyan]",
        "",
        f"{'Organisation':<15} [green]{config.org}[/green]",
        f"{'Working Path':<15} [dim]{workdir}[/dim]",
    ]
    console.print(Panel("\n".join(setup_lines), border_style="cyan", padding=(1, 2)))
    console.print(Panel(OVERWRITE_WARNING, title="[yellow]Warning[/yellow]", border_style="yellow", padding=(1, 2)))

    tracker = new_tracker()
    try:
        result = provision(ConsolePrompter(console), GhCliHost(config), workdir, console=console, tracker=tracker)
    except (BridgeError, OSError) as e:
        console.print()
        console.print(tracker.render())
        console.print(Panel(str(e), title="[red]Error[/red]", border_style="red"))
        raise typer.Exit(1)

    console.print()
    console.print(tracker.render())
    summary = f"{config.org}/{result.repository} is ready in the current folder."
    if result.merge.overwritten:
        summary += f"\nReplaced: {', '.join(result.merge.overwritten)}"
    console.print(Panel(summary, title="[green]Done[/green]", border_style="green", padding=(1, 2)))


def main():
    app()


if __name__ == "__main__":
    main()
