"""Main entry point - console front-end for Skyward Settlers.

Usage:
    skyward                     # Play interactively
    skyward --seed 42           # Reproducible run
    skyward --auto --days 10    # Let the defaults play ten days
    skyward --config my.yaml    # Override tuning tables
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from random import Random
from typing import Optional

import click
from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory
from rich.console import Console
from rich.panel import Panel

from skyward.config import load_config
from skyward.display import render_entry, status_view
from skyward.game import Game
from skyward.systems.choices import AutoChoices, ChoiceConstraints, ChoiceKind
from skyward.systems.day_cycle import DayPhase

console = Console()

HISTORY_DIR = Path.home() / ".skyward_settlers"


class PromptChoices:
    """Asks the player at the terminal."""

    def __init__(self, session: PromptSession):
        self.session = session

    def ask_choice(self, prompt: str, constraints: ChoiceConstraints) -> str:
        if constraints.kind == ChoiceKind.OPTION:
            for i, label in enumerate(constraints.options, 1):
                if label.startswith("[UNAVAILABLE]"):
                    console.print(f"  [dim]{i}. {label}[/dim]")
                else:
                    console.print(f"  {i}. {label}")
        elif constraints.kind == ChoiceKind.NAME:
            console.print(f"  [dim]{', '.join(constraints.options)}[/dim]")
        try:
            answer = self.session.prompt(prompt)
        except KeyboardInterrupt:
            console.print("[dim]Using the default answer[/dim]")
            return constraints.default
        return answer.strip() or constraints.default


def _setup_logging(verbose: bool = False, log_file: str | None = None) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    fmt = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    stream = logging.StreamHandler(sys.stderr)
    # The terminal belongs to the game unless asked
    if not verbose:
        stream.setLevel(logging.WARNING)

    handlers: list[logging.Handler] = [stream]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(level=level, format=fmt, handlers=handlers)


def _show_phase(game: Game, phase: DayPhase) -> None:
    if phase == DayPhase.MORNING:
        console.rule(f"[bold cyan]Day {game.day}[/bold cyan]")
        console.print(status_view(game))


@click.command()
@click.option("--seed", type=int, default=None, help="Random seed for a reproducible game")
@click.option("--config", "config_path", type=click.Path(), default=None, help="YAML file overriding tuning tables")
@click.option("--auto", is_flag=True, help="Answer every prompt with its default")
@click.option("--days", type=int, default=None, help="Stop after this many days")
@click.option("--verbose", is_flag=True, help="Enable debug logging")
@click.option("--log-file", type=click.Path(), default=None, help="Also write logs to this file")
def main(
    seed: Optional[int],
    config_path: Optional[str],
    auto: bool,
    days: Optional[int],
    verbose: bool,
    log_file: Optional[str],
) -> None:
    """Skyward Settlers - a rooftop survival simulation."""
    _setup_logging(verbose=verbose, log_file=log_file)

    try:
        config = load_config(config_path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    if seed is None:
        seed = config.seed

    if auto:
        choices = AutoChoices()
    else:
        HISTORY_DIR.mkdir(exist_ok=True)
        session = PromptSession(history=FileHistory(str(HISTORY_DIR / "history")))
        choices = PromptChoices(session)

    console.print(Panel(
        "[bold cyan]SKYWARD SETTLERS[/bold cyan]\n"
        "[dim]Keep your rooftop settlement alive[/dim]",
        border_style="cyan",
    ))

    game = Game(config=config, choices=choices, rng=Random(seed), on_phase=_show_phase)
    game.event_log.subscribe(lambda entry: console.print(render_entry(entry)))

    try:
        last_day = game.run(max_days=days)
    except (KeyboardInterrupt, EOFError):
        console.print("\n[dim]Game abandoned.[/dim]")
        return

    console.print(f"\n[cyan]You kept the settlement going until day {last_day}.[/cyan]")
    console.print("[cyan]Thanks for playing Skyward Settlers![/cyan]")


if __name__ == "__main__":
    main()
