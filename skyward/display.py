"""Rich renderables for the console front-end."""

from __future__ import annotations
from typing import TYPE_CHECKING

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from skyward.models.events import EventType

if TYPE_CHECKING:
    from skyward.game import Game
    from skyward.models.events import LogEntry
    from skyward.models.settlement import Settlement

ENTRY_STYLES = {
    EventType.HEADER: "bold",
    EventType.PHASE: "bold blue",
    EventType.SUCCESS: "green",
    EventType.WARNING: "yellow",
    EventType.DANGER: "bold red",
    EventType.RESOURCE: "cyan",
    EventType.EXPEDITION: "magenta",
    EventType.SETTLER: "bright_white",
    EventType.BUILDING: "blue",
    EventType.HOPE: "dim",
}


def render_entry(entry: "LogEntry") -> Text:
    """Style one narrative line by its type."""
    return Text(entry.message, style=ENTRY_STYLES.get(entry.event_type, ""))


def _meter_color(value: int) -> str:
    if value >= 70:
        return "green"
    if value >= 40:
        return "yellow"
    return "red"


def settlers_table(game: "Game") -> Table:
    table = Table(title="Settlers", show_header=True, header_style="bold magenta")
    table.add_column("#", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Role")
    table.add_column("Health", justify="right")
    table.add_column("Morale", justify="right")
    table.add_column("Status")

    for i, settler in enumerate(game.settlers, 1):
        if settler.is_away:
            health = morale = "[dim]?[/dim]"
        else:
            health = f"[{_meter_color(settler.health)}]{settler.health}[/]"
            morale = f"[{_meter_color(settler.morale)}]{settler.morale}[/]"
        status = settler.activity_label()
        if settler.wounded and not settler.is_away:
            status += " [red][WOUNDED][/red]"
        table.add_row(str(i), settler.name, settler.role.value, health, morale, status)
    return table


def resources_table(settlement: "Settlement") -> Table:
    table = Table(title="Resources", show_header=True, header_style="bold magenta")
    for name in ("Food", "Water", "Meds", "Materials"):
        table.add_column(name, justify="right")
    res = settlement.resources
    table.add_row(str(res.food), str(res.water), str(res.meds), str(res.materials))
    return table


def hope_panel(game: "Game") -> Panel:
    hope = game.hope
    body = game.settlement.hope_description(hope)
    return Panel(
        f"[bold {_meter_color(hope)}]{hope}[/]\n{body}",
        title="Settlement Hope",
        border_style=_meter_color(hope),
    )


def infrastructure_panel(settlement: "Settlement") -> Panel:
    lines = [
        f"[bold]Shelter:[/bold] {settlement.shelter_name} "
        f"({int(settlement.shelter_protection * 100)}% protection)"
    ]
    upgrade = settlement.shelter_upgrade
    if upgrade:
        target = settlement.config.shelter_tiers[upgrade.target_tier].name
        lines.append(f"  [yellow]Building {target}[/yellow]: {upgrade.time_left}d left ({upgrade.assigned_mechanic})")

    infra = settlement.infrastructure
    for category, production in infra.production_ranges.items():
        lines.append(
            f"[bold]{infra.tier_name(category)}[/bold] ({category.value}): "
            f"{production.min}-{production.max} per day"
        )
    for project in infra.in_progress:
        pct = project.progress_percent
        if pct >= 80:
            color = "green"
        elif pct >= 40:
            color = "yellow"
        else:
            color = "blue"
        lines.append(f"[{color}]{project.progress_bar(10)}[/{color}] {pct}% {project.name}")
        lines.append(f"  [dim]{', '.join(project.mechanics)} • {project.time_left}d left[/dim]")

    return Panel("\n".join(lines), title="Infrastructure", border_style="blue")


def status_view(game: "Game") -> Group:
    """Everything shown at the start of a day."""
    return Group(
        Text(f"--- DAY {game.day} STATUS ---", style="bold blue"),
        settlers_table(game),
        resources_table(game.settlement),
        hope_panel(game),
        infrastructure_panel(game.settlement),
    )
