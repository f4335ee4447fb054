"""Rich terminal display for turn results and state summaries."""
from __future__ import annotations

from rich import box
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from realm_rpg.engine.turn_loop import TurnResult
from realm_rpg.mechanics.affinity import get_tier_name
from realm_rpg.mechanics.economy import calculate_captive_value
from realm_rpg.mechanics.skills import effective_cost, effective_power
from realm_rpg.mechanics.world_clock import format_time
from realm_rpg.models.state import GameState

console = Console()


class Display:
    def __init__(self, width: int = 80, show_mechanics: bool = True):
        self.console = console
        self.width = width
        self.show_mechanics = show_mechanics

    def show_narrative(self, text: str) -> None:
        if not text:
            return
        self.console.print()
        self.console.print(Panel(
            Markdown(text),
            border_style="green",
            box=box.ROUNDED,
            width=self.width,
            padding=(1, 2),
        ))

    def show_world_sim(self, text: str | None) -> None:
        if text:
            self.console.print(Panel(text, title="Elsewhere", border_style="dim", width=self.width))

    def show_turn_result(self, result: TurnResult) -> None:
        self.show_narrative(result.narration)
        self.show_world_sim(result.world_sim)
        if not self.show_mechanics:
            return
        for message in result.messages:
            self.console.print(f"  [cyan]*[/cyan] {message}")
        for ignored in result.ignored:
            self.console.print(f"  [dim]ignored [{ignored.name}]: {ignored.reason}[/dim]")

    def show_player(self, state: GameState) -> None:
        p = state.player
        title = f"{state.player_name or 'Player'} - {p.tier or state.settings.mortal_label}"
        table = Table(title=title, box=box.DOUBLE_EDGE, border_style="cyan")
        table.add_column("Attribute", style="bold", width=16)
        table.add_column("Value", min_width=24)

        table.add_row("Vitality", f"{p.vitality}/{p.max_vitality}")
        table.add_row("Resource", f"{p.resource}/{p.max_resource}")
        table.add_row("Offense", str(p.offense))
        table.add_row("Defense", str(p.defense))
        table.add_row("Speed", str(p.speed))
        table.add_row("Experience", f"{p.experience}/{p.experience_to_next}")
        table.add_row("Currency", str(p.currency))
        table.add_row("Progression", p.progression_state.value.replace("_", " "))
        table.add_row("Reputation", f"{state.reputation.score} ({state.reputation.tier})")
        table.add_row("Time", format_time(state.world_time))
        if state.current_location:
            table.add_row("Location", state.current_location)
        if p.status_effects:
            table.add_row("Status", ", ".join(e.name for e in p.status_effects))
        self.console.print(table)

    def show_relations(self, state: GameState) -> None:
        groups = [
            ("Companion", state.companions),
            ("Wife", state.wives),
            ("Slave", state.slaves),
            ("Prisoner", state.prisoners),
        ]
        if not any(people for _, people in groups):
            return
        table = Table(title="Relations", box=box.ROUNDED, border_style="magenta")
        table.add_column("Name", style="bold")
        table.add_column("Role", style="dim")
        table.add_column("Tier")
        table.add_column("Affinity", justify="right")
        table.add_column("Worth", justify="right")
        for role, people in groups:
            for person in people:
                worth = ""
                if role in ("Slave", "Prisoner"):
                    worth = str(calculate_captive_value(person, state.settings, kind=role.lower()))
                table.add_row(
                    person.name,
                    role,
                    person.tier or "-",
                    f"{person.affinity} {get_tier_name(person.affinity)}",
                    worth,
                )
        self.console.print(table)

    def show_skills(self, state: GameState) -> None:
        if not state.skills:
            return
        table = Table(title="Skills", box=box.ROUNDED, border_style="blue")
        table.add_column("Skill", style="bold")
        table.add_column("Proficiency")
        table.add_column("Power", justify="right")
        table.add_column("Cost", justify="right")
        for skill in state.skills:
            table.add_row(
                skill.name,
                f"{skill.proficiency_tier} {skill.proficiency}/{skill.max_proficiency}",
                str(effective_power(skill)),
                str(effective_cost(skill)),
            )
        self.console.print(table)

    def show_inventory(self, state: GameState) -> None:
        if not state.inventory:
            self.console.print("[dim]Inventory is empty.[/dim]")
            return
        table = Table(title="Inventory", box=box.ROUNDED, border_style="cyan")
        table.add_column("", width=3, justify="center")  # Equipped marker
        table.add_column("Item", style="bold", min_width=20)
        table.add_column("Type", style="dim", width=12)
        table.add_column("Qty", justify="right", width=5)
        table.add_column("Value", justify="right", width=10)
        for item in sorted(state.inventory, key=lambda i: i.name.lower()):
            table.add_row(
                "[green]E[/green]" if item.equipped else "",
                item.name,
                item.category,
                str(item.quantity),
                str(item.value),
            )
        self.console.print(table)

    def show_tier(self, label: str, position: str, stats: dict[str, int]) -> None:
        table = Table(title=f"{label} ({position})", box=box.SIMPLE_HEAVY, border_style="yellow")
        table.add_column("Stat", style="bold")
        table.add_column("Base", justify="right")
        for key, value in stats.items():
            table.add_row(key.removeprefix("base_").replace("_", " "), str(value))
        self.console.print(table)

    def show_error(self, message: str) -> None:
        self.console.print(f"[bold red]Error:[/bold red] {message}")

    def show_success(self, message: str) -> None:
        self.console.print(f"[bold green]{message}[/bold green]")
