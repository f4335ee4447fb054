"""Typer CLI application."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.logging import RichHandler

from realm_rpg.cli.display import Display
from realm_rpg.config import engine_settings_from_config, load_config
from realm_rpg.engine.turn_loop import TurnLoop
from realm_rpg.errors import RealmRpgError, StateFileError
from realm_rpg.mechanics.progression import calculate_tier_base_stats
from realm_rpg.mechanics.tiers import is_mortal, resolve_tier
from realm_rpg.models.state import GameState

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="realm-rpg",
    help="Apply narrator responses to a cultivation RPG game state",
    no_args_is_help=True,
)


def _setup_logging(config: dict, verbose: bool) -> None:
    level = "DEBUG" if verbose else str(config.get("logging", {}).get("level", "WARNING")).upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


def _read_state(path: Path) -> GameState:
    try:
        return GameState.model_validate_json(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise StateFileError(f"Could not read state file {path}: {e}") from e
    except ValidationError as e:
        raise StateFileError(f"Invalid state file {path}: {e}") from e


def _write_state(state: GameState, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(state.model_dump_json(indent=2), encoding="utf-8")


@app.command()
def new(
    player_name: str = typer.Argument(..., help="Name of the player character"),
    out: Path = typer.Option(Path("state.json"), "--out", "-o", help="Where to write the new state"),
    tier: Optional[str] = typer.Option(None, "--tier", "-t", help="Starting tier (default: first rung)"),
    location: str = typer.Option("", "--location", "-l", help="Starting location"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.toml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Create a fresh game state file."""
    display = Display()
    try:
        config = load_config(config_path)
        _setup_logging(config, verbose)
        settings = engine_settings_from_config(config)
    except RealmRpgError as e:
        display.show_error(str(e))
        raise typer.Exit(code=1)

    state = GameState.new_game(player_name, settings=settings, tier=tier, location=location)
    _write_state(state, out)
    display.show_player(state)
    display.show_success(f"New game written to {out}")


@app.command()
def apply(
    response: Path = typer.Argument(..., help="File holding the raw narrator response"),
    state_path: Path = typer.Option(Path("state.json"), "--state", "-s", help="Game state JSON to read"),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Where to write the result (default: --state)"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.toml"),
    end_turn: bool = typer.Option(True, "--end-turn/--no-end-turn", help="Run end-of-turn ticks"),
    index: bool = typer.Option(False, "--index", help="Upsert entity updates into ChromaDB"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Apply one narrator response to a saved state."""
    display = Display()
    try:
        config = load_config(config_path)
        _setup_logging(config, verbose)
        state = _read_state(state_path)
        raw = response.read_text(encoding="utf-8")
    except OSError as e:
        display.show_error(f"Could not read response file {response}: {e}")
        raise typer.Exit(code=1)
    except RealmRpgError as e:
        display.show_error(str(e))
        raise typer.Exit(code=1)

    indexer = None
    if index:
        from realm_rpg.rag import Indexer
        from realm_rpg.rag.vector_store import VectorStore

        rag = config.get("rag", {})
        store = VectorStore(
            persist_dir=rag.get("persist_dir", "data/chromadb"),
            collection_prefix=rag.get("collection_prefix", "realm_rpg"),
        )
        indexer = Indexer(store)

    loop = TurnLoop(state, indexer=indexer)
    result = loop.process_response(raw, end_turn=end_turn)
    target = out or state_path
    _write_state(loop.state, target)

    display.show_turn_result(result)
    display.show_player(loop.state)
    display.show_relations(loop.state)
    display.show_skills(loop.state)
    if loop.state.pending_combat is not None:
        names = ", ".join(loop.state.pending_combat.opponents)
        display.console.print(f"[bold red]Combat pending[/bold red] against {names}")
    if indexer is not None:
        display.console.print(f"[dim]Knowledge index holds {indexer.store.count(indexer.collection)} document(s)[/dim]")
    logger.info(f"Applied {len(result.commands)} command(s), {len(result.ignored)} ignored")


@app.command()
def show(
    state_path: Path = typer.Option(Path("state.json"), "--state", "-s", help="Game state JSON to read"),
    inventory: bool = typer.Option(False, "--inventory", "-i", help="Also list the inventory"),
) -> None:
    """Print a summary of a saved state."""
    display = Display()
    try:
        state = _read_state(state_path)
    except StateFileError as e:
        display.show_error(str(e))
        raise typer.Exit(code=1)
    display.show_player(state)
    display.show_relations(state)
    display.show_skills(state)
    if inventory:
        display.show_inventory(state)


@app.command()
def tier(
    label: str = typer.Argument(..., help="Tier label, e.g. 'Golden Core Layer 3'"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.toml"),
) -> None:
    """Show where a tier label sits on the ladder and its base stats."""
    display = Display()
    try:
        settings = engine_settings_from_config(load_config(config_path))
    except RealmRpgError as e:
        display.show_error(str(e))
        raise typer.Exit(code=1)

    if is_mortal(label, settings.mortal_label):
        position = "mortal"
    else:
        pos = resolve_tier(label, settings.major_tiers, settings.minor_tiers)
        position = f"major {pos.major_index + 1}/{pos.major_count}, minor {pos.minor_index + 1}/{pos.minor_count}"
        if not pos.known:
            position += ", unrecognised"
    display.show_tier(label, position, calculate_tier_base_stats(label, settings))


if __name__ == "__main__":
    app()
