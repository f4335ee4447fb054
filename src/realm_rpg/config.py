"""Config loading: reads config.toml and builds engine settings."""
from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from realm_rpg.errors import ConfigError
from realm_rpg.models.state import EngineSettings

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config.toml"


def load_config(path: str | Path | None = None) -> dict[str, Any]:
    """Load config.toml from the project root, or from *path* when given.

    A missing file yields an empty dict. A file that exists but is not valid
    TOML raises ConfigError.
    """
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not config_path.exists():
        logger.debug(f"No config file at {config_path}, using defaults")
        return {}
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Could not read config file {config_path}: {e}") from e


def engine_settings_from_config(config: dict[str, Any]) -> EngineSettings:
    """Build EngineSettings from the ``[engine]`` table of a loaded config."""
    engine = config.get("engine", {})
    if not isinstance(engine, dict):
        raise ConfigError("[engine] must be a table")
    try:
        return EngineSettings.model_validate(engine)
    except ValidationError as e:
        raise ConfigError(f"Invalid [engine] settings: {e}") from e
