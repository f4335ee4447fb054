"""Exceptions raised by host-facing code.

The tag pipeline itself never raises for model-originated input; these are
for configuration and save files handed to us by the host.
"""
from __future__ import annotations


class RealmRpgError(Exception):
    """Base class for realm_rpg errors."""


class ConfigError(RealmRpgError):
    """The config file is unreadable or holds invalid engine settings."""


class StateFileError(RealmRpgError):
    """A saved game-state file could not be read or validated."""
