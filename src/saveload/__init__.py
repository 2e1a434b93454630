"""Save/load of game state, global settings and per-player settings."""

__version__ = "0.1.0"
