from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, List

from .errors import InvalidPlayerError, RecordValidationError

NB_PLAYERS = 2

MIN_VOLUME = 0
MAX_VOLUME = 10
DEFAULT_VOLUME = 5


class PlayerId(IntEnum):
    PLAYER1 = 0
    PLAYER2 = 1

    @classmethod
    def coerce(cls, value: Any) -> "PlayerId":
        """Return the PlayerId for ``value`` (a PlayerId or the ints 0/1)."""
        if isinstance(value, bool):
            raise InvalidPlayerError(f"Invalid player id: {value!r}")
        try:
            return cls(value)
        except (ValueError, TypeError) as e:
            raise InvalidPlayerError(f"Invalid player id: {value!r}") from e

    def other(self) -> "PlayerId":
        return PlayerId.PLAYER2 if self is PlayerId.PLAYER1 else PlayerId.PLAYER1


class Language(IntEnum):
    DEFAULT = 0
    ENGLISH = 1
    FRENCH = 2


class AutosaveMode(IntEnum):
    OFF = 0
    ONE_MINUTE = 1
    TWO_MINUTES = 2
    FIVE_MINUTES = 3
    TEN_MINUTES = 4

    @property
    def interval(self) -> int:
        """Autosave interval in seconds (0 when autosave is off)."""
        return AUTOSAVE_INTERVALS[self]


AUTOSAVE_INTERVALS = {
    AutosaveMode.OFF: 0,
    AutosaveMode.ONE_MINUTE: 60,
    AutosaveMode.TWO_MINUTES: 120,
    AutosaveMode.FIVE_MINUTES: 300,
    AutosaveMode.TEN_MINUTES: 600,
}

DEFAULT_LANGUAGE = Language.DEFAULT
DEFAULT_AUTOSAVE = AutosaveMode.TWO_MINUTES


class GamePhase(IntEnum):
    TITLE = 0
    PLAYING = 1
    PAUSED = 2
    LEVEL_COMPLETE = 3
    GAME_OVER = 4


@dataclass(frozen=True)
class Position:
    x: float = 0.0
    y: float = 0.0


def _default_positions() -> List[Position]:
    return [Position() for _ in range(NB_PLAYERS)]


@dataclass
class GameState:
    """Snapshot of a game session.

    ``has_been_loaded`` is only ever True on a record produced by
    ``SaveLoadManager.load``.
    """

    player_positions: List[Position] = field(default_factory=_default_positions)
    phase: GamePhase = GamePhase.TITLE
    collectibles: List[str] = field(default_factory=list)
    switches: List[bool] = field(default_factory=list)
    has_been_loaded: bool = False

    def __post_init__(self) -> None:
        if len(self.player_positions) != NB_PLAYERS:
            raise RecordValidationError(
                f"GameState.player_positions must hold exactly {NB_PLAYERS} positions"
            )
        try:
            self.phase = GamePhase(self.phase)
        except ValueError as e:
            raise RecordValidationError(str(e)) from e

    def copy(self) -> "GameState":
        return copy.deepcopy(self)


@dataclass
class GlobalSettings:
    """Settings shared by both players. The autosave interval follows the mode."""

    language: Language = DEFAULT_LANGUAGE
    autosave: AutosaveMode = DEFAULT_AUTOSAVE

    def __post_init__(self) -> None:
        try:
            self.language = Language(self.language)
            self.autosave = AutosaveMode(self.autosave)
        except ValueError as e:
            raise RecordValidationError(str(e)) from e

    @property
    def autosave_interval(self) -> int:
        return self.autosave.interval

    def copy(self) -> "GlobalSettings":
        return copy.deepcopy(self)


def validate_volume(volume: Any) -> int:
    if isinstance(volume, bool) or not isinstance(volume, int):
        raise RecordValidationError(f"volume must be an integer, got {volume!r}")
    if not MIN_VOLUME <= volume <= MAX_VOLUME:
        raise RecordValidationError(
            f"volume must be between {MIN_VOLUME} and {MAX_VOLUME}, got {volume}"
        )
    return volume


@dataclass
class PlayerSettings:
    hud_visible: bool = True
    volume: int = DEFAULT_VOLUME

    def __setattr__(self, name: str, value: Any) -> None:
        # Runs for __init__ too, so no instance ever holds an invalid volume.
        if name == "volume":
            value = validate_volume(value)
        elif name == "hud_visible":
            if not isinstance(value, bool):
                raise RecordValidationError(f"hud_visible must be a bool, got {value!r}")
        super().__setattr__(name, value)

    def copy(self) -> "PlayerSettings":
        return PlayerSettings(hud_visible=self.hud_visible, volume=self.volume)
