from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from .errors import InvalidPlayerError
from .models import PlayerId

GAME_SAVE_FILE = "save"
GLOBAL_SETTINGS_FILE = "settings"
PLAYER_SETTINGS_FILES = {
    PlayerId.PLAYER1: "psettings1",
    PlayerId.PLAYER2: "psettings2",
}


class Category(Enum):
    GAME_SAVE = "game_save"
    GLOBAL_SETTINGS = "global_settings"
    PLAYER_SETTINGS = "player_settings"


def resolve(
    root: Union[str, Path],
    category: Category,
    player_id: Optional[Union[PlayerId, int]] = None,
) -> Path:
    """Map a category (and player id for player settings) to a file under ``root``.

    Pure: no directory is created and nothing is read.
    """
    root = Path(root)
    if category is Category.PLAYER_SETTINGS:
        if player_id is None:
            raise InvalidPlayerError("A player id is required for player settings")
        return root / PLAYER_SETTINGS_FILES[PlayerId.coerce(player_id)]
    if player_id is not None:
        raise InvalidPlayerError(f"{category.name} is not a per-player category")
    if category is Category.GAME_SAVE:
        return root / GAME_SAVE_FILE
    if category is Category.GLOBAL_SETTINGS:
        return root / GLOBAL_SETTINGS_FILE
    raise ValueError(f"Unknown category: {category!r}")


@dataclass(frozen=True)
class SavePaths:
    """The four resolved file locations for one save root."""

    root: Path
    game_save: Path
    global_settings: Path
    player1_settings: Path
    player2_settings: Path

    @classmethod
    def for_root(cls, root: Union[str, Path]) -> "SavePaths":
        root = Path(root)
        return cls(
            root=root,
            game_save=resolve(root, Category.GAME_SAVE),
            global_settings=resolve(root, Category.GLOBAL_SETTINGS),
            player1_settings=resolve(root, Category.PLAYER_SETTINGS, PlayerId.PLAYER1),
            player2_settings=resolve(root, Category.PLAYER_SETTINGS, PlayerId.PLAYER2),
        )

    def player_settings(self, player_id: Union[PlayerId, int]) -> Path:
        if PlayerId.coerce(player_id) is PlayerId.PLAYER1:
            return self.player1_settings
        return self.player2_settings
