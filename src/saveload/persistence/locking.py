from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Union

from .models import PlayerId


@dataclass
class RecordLocks:
    """One lock per persisted record, for hosts that share a SaveLoadManager across threads.

    SaveLoadManager does no locking of its own. Callers hold the matching lock
    around accessor use and the Save/Load call for that record; the two player
    locks are distinct so both players can save at the same time.
    """

    game_state: threading.RLock = field(default_factory=threading.RLock)
    global_settings: threading.RLock = field(default_factory=threading.RLock)
    player1: threading.RLock = field(default_factory=threading.RLock)
    player2: threading.RLock = field(default_factory=threading.RLock)

    def player(self, player_id: Union[PlayerId, int]) -> threading.RLock:
        if PlayerId.coerce(player_id) is PlayerId.PLAYER1:
            return self.player1
        return self.player2
