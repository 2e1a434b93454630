"""Persistence subsystem.

This package provides:
- Data records for the game session, global settings and per-player settings
- A versioned binary codec with kind tags and corruption checks
- Path resolution per category and player
- A single-instance SaveLoadManager that bootstraps settings and runs save/load
"""

from .codec import FORMAT_VERSION, MAGIC, RecordKind, decode, encode
from .errors import (
    AlreadyInitializedError,
    CodecError,
    CorruptionError,
    EncodeError,
    FormatError,
    InvalidPlayerError,
    ManagerClosedError,
    NotFoundError,
    NotInitializedError,
    PersistenceError,
    RecordValidationError,
    StorageError,
)
from .locking import RecordLocks
from .manager import GameSnapshotSource, SaveLoadManager, SnapshotProvider
from .models import (
    AutosaveMode,
    GamePhase,
    GameState,
    GlobalSettings,
    Language,
    PlayerId,
    PlayerSettings,
    Position,
)
from .paths import Category, SavePaths, resolve

__all__ = [
    "FORMAT_VERSION",
    "MAGIC",
    "RecordKind",
    "encode",
    "decode",
    "AlreadyInitializedError",
    "CodecError",
    "CorruptionError",
    "EncodeError",
    "FormatError",
    "InvalidPlayerError",
    "ManagerClosedError",
    "NotFoundError",
    "NotInitializedError",
    "PersistenceError",
    "RecordValidationError",
    "StorageError",
    "RecordLocks",
    "GameSnapshotSource",
    "SaveLoadManager",
    "SnapshotProvider",
    "AutosaveMode",
    "GamePhase",
    "GameState",
    "GlobalSettings",
    "Language",
    "PlayerId",
    "PlayerSettings",
    "Position",
    "Category",
    "SavePaths",
    "resolve",
]
