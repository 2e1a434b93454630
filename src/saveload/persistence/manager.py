from __future__ import annotations

import dataclasses
import logging
import threading
from pathlib import Path
from typing import Callable, ClassVar, Optional, Protocol, Type, TypeVar, Union

from ..config import load_config
from ..utils.fs import atomic_write_bytes, ensure_dir
from .codec import Record, decode, encode
from .errors import (
    AlreadyInitializedError,
    EncodeError,
    ManagerClosedError,
    NotFoundError,
    NotInitializedError,
    PersistenceError,
    StorageError,
)
from .models import (
    DEFAULT_AUTOSAVE,
    DEFAULT_LANGUAGE,
    AutosaveMode,
    GameState,
    GlobalSettings,
    Language,
    PlayerId,
    PlayerSettings,
)
from .paths import SavePaths

logger = logging.getLogger(__name__)

R = TypeVar("R", GameState, GlobalSettings, PlayerSettings)


class GameSnapshotSource(Protocol):
    """A live game session able to produce a full GameState snapshot."""

    def snapshot(self) -> GameState: ...


SnapshotProvider = Union[GameSnapshotSource, Callable[[], GameState]]


def _take_snapshot(provider: SnapshotProvider) -> GameState:
    snapshot = getattr(provider, "snapshot", None)
    state = snapshot() if callable(snapshot) else provider()  # type: ignore[operator]
    if not isinstance(state, GameState):
        raise EncodeError(f"Snapshot provider returned {type(state).__name__}, expected GameState")
    return state


def _replace_contents(target: R, source: R) -> None:
    for f in dataclasses.fields(target):
        setattr(target, f.name, getattr(source, f.name))


class SaveLoadManager:
    """Owns the four persisted records and reads/writes them to disk.

    Only one instance may be live per process. The records are created on
    construction; global settings are loaded from disk, or set to defaults and
    saved right away when no settings file exists yet. Game state and player
    settings keep their default values until a save or load touches them.

    Each save or load replaces a whole record. There is no transaction across
    files: a crash between ``save()`` and ``save_settings()`` can leave one
    file new and the other old. Each single write is atomic.

    No locking is done here. Multi-threaded hosts should guard each record
    with its own lock (see ``RecordLocks``).
    """

    _instance: ClassVar[Optional["SaveLoadManager"]] = None
    _instance_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(
        self,
        root: Optional[Union[str, Path]] = None,
        snapshot_provider: Optional[SnapshotProvider] = None,
    ) -> None:
        with SaveLoadManager._instance_lock:
            if SaveLoadManager._instance is not None:
                raise AlreadyInitializedError(
                    "A SaveLoadManager is already live; close() it before creating another"
                )
            SaveLoadManager._instance = self
        try:
            self._closed = False
            self.paths = SavePaths.for_root(root if root is not None else load_config().save_root)
            self.snapshot_provider = snapshot_provider
            self._game_state = GameState()
            self._global_settings = GlobalSettings()
            self._player_settings = {pid: PlayerSettings() for pid in PlayerId}
            self._bootstrap_settings()
        except BaseException:
            self._release()
            raise
        logger.debug("SaveLoadManager ready (root=%s)", self.paths.root)

    # Lifecycle

    @classmethod
    def instance(cls) -> "SaveLoadManager":
        inst = cls._instance
        if inst is None:
            raise NotInitializedError("No SaveLoadManager has been created")
        return inst

    @classmethod
    def is_initialized(cls) -> bool:
        return cls._instance is not None

    def close(self) -> None:
        """Release the single-instance slot.

        Records stay readable afterwards; saving, loading or changing them
        raises ManagerClosedError.
        """
        if not self._closed:
            self._closed = True
            self._release()
            logger.debug("SaveLoadManager closed")

    def _check_open(self) -> None:
        if self._closed:
            raise ManagerClosedError("This SaveLoadManager has been closed")

    def _release(self) -> None:
        with SaveLoadManager._instance_lock:
            if SaveLoadManager._instance is self:
                SaveLoadManager._instance = None

    def __enter__(self) -> "SaveLoadManager":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _bootstrap_settings(self) -> None:
        if self.paths.global_settings.exists():
            self.load_settings()
            return
        logger.info("No settings file at %s; writing defaults", self.paths.global_settings)
        self._global_settings.language = DEFAULT_LANGUAGE
        self._global_settings.autosave = DEFAULT_AUTOSAVE
        self.save_settings()

    # Snapshot provider

    def attach_snapshot_provider(self, provider: SnapshotProvider) -> None:
        self.snapshot_provider = provider

    def detach_snapshot_provider(self) -> None:
        self.snapshot_provider = None

    # Accessors (copies out, validated replacement in)

    def game_state(self) -> GameState:
        return self._game_state.copy()

    def set_game_state(self, state: GameState) -> None:
        self._check_open()
        if not isinstance(state, GameState):
            raise TypeError(f"expected GameState, got {type(state).__name__}")
        state = state.copy()
        # Only load() may mark a record as loaded.
        state.has_been_loaded = False
        _replace_contents(self._game_state, state)

    def global_settings(self) -> GlobalSettings:
        return self._global_settings.copy()

    def set_global_settings(
        self,
        *,
        language: Optional[Language] = None,
        autosave: Optional[AutosaveMode] = None,
    ) -> None:
        self._check_open()
        updated = GlobalSettings(
            language=self._global_settings.language if language is None else language,
            autosave=self._global_settings.autosave if autosave is None else autosave,
        )
        _replace_contents(self._global_settings, updated)

    def player_settings(self, player_id: Union[PlayerId, int]) -> PlayerSettings:
        return self._player_settings[PlayerId.coerce(player_id)].copy()

    def update_player_settings(
        self,
        player_id: Union[PlayerId, int],
        *,
        hud_visible: Optional[bool] = None,
        volume: Optional[int] = None,
    ) -> None:
        self._check_open()
        current = self._player_settings[PlayerId.coerce(player_id)]
        # Build first so a bad value leaves the live record untouched.
        updated = PlayerSettings(
            hud_visible=current.hud_visible if hud_visible is None else hud_visible,
            volume=current.volume if volume is None else volume,
        )
        _replace_contents(current, updated)

    # Save

    def save(self, provider: Optional[SnapshotProvider] = None) -> Path:
        """Write the game state to the game save file.

        With a snapshot provider (argument or attached), its snapshot replaces
        the in-memory game state. Without one there is no live session, so the
        game state is reset to defaults instead of re-saving stale data.
        """
        self._check_open()
        provider = provider if provider is not None else self.snapshot_provider
        if provider is not None:
            state = _take_snapshot(provider).copy()
            state.has_been_loaded = False
        else:
            logger.info("No active game session; saving a fresh default game state")
            state = GameState()
        self._write(self.paths.game_save, encode(state))
        _replace_contents(self._game_state, state)
        logger.info("Game saved to %s", self.paths.game_save)
        return self.paths.game_save

    def save_settings(self) -> Path:
        self._check_open()
        self._write(self.paths.global_settings, encode(self._global_settings))
        logger.info("Global settings saved to %s", self.paths.global_settings)
        return self.paths.global_settings

    def save_player_settings(self, player_id: Union[PlayerId, int]) -> Path:
        self._check_open()
        pid = PlayerId.coerce(player_id)
        path = self.paths.player_settings(pid)
        self._write(path, encode(self._player_settings[pid]))
        logger.info("Settings for %s saved to %s", pid.name, path)
        return path

    # Load

    def load(self) -> GameState:
        """Restore the game state from disk and return a copy of it.

        The restored record always has ``has_been_loaded`` set.
        """
        self._check_open()
        state = self._read(self.paths.game_save, GameState)
        state.has_been_loaded = True
        _replace_contents(self._game_state, state)
        logger.info("Game loaded from %s", self.paths.game_save)
        return self.game_state()

    def load_settings(self) -> GlobalSettings:
        self._check_open()
        settings = self._read(self.paths.global_settings, GlobalSettings)
        _replace_contents(self._global_settings, settings)
        logger.info("Global settings loaded from %s", self.paths.global_settings)
        return self.global_settings()

    def load_player_settings(self, player_id: Union[PlayerId, int]) -> PlayerSettings:
        self._check_open()
        pid = PlayerId.coerce(player_id)
        path = self.paths.player_settings(pid)
        settings = self._read(path, PlayerSettings)
        _replace_contents(self._player_settings[pid], settings)
        logger.info("Settings for %s loaded from %s", pid.name, path)
        return self.player_settings(pid)

    def check_save_file_exists(self) -> bool:
        try:
            return self.paths.game_save.is_file()
        except OSError:
            return False

    # Internal utilities

    def _write(self, path: Path, data: bytes) -> None:
        try:
            ensure_dir(path.parent)
            atomic_write_bytes(path, data)
        except OSError as e:
            logger.exception("Failed to write %s", path)
            raise StorageError(e.errno, f"Failed to write {path}: {e.strerror or e}") from e

    def _read(self, path: Path, kind: Type[R]) -> R:
        try:
            data = path.read_bytes()
        except FileNotFoundError as e:
            logger.warning("No file to load at %s", path)
            raise NotFoundError(e.errno, f"Save file not found: {path}") from e
        except OSError as e:
            logger.exception("Failed to read %s", path)
            raise StorageError(e.errno, f"Failed to read {path}: {e.strerror or e}") from e
        try:
            return decode(data, kind)  # type: ignore[return-value]
        except PersistenceError:
            logger.warning("Could not decode %s as %s", path, kind.__name__)
            raise
