"""Versioned binary codec for the three persisted record kinds.

Every stream starts with a fixed header::

    magic (4s) | kind (B) | format version (H) | payload length (I) | crc32 (I)

followed by the kind-specific payload, little-endian throughout. The header is
checked in full before any field is decoded, so a foreign or truncated file is
rejected without producing a partial record.
"""
from __future__ import annotations

import struct
import zlib
from enum import IntEnum
from typing import Any, Callable, Dict, Type, Union

from .errors import CorruptionError, EncodeError, FormatError, RecordValidationError
from .models import (
    NB_PLAYERS,
    AutosaveMode,
    GamePhase,
    GameState,
    GlobalSettings,
    Language,
    PlayerSettings,
    Position,
)

MAGIC = b"SLM1"
FORMAT_VERSION = 1

_HEADER = struct.Struct("<4sBHII")
_U8 = struct.Struct("<B")
_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")
_POSITION = struct.Struct("<dd")
_GLOBAL_SETTINGS = struct.Struct("<BBI")
_PLAYER_SETTINGS = struct.Struct("<BB")

Record = Union[GameState, GlobalSettings, PlayerSettings]


class RecordKind(IntEnum):
    GAME_STATE = 1
    GLOBAL_SETTINGS = 2
    PLAYER_SETTINGS = 3


_KIND_BY_TYPE: Dict[Type[Any], RecordKind] = {
    GameState: RecordKind.GAME_STATE,
    GlobalSettings: RecordKind.GLOBAL_SETTINGS,
    PlayerSettings: RecordKind.PLAYER_SETTINGS,
}


def kind_of(record: Any) -> RecordKind:
    try:
        return _KIND_BY_TYPE[type(record)]
    except KeyError:
        raise EncodeError(f"Unsupported record type: {type(record).__name__}") from None


# --------------------------------------------------------------------- encode


def encode(record: Record) -> bytes:
    """Encode a record to bytes, header included."""
    kind = kind_of(record)
    try:
        payload = _ENCODERS[kind](record)
    except (struct.error, ArithmeticError, AttributeError, TypeError, ValueError) as e:
        raise EncodeError(f"Cannot encode {type(record).__name__}: {e}") from e
    header = _HEADER.pack(MAGIC, kind, FORMAT_VERSION, len(payload), zlib.crc32(payload))
    return header + payload


def _encode_game_state(state: GameState) -> bytes:
    if len(state.player_positions) != NB_PLAYERS:
        raise ValueError(f"expected {NB_PLAYERS} player positions")
    parts = [_U8.pack(GamePhase(state.phase)), _U8.pack(len(state.player_positions))]
    for pos in state.player_positions:
        parts.append(_POSITION.pack(float(pos.x), float(pos.y)))
    parts.append(_U32.pack(len(state.collectibles)))
    for item_id in state.collectibles:
        raw = item_id.encode("utf-8")
        parts.append(_U16.pack(len(raw)))
        parts.append(raw)
    parts.append(_U32.pack(len(state.switches)))
    parts.extend(_U8.pack(_bool_byte(s)) for s in state.switches)
    parts.append(_U8.pack(_bool_byte(state.has_been_loaded)))
    return b"".join(parts)


def _encode_global_settings(settings: GlobalSettings) -> bytes:
    return _GLOBAL_SETTINGS.pack(
        Language(settings.language), AutosaveMode(settings.autosave), settings.autosave_interval
    )


def _encode_player_settings(settings: PlayerSettings) -> bytes:
    return _PLAYER_SETTINGS.pack(_bool_byte(settings.hud_visible), settings.volume)


def _bool_byte(value: Any) -> int:
    if not isinstance(value, bool):
        raise TypeError(f"expected bool, got {value!r}")
    return 1 if value else 0


_ENCODERS: Dict[RecordKind, Callable[[Any], bytes]] = {
    RecordKind.GAME_STATE: _encode_game_state,
    RecordKind.GLOBAL_SETTINGS: _encode_global_settings,
    RecordKind.PLAYER_SETTINGS: _encode_player_settings,
}


# --------------------------------------------------------------------- decode


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._data = data
        self._offset = 0

    def unpack(self, fmt: struct.Struct) -> tuple:
        end = self._offset + fmt.size
        if end > len(self._data):
            raise FormatError("Truncated payload")
        values = fmt.unpack_from(self._data, self._offset)
        self._offset = end
        return values

    def take(self, size: int) -> bytes:
        end = self._offset + size
        if end > len(self._data):
            raise FormatError("Truncated payload")
        chunk = self._data[self._offset:end]
        self._offset = end
        return chunk

    def finish(self) -> None:
        if self._offset != len(self._data):
            raise FormatError(f"{len(self._data) - self._offset} unexpected trailing bytes")


def decode(data: bytes, expected: Union[RecordKind, Type[Record]]) -> Record:
    """Decode ``data`` into a new record of the ``expected`` kind.

    Raises FormatError when the stream is not of that kind/version or is
    malformed, and CorruptionError when it is well-formed but holds values the
    record cannot take.
    """
    if not isinstance(expected, RecordKind):
        try:
            expected = _KIND_BY_TYPE[expected]
        except (KeyError, TypeError):
            raise TypeError(f"Not a record kind or record type: {expected!r}") from None
    data = bytes(data)
    if len(data) < _HEADER.size:
        raise FormatError("Stream too short for header")
    magic, kind, version, length, crc = _HEADER.unpack_from(data, 0)
    if magic != MAGIC:
        raise FormatError("Not a save stream (bad magic)")
    if kind != expected:
        raise FormatError(f"Expected record kind {expected.name}, found {kind}")
    if version != FORMAT_VERSION:
        raise FormatError(f"Unsupported format version {version} (expected {FORMAT_VERSION})")
    payload = data[_HEADER.size:]
    if len(payload) != length:
        raise FormatError(f"Payload length {len(payload)} does not match header ({length})")
    if zlib.crc32(payload) != crc:
        raise CorruptionError("Payload checksum mismatch")

    reader = _Reader(payload)
    try:
        record = _DECODERS[expected](reader)
    except RecordValidationError as e:
        raise CorruptionError(str(e)) from e
    reader.finish()
    return record


def _enum(enum_type: Type[IntEnum], raw: int) -> Any:
    try:
        return enum_type(raw)
    except ValueError:
        raise CorruptionError(f"Invalid {enum_type.__name__} value {raw}") from None


def _bool(raw: int) -> bool:
    if raw not in (0, 1):
        raise CorruptionError(f"Invalid boolean byte {raw}")
    return raw == 1


def _decode_game_state(reader: _Reader) -> GameState:
    (phase,) = reader.unpack(_U8)
    (n_players,) = reader.unpack(_U8)
    if n_players != NB_PLAYERS:
        raise CorruptionError(f"Expected {NB_PLAYERS} player positions, found {n_players}")
    positions = [Position(*reader.unpack(_POSITION)) for _ in range(n_players)]
    (n_collectibles,) = reader.unpack(_U32)
    collectibles = []
    for _ in range(n_collectibles):
        (size,) = reader.unpack(_U16)
        try:
            collectibles.append(reader.take(size).decode("utf-8"))
        except UnicodeDecodeError as e:
            raise CorruptionError(f"Invalid collectible id: {e}") from e
    (n_switches,) = reader.unpack(_U32)
    switches = [_bool(reader.unpack(_U8)[0]) for _ in range(n_switches)]
    (loaded,) = reader.unpack(_U8)
    return GameState(
        player_positions=positions,
        phase=_enum(GamePhase, phase),
        collectibles=collectibles,
        switches=switches,
        has_been_loaded=_bool(loaded),
    )


def _decode_global_settings(reader: _Reader) -> GlobalSettings:
    language, autosave, interval = reader.unpack(_GLOBAL_SETTINGS)
    settings = GlobalSettings(
        language=_enum(Language, language),
        autosave=_enum(AutosaveMode, autosave),
    )
    if settings.autosave_interval != interval:
        raise CorruptionError(
            f"Autosave interval {interval}s does not match mode {settings.autosave.name}"
        )
    return settings


def _decode_player_settings(reader: _Reader) -> PlayerSettings:
    hud, volume = reader.unpack(_PLAYER_SETTINGS)
    return PlayerSettings(hud_visible=_bool(hud), volume=volume)


_DECODERS: Dict[RecordKind, Callable[[_Reader], Any]] = {
    RecordKind.GAME_STATE: _decode_game_state,
    RecordKind.GLOBAL_SETTINGS: _decode_global_settings,
    RecordKind.PLAYER_SETTINGS: _decode_player_settings,
}
