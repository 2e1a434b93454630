import struct
import zlib

import pytest

from saveload.persistence import (
    FORMAT_VERSION,
    MAGIC,
    AutosaveMode,
    CorruptionError,
    EncodeError,
    FormatError,
    GamePhase,
    GameState,
    GlobalSettings,
    Language,
    PlayerSettings,
    Position,
    RecordKind,
    decode,
    encode,
)

HEADER = struct.Struct("<4sBHII")


def frame(kind: int, payload: bytes, *, magic: bytes = MAGIC, version: int = FORMAT_VERSION) -> bytes:
    return HEADER.pack(magic, kind, version, len(payload), zlib.crc32(payload)) + payload


def sample_state() -> GameState:
    return GameState(
        player_positions=[Position(1.5, -2.0), Position(10.25, 3.0)],
        phase=GamePhase.PLAYING,
        collectibles=["gem_01", "clé_rouge", "gem_07"],
        switches=[True, False, True, True],
    )


def test_game_state_round_trip_keeps_every_field():
    state = sample_state()
    decoded = decode(encode(state), GameState)
    assert decoded == state
    assert decoded is not state
    assert decoded.has_been_loaded is False


def test_game_state_round_trip_of_defaults():
    assert decode(encode(GameState()), RecordKind.GAME_STATE) == GameState()


def test_global_settings_round_trip():
    settings = GlobalSettings(language=Language.FRENCH, autosave=AutosaveMode.FIVE_MINUTES)
    decoded = decode(encode(settings), GlobalSettings)
    assert decoded == settings
    assert decoded.autosave_interval == 300


@pytest.mark.parametrize("volume", [0, 5, 10])
@pytest.mark.parametrize("hud", [True, False])
def test_player_settings_round_trip(volume, hud):
    settings = PlayerSettings(hud_visible=hud, volume=volume)
    assert decode(encode(settings), PlayerSettings) == settings


def test_stream_starts_with_magic_kind_and_version():
    data = encode(PlayerSettings())
    magic, kind, version, length, _crc = HEADER.unpack_from(data)
    assert magic == MAGIC
    assert kind == RecordKind.PLAYER_SETTINGS
    assert version == FORMAT_VERSION
    assert length == len(data) - HEADER.size


def test_encoding_is_deterministic():
    assert encode(sample_state()) == encode(sample_state())


def test_kind_mismatch_is_format_error():
    data = encode(GlobalSettings())
    with pytest.raises(FormatError):
        decode(data, PlayerSettings)


def test_foreign_data_is_format_error():
    with pytest.raises(FormatError):
        decode(b"PK\x03\x04 definitely not a save file", GameState)


def test_empty_stream_is_format_error():
    with pytest.raises(FormatError):
        decode(b"", GlobalSettings)


def test_truncated_stream_is_format_error():
    data = encode(sample_state())
    with pytest.raises(FormatError):
        decode(data[:-3], GameState)


def test_unsupported_version_is_format_error():
    data = frame(RecordKind.PLAYER_SETTINGS, bytes([1, 5]), version=FORMAT_VERSION + 1)
    with pytest.raises(FormatError):
        decode(data, PlayerSettings)


def test_trailing_bytes_are_format_error():
    data = frame(RecordKind.PLAYER_SETTINGS, bytes([1, 5, 0]))
    with pytest.raises(FormatError):
        decode(data, PlayerSettings)


def test_payload_shorter_than_fields_is_format_error():
    data = frame(RecordKind.GLOBAL_SETTINGS, bytes([0, 2]))
    with pytest.raises(FormatError):
        decode(data, GlobalSettings)


def test_out_of_range_volume_is_corruption():
    data = frame(RecordKind.PLAYER_SETTINGS, bytes([1, 17]))
    with pytest.raises(CorruptionError):
        decode(data, PlayerSettings)


def test_checksum_mismatch_is_corruption():
    data = bytearray(encode(PlayerSettings(volume=3)))
    data[-1] = 4
    with pytest.raises(CorruptionError):
        decode(bytes(data), PlayerSettings)


def test_interval_inconsistent_with_mode_is_corruption():
    payload = struct.pack("<BBI", Language.ENGLISH, AutosaveMode.TWO_MINUTES, 45)
    with pytest.raises(CorruptionError):
        decode(frame(RecordKind.GLOBAL_SETTINGS, payload), GlobalSettings)


def test_unknown_enum_value_is_corruption():
    payload = struct.pack("<BBI", 99, AutosaveMode.OFF, 0)
    with pytest.raises(CorruptionError):
        decode(frame(RecordKind.GLOBAL_SETTINGS, payload), GlobalSettings)


def test_invalid_boolean_byte_is_corruption():
    with pytest.raises(CorruptionError):
        decode(frame(RecordKind.PLAYER_SETTINGS, bytes([2, 5])), PlayerSettings)


def test_wrong_player_count_is_corruption():
    payload = struct.pack("<BB", GamePhase.TITLE, 1) + struct.pack("<dd", 0.0, 0.0)
    payload += struct.pack("<I", 0) + struct.pack("<I", 0) + bytes([0])
    with pytest.raises(CorruptionError):
        decode(frame(RecordKind.GAME_STATE, payload), GameState)


def test_encode_rejects_unknown_record_type():
    with pytest.raises(EncodeError):
        encode({"volume": 5})


def test_encode_rejects_non_string_collectible():
    state = GameState(collectibles=["ok", 42])
    with pytest.raises(EncodeError):
        encode(state)


def test_encode_rejects_overlong_collectible_id():
    state = GameState(collectibles=["x" * 70000])
    with pytest.raises(EncodeError):
        encode(state)


def test_encode_rejects_position_too_large_for_float():
    state = GameState(player_positions=[Position(10**400, 0.0), Position()])
    with pytest.raises(EncodeError):
        encode(state)


def test_decode_rejects_unknown_expected_type():
    with pytest.raises(TypeError):
        decode(encode(PlayerSettings()), dict)
