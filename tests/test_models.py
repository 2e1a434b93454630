import pytest

from saveload.persistence import (
    AutosaveMode,
    GamePhase,
    GameState,
    GlobalSettings,
    InvalidPlayerError,
    Language,
    PlayerId,
    PlayerSettings,
    Position,
    RecordValidationError,
)


def test_player_settings_defaults():
    ps = PlayerSettings()
    assert ps.hud_visible is True
    assert ps.volume == 5


@pytest.mark.parametrize("volume", [-1, 11, 17, 5.0, True, "5"])
def test_player_settings_rejects_bad_volume(volume):
    with pytest.raises(RecordValidationError):
        PlayerSettings(volume=volume)


def test_player_settings_assignment_is_validated():
    ps = PlayerSettings(volume=7)
    with pytest.raises(ValueError):
        ps.volume = 11
    assert ps.volume == 7
    with pytest.raises(RecordValidationError):
        ps.hud_visible = 1


def test_autosave_interval_follows_mode():
    gs = GlobalSettings()
    assert gs.language is Language.DEFAULT
    assert gs.autosave is AutosaveMode.TWO_MINUTES
    assert gs.autosave_interval == 120
    gs.autosave = AutosaveMode.OFF
    assert gs.autosave_interval == 0
    with pytest.raises(AttributeError):
        gs.autosave_interval = 30


def test_global_settings_coerces_and_validates_enums():
    gs = GlobalSettings(language=2, autosave=4)
    assert gs.language is Language.FRENCH
    assert gs.autosave_interval == 600
    with pytest.raises(RecordValidationError):
        GlobalSettings(autosave=9)


def test_game_state_defaults():
    state = GameState()
    assert state.player_positions == [Position(), Position()]
    assert state.phase is GamePhase.TITLE
    assert state.collectibles == []
    assert state.switches == []
    assert state.has_been_loaded is False


def test_game_state_requires_two_positions():
    with pytest.raises(RecordValidationError):
        GameState(player_positions=[Position()])


def test_game_state_copy_is_deep():
    state = GameState(collectibles=["a"], switches=[True])
    clone = state.copy()
    clone.collectibles.append("b")
    clone.switches[0] = False
    assert state.collectibles == ["a"]
    assert state.switches == [True]


def test_player_id_coercion():
    assert PlayerId.coerce(0) is PlayerId.PLAYER1
    assert PlayerId.coerce(PlayerId.PLAYER2) is PlayerId.PLAYER2
    assert PlayerId.PLAYER1.other() is PlayerId.PLAYER2
    for bad in (2, -1, True, "1", None):
        with pytest.raises(InvalidPlayerError):
            PlayerId.coerce(bad)
