from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Tuple

from ..persistence.models import DEFAULT_VOLUME, PlayerId, validate_volume

if TYPE_CHECKING:
    from ..persistence.manager import SaveLoadManager

logger = logging.getLogger(__name__)

DEFAULT_MUSIC_BASE = 0.25
DEFAULT_SFX_BASE = 0.75


@dataclass(frozen=True)
class VolumeMix:
    """Output levels derived from both players' volume settings.

    Attributes:
        music_volume: Background music volume.
        music_pan: Stereo pan of the music, -1 (player 1 side) to 1 (player 2 side).
        sfx_volumes: Sound effect volume per player, indexed by PlayerId.
    """

    music_volume: float
    music_pan: float
    sfx_volumes: Tuple[float, float]

    def sfx_volume(self, player_id: PlayerId) -> float:
        return self.sfx_volumes[PlayerId.coerce(player_id)]


def compute_mix(
    volume_p1: int,
    volume_p2: int,
    music_base: float = DEFAULT_MUSIC_BASE,
    sfx_base: float = DEFAULT_SFX_BASE,
) -> VolumeMix:
    """Turn the two 0..10 volume settings into music and per-player SFX levels.

    Both players at the default volume (5) give exactly ``music_base`` and
    ``sfx_base``. The music is panned towards the louder player and its level
    moves with the sum of both settings; each player's SFX level moves with
    their own setting only.

    Example: settings 2 and 6 give music 0.2, SFX 0.3 and 0.775.
    """
    volumes = (validate_volume(volume_p1), validate_volume(volume_p2))

    fraction = (1 - music_base) / 10 if music_base > 0.5 else music_base / 10
    music_pan = (volumes[PlayerId.PLAYER2] - volumes[PlayerId.PLAYER1]) / 10
    music_volume = music_base + (
        volumes[PlayerId.PLAYER1] - DEFAULT_VOLUME + volumes[PlayerId.PLAYER2] - DEFAULT_VOLUME
    ) * fraction

    sfx = []
    for volume in volumes:
        if volume > DEFAULT_VOLUME:
            fraction = (1 - sfx_base) / 10
        else:
            fraction = sfx_base / DEFAULT_VOLUME
        sfx.append(sfx_base + (volume - DEFAULT_VOLUME) * fraction)

    return VolumeMix(music_volume=music_volume, music_pan=music_pan, sfx_volumes=(sfx[0], sfx[1]))


def mix_for(manager: "SaveLoadManager", **bases: float) -> VolumeMix:
    """Compute the mix from the manager's current player settings."""
    mix = compute_mix(
        manager.player_settings(PlayerId.PLAYER1).volume,
        manager.player_settings(PlayerId.PLAYER2).volume,
        **bases,
    )
    logger.debug("Volume mix updated: %s", mix)
    return mix
