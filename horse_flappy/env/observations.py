# horse_flappy/env/observations.py
from __future__ import annotations
from typing import Iterable, Optional
import numpy as np

from horse_flappy.game.config import GROUND_H, SPEED_BASE, SPEED_MAX_BONUS
from horse_flappy.game.fences import Fence, speed_for_score
from horse_flappy.game.horse import Horse, flap_impulse

OBS_SIZE = 6
VY_NORM = 1200.0   # ~ one second of free fall

OBS_LOW = np.array([0.0, -1.0, 0.0, 0.0, 0.0, 0.0], dtype=np.float32)
OBS_HIGH = np.array([1.0, 1.0, 1.0, 1.0, 1.0, 1.0], dtype=np.float32)


def _clamp01(x: float) -> float:
    return 0.0 if x < 0.0 else (1.0 if x > 1.0 else x)


def next_fence(horse: Horse, fences: Iterable[Fence]) -> Optional[Fence]:
    """First fence whose right edge is still ahead of the horse's left edge."""
    for f in fences:
        if f.right >= horse.x:
            return f
    return None


def build_observation(horse: Horse, fences: Iterable[Fence], score: int,
                      field_w: float, field_h: float) -> np.ndarray:
    """
    Returns float32 (6,):
      [y_norm, vy_norm, dx_next, gap_top, gap_bottom, speed_norm]
    y/gap values are normalized by the playable height (field minus ground),
    dx by the field width. Without a fence ahead the gap spans the whole
    playable band and dx reads 1.
    """
    play_h = max(1.0, field_h - GROUND_H)
    y_norm = _clamp01(horse.y / max(1.0, play_h - horse.h))
    vy_max = max(VY_NORM, abs(flap_impulse(score)))
    vy_norm = max(-1.0, min(1.0, horse.vy / vy_max))

    f = next_fence(horse, fences)
    if f is None:
        dx, gap_top, gap_bot = 1.0, 0.0, 1.0
    else:
        dx = _clamp01((f.x - (horse.x + horse.w)) / max(1.0, field_w))
        gap_top = _clamp01(f.gap_top / play_h)
        gap_bot = _clamp01(f.gap_bottom / play_h)

    speed_norm = (speed_for_score(score) - SPEED_BASE) / SPEED_MAX_BONUS

    obs = np.array([y_norm, vy_norm, dx, gap_top, gap_bot, _clamp01(speed_norm)], dtype=np.float32)
    return np.clip(obs, OBS_LOW, OBS_HIGH)
