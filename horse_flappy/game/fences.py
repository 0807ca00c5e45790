# horse_flappy/game/fences.py
from __future__ import annotations
import random
from dataclasses import dataclass
from typing import Optional
import pygame
from .config import (
    FENCE_W, FENCE_SPAWN_MARGIN, GROUND_H, GAP_TOP_MARGIN, GAP_BOTTOM_MARGIN,
    SPEED_BASE, SPEED_PER_POINT, SPEED_MAX_BONUS,
    SPAWN_BASE_S, SPAWN_PER_POINT_S, SPAWN_MAX_CUT_S,
    GAP_BASE, GAP_PER_POINT, GAP_MIN, GAP_MAX,
)


@dataclass
class Fence:
    """A pair of posts with a passable gap between them."""
    x: float                 # left edge (world scrolls left)
    gap_y: float             # centre of the gap
    gap: float               # gap height
    w: int = FENCE_W
    passed: bool = False

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def gap_top(self) -> float:
        return self.gap_y - self.gap / 2

    @property
    def gap_bottom(self) -> float:
        return self.gap_y + self.gap / 2

    def rects(self, field_h: int):
        """(upper post, lower post) as drawable rects."""
        top = pygame.Rect(int(self.x), 0, self.w, int(self.gap_top))
        bottom_y = int(self.gap_bottom)
        bot = pygame.Rect(int(self.x), bottom_y, self.w, max(0, field_h - GROUND_H - bottom_y))
        return top, bot


# --- Difficulty curves ---

def speed_for_score(score: int) -> float:
    return SPEED_BASE + min(SPEED_MAX_BONUS, score * SPEED_PER_POINT)


def spawn_interval_for_score(score: int) -> float:
    return SPAWN_BASE_S - min(SPAWN_MAX_CUT_S, score * SPAWN_PER_POINT_S)


def gap_for_score(score: int) -> float:
    return max(GAP_MIN, min(GAP_MAX, GAP_BASE - score * GAP_PER_POINT))


class FenceGen:
    """
    Spawns fences just off the right edge with a random, score-scaled gap.

    The random source is injectable: pass `seed` for a private
    random.Random (None picks a fresh seed, exposed as `.seed`), or pass
    any object with a `random()` method as `rng`.
    """
    def __init__(self, seed: Optional[int] = None, rng=None):
        if rng is None:
            if seed is None:
                seed = random.randrange(0, 2**32 - 1)
            rng = random.Random(seed)
        self.seed = seed
        self.rng = rng

    def gap_band(self, field_h: float):
        """Vertical band [lo, hi] the whole gap must stay inside."""
        return GAP_TOP_MARGIN, field_h - GROUND_H - GAP_BOTTOM_MARGIN

    def spawn(self, score: int, field_w: float, field_h: float) -> Fence:
        gap = gap_for_score(score)
        lo, hi = self.gap_band(field_h)
        # highest allowed gap top; a too-short field pins the gap to the top margin
        max_top = max(lo, hi - gap)
        gap_top = lo + self.rng.random() * (max_top - lo)
        return Fence(x=field_w + FENCE_SPAWN_MARGIN, gap_y=gap_top + gap / 2, gap=gap)
