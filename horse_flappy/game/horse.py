# horse_flappy/game/horse.py
from __future__ import annotations
import pygame
from dataclasses import dataclass
from .config import (
    HORSE_W, HORSE_H, GRAVITY, FLAP_BASE, FLAP_GROWTH, FLAP_CAP
)


def flap_impulse(score: int) -> float:
    """Upward velocity set by one flap: stronger as score rises, capped."""
    return -(FLAP_BASE + min(FLAP_CAP, score * FLAP_GROWTH))


@dataclass
class Horse:
    """
    The player body. x never changes during a run (the world scrolls left),
    y is the TOP edge, vy is positive downwards.
    """
    x: float
    y: float
    vy: float = 0.0
    w: int = HORSE_W
    h: int = HORSE_H

    @property
    def rect(self) -> pygame.Rect:
        return pygame.Rect(int(self.x), int(self.y), self.w, self.h)

    @property
    def bottom(self) -> float:
        return self.y + self.h

    def update_physics(self, dt: float):
        """Explicit Euler: velocity first, then position."""
        self.vy += GRAVITY * dt
        self.y += self.vy * dt

    def flap(self, score: int):
        self.vy = flap_impulse(score)

    def place(self, x: float, y: float):
        self.x = x
        self.y = y
        self.vy = 0.0
