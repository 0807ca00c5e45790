# horse_flappy/game/engine.py
"""
Per-frame simulation: spawn timer, fence scrolling, horse integration,
bounds, scoring and collisions.

The engine owns the physical and score fields of a SimulationState and
nothing else; the game mode belongs to the Session.
"""
from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Optional

from .config import (
    WIDTH, HEIGHT, GROUND_H, HORSE_X_FRAC, MAX_DT, FENCE_EXPIRE_X
)
from .fences import Fence, FenceGen, speed_for_score, spawn_interval_for_score
from .horse import Horse


def clamp_dt(dt: float) -> float:
    """Bound one integration step to [0, MAX_DT] whatever the wall clock did."""
    if dt < 0.0:
        return 0.0
    if dt > MAX_DT:
        return MAX_DT
    return dt


def horse_x_for_width(field_w: float) -> float:
    return float(round(field_w * HORSE_X_FRAC))


@dataclass
class SimulationState:
    field_w: int = WIDTH
    field_h: int = HEIGHT
    horse: Optional[Horse] = None      # built from the field size when omitted
    fences: Deque[Fence] = field(default_factory=deque)
    spawn_t: float = 0.0
    score: int = 0
    best: int = 0
    running: bool = False

    def __post_init__(self):
        if self.horse is None:
            self.horse = Horse(x=horse_x_for_width(self.field_w), y=self.field_h / 2)

    @property
    def ground_y(self) -> float:
        return self.field_h - GROUND_H


@dataclass
class StepResult:
    dt: float = 0.0
    scored: int = 0
    new_best: bool = False
    collided: bool = False
    cause: Optional[str] = None   # "ceiling" | "ground" | "fence" | None


class Engine:
    """
    Advances a SimulationState one frame at a time.

    `store` (optional) only needs `save_best(int)`; it is called whenever
    the session score climbs past the best score.
    """
    def __init__(self, fence_gen: Optional[FenceGen] = None, store=None):
        self.fence_gen = fence_gen if fence_gen is not None else FenceGen()
        self.store = store

    def reset(self, state: SimulationState):
        state.horse.place(horse_x_for_width(state.field_w), state.field_h / 2)
        state.fences.clear()
        state.spawn_t = 0.0
        state.score = 0
        state.running = True

    def impulse(self, state: SimulationState):
        if state.running:
            state.horse.flap(state.score)

    def update(self, state: SimulationState, dt: float) -> StepResult:
        if not state.running:
            return StepResult()

        dt = clamp_dt(dt)
        res = StepResult(dt=dt)

        # 1) Spawn
        state.spawn_t += dt
        if state.spawn_t >= spawn_interval_for_score(state.score):
            state.spawn_t = 0.0
            state.fences.append(
                self.fence_gen.spawn(state.score, state.field_w, state.field_h))

        # 2) Scroll fences
        dx = speed_for_score(state.score) * dt
        for fence in state.fences:
            fence.x -= dx

        # 3) Horse
        horse = state.horse
        horse.update_physics(dt)

        # 4) Bounds (clamping is cosmetic, the hit stands)
        if horse.y <= 0.0:
            horse.y = 0.0
            horse.vy = 0.0
            res.collided, res.cause = True, "ceiling"
        elif horse.bottom >= state.ground_y:
            horse.y = state.ground_y - horse.h
            res.collided, res.cause = True, "ground"

        # 5) Scoring + fence collisions, one pass over this frame's fences.
        #    Fences cleared on a bounds-hit frame still score; the bounds cause wins.
        for fence in state.fences:
            if not fence.passed and fence.right < horse.x:
                fence.passed = True
                state.score += 1
                res.scored += 1
                if state.score > state.best:
                    state.best = state.score
                    res.new_best = True
                    if self.store is not None:
                        self.store.save_best(state.best)
            if hits_fence(horse, fence):
                if not res.collided:
                    res.collided, res.cause = True, "fence"
                break

        # 6) Expire from the front only after the pass
        while state.fences and state.fences[0].right < FENCE_EXPIRE_X:
            state.fences.popleft()

        if res.collided:
            state.running = False
        return res


def overlaps_x(horse: Horse, fence: Fence) -> bool:
    return horse.x + horse.w > fence.x and horse.x < fence.right


def hits_fence(horse: Horse, fence: Fence) -> bool:
    """True when the horse overlaps the fence horizontally and pokes out of the gap."""
    if not overlaps_x(horse, fence):
        return False
    return horse.y < fence.gap_top or horse.bottom > fence.gap_bottom
