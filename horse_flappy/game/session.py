# horse_flappy/game/session.py
"""
Game state machine: ready -> playing -> paused/gameover -> playing.

The Session is the only writer of `mode`. It gates the Engine, turns frame
timestamps into elapsed time, and fans results out to the HUD and renderer.

Collaborators are duck-typed and optional:
  renderer.render(horse, fences, score, mode)
  hud.set_score_text(int) / hud.set_best_text(int)
  store.load_best() -> int / store.save_best(int)
"""
from __future__ import annotations
from typing import Optional

from .engine import Engine, SimulationState, StepResult
from .fences import FenceGen

READY = "ready"
PLAYING = "playing"
PAUSED = "paused"
GAMEOVER = "gameover"
MODES = (READY, PLAYING, PAUSED, GAMEOVER)


class Session:
    def __init__(self,
                 state: Optional[SimulationState] = None,
                 fence_gen: Optional[FenceGen] = None,
                 store=None,
                 renderer=None,
                 hud=None):
        self.state = state if state is not None else SimulationState()
        self.store = store
        self.renderer = renderer
        self.hud = hud
        self.engine = Engine(fence_gen=fence_gen, store=store)
        self.mode = READY
        self.death_cause: Optional[str] = None
        self._last_ts: Optional[float] = None

        # Best score is read once, at startup
        if store is not None:
            self.state.best = max(self.state.best, int(store.load_best()))
        self._update_hud()

    # -------------------- Input actions --------------------

    def impulse(self):
        """Flap while playing; from ready/gameover the same input (re)starts."""
        if self.mode == PLAYING:
            self.engine.impulse(self.state)
        elif self.mode in (READY, GAMEOVER):
            self._start()

    def restart(self):
        if self.mode in (READY, GAMEOVER):
            self._start()

    def pause_toggle(self):
        if self.mode == PLAYING:
            self.mode = PAUSED
        elif self.mode == PAUSED:
            self.mode = PLAYING
            # re-arm the clock: time spent paused is dropped, not caught up
            self._last_ts = None

    # -------------------- Frame driving --------------------

    def frame(self, ts_ms: float) -> StepResult:
        """One display frame at timestamp `ts_ms` (monotonic milliseconds)."""
        res = StepResult()
        if self.mode == PLAYING:
            if self._last_ts is None:
                self._last_ts = ts_ms
            dt = (ts_ms - self._last_ts) / 1000.0
            self._last_ts = ts_ms
            res = self._advance(dt)
        self._render()
        return res

    def step(self, dt: float) -> StepResult:
        """Same as frame() but with an explicit elapsed time (headless drivers)."""
        res = StepResult()
        if self.mode == PLAYING:
            res = self._advance(dt)
        self._render()
        return res

    # -------------------- Internals --------------------

    def _start(self):
        self.engine.reset(self.state)
        self.death_cause = None
        self._last_ts = None
        self.mode = PLAYING
        self._update_hud()

    def _advance(self, dt: float) -> StepResult:
        res = self.engine.update(self.state, dt)
        if res.scored:
            self._update_hud()
        if res.collided:
            self.death_cause = res.cause
            self.mode = GAMEOVER
        return res

    def _update_hud(self):
        if self.hud is None:
            return
        self.hud.set_score_text(self.state.score)
        self.hud.set_best_text(self.state.best)

    def _render(self):
        if self.renderer is not None:
            self.renderer.render(self.state.horse, tuple(self.state.fences),
                                 self.state.score, self.mode)
