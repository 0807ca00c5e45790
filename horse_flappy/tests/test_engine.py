# horse_flappy/tests/test_engine.py
"""
Engine tests: integration, bounds, scoring, fence collisions, expiry.

Usage (from repo root):
  python -m pytest horse_flappy/tests
  python -m horse_flappy.tests.test_engine
"""

from __future__ import annotations
import argparse
import math
import sys

from horse_flappy.game.config import GRAVITY, MAX_DT, HEIGHT, GROUND_H, HORSE_H
from horse_flappy.game.engine import (
    Engine, SimulationState, clamp_dt, hits_fence, horse_x_for_width
)
from horse_flappy.game.fences import Fence, FenceGen
from horse_flappy.game.horse import Horse, flap_impulse
from horse_flappy.game.storage import MemoryStore
from horse_flappy.tests.stubs import ScriptedRng


def _fresh(store=None, rng_value: float = 0.5):
    engine = Engine(fence_gen=FenceGen(rng=ScriptedRng(rng_value)), store=store)
    state = SimulationState()
    engine.reset(state)
    return engine, state


def test_clamp_dt_bounds():
    assert clamp_dt(-1.0) == 0.0
    assert clamp_dt(0.0) == 0.0
    assert clamp_dt(0.01) == 0.01
    assert clamp_dt(0.5) == MAX_DT
    assert clamp_dt(1e9) == MAX_DT


def test_update_uses_clamped_dt():
    engine, state = _fresh()
    y0 = state.horse.y
    res = engine.update(state, 10.0)   # tab resumed after ten seconds
    assert res.dt == MAX_DT
    assert state.horse.vy == GRAVITY * MAX_DT
    assert math.isclose(state.horse.y, y0 + GRAVITY * MAX_DT * MAX_DT)
    assert not res.collided


def test_reset_centres_horse():
    engine, state = _fresh()
    state.score = 4
    state.spawn_t = 0.9
    state.fences.append(Fence(x=200.0, gap_y=300.0, gap=150.0))
    state.horse.y, state.horse.vy = 12.0, 99.0
    engine.reset(state)
    assert state.horse.y == HEIGHT / 2
    assert state.horse.vy == 0.0
    assert state.horse.x == horse_x_for_width(state.field_w) == 106.0
    assert len(state.fences) == 0 and state.score == 0 and state.spawn_t == 0.0
    assert state.running


def test_impulse_at_score_zero():
    engine, state = _fresh()
    engine.impulse(state)
    assert state.horse.vy == -(5.5 * 60)


def test_impulse_grows_then_caps():
    assert math.isclose(flap_impulse(10), -(330.0 + 12.0))
    assert flap_impulse(1000) == -480.0
    assert flap_impulse(10_000) == flap_impulse(1000)


def test_ceiling_hit_clamps_and_stops():
    engine, state = _fresh()
    state.horse.y, state.horse.vy = 1.0, -300.0
    res = engine.update(state, 1 / 60)
    assert res.collided and res.cause == "ceiling"
    assert state.horse.y == 0.0 and state.horse.vy == 0.0
    assert not state.running


def test_ground_hit_clamps_onto_ground():
    engine, state = _fresh()
    ground = HEIGHT - GROUND_H
    state.horse.y, state.horse.vy = ground - HORSE_H - 1.0, 300.0
    res = engine.update(state, 1 / 60)
    assert res.collided and res.cause == "ground"
    assert state.horse.y == ground - HORSE_H
    assert not state.running


def test_ceiling_edge_counts_as_hit():
    engine, state = _fresh()
    state.horse.y, state.horse.vy = 0.0, 0.0
    res = engine.update(state, 0.0)      # zero step leaves y exactly on the edge
    assert res.collided and res.cause == "ceiling"


def test_ground_edge_counts_as_hit():
    engine, state = _fresh()
    state.horse.y, state.horse.vy = HEIGHT - GROUND_H - HORSE_H, 0.0
    assert state.horse.bottom == state.ground_y
    res = engine.update(state, 0.0)
    assert res.collided and res.cause == "ground"
    assert state.horse.y == HEIGHT - GROUND_H - HORSE_H


def test_just_inside_bounds_is_safe():
    for y in (0.5, HEIGHT - GROUND_H - HORSE_H - 0.5):
        engine, state = _fresh()
        state.horse.y, state.horse.vy = y, 0.0
        res = engine.update(state, 0.0)
        assert not res.collided, y
        assert state.running


def test_ground_hit_frame_still_scores_cleared_fence():
    store = MemoryStore()
    engine, state = _fresh(store=store)
    ground = HEIGHT - GROUND_H
    state.horse.y, state.horse.vy = ground - HORSE_H - 1.0, 300.0
    state.fences.append(Fence(x=state.horse.x - 80, gap_y=ground - 60.0, gap=170.0))
    res = engine.update(state, 1 / 60)
    assert res.collided and res.cause == "ground"
    assert res.scored == 1 and res.new_best
    assert state.score == 1 and state.best == 1
    assert store.best == 1 and store.saves == 1
    assert not state.running


def test_ceiling_hit_frame_still_scores_cleared_fence():
    engine, state = _fresh()
    state.horse.y, state.horse.vy = 1.0, -300.0
    state.fences.append(Fence(x=state.horse.x - 80, gap_y=100.0, gap=170.0))
    res = engine.update(state, 1 / 60)
    assert res.cause == "ceiling"
    assert res.scored == 1 and state.score == 1


def test_state_builds_horse_from_field():
    state = SimulationState(field_w=500, field_h=800)
    assert state.horse.x == horse_x_for_width(500) == 110.0
    assert state.horse.y == 400.0 and state.horse.vy == 0.0
    assert SimulationState().horse.x == 106.0


def test_no_update_after_collision():
    engine, state = _fresh()
    state.horse.y, state.horse.vy = 1.0, -300.0
    engine.update(state, 1 / 60)
    snapshot = (state.horse.y, state.horse.vy, state.spawn_t, state.score)
    res = engine.update(state, 1 / 60)
    assert not res.collided and res.dt == 0.0
    assert (state.horse.y, state.horse.vy, state.spawn_t, state.score) == snapshot
    engine.impulse(state)
    assert state.horse.vy == 0.0


def test_scoring_once_per_fence():
    store = MemoryStore()
    engine, state = _fresh(store=store)
    hx = state.horse.x
    # already behind the horse, gap around it
    state.fences.append(Fence(x=hx - 70 - 5, gap_y=state.horse.y + 15, gap=170.0))
    res = engine.update(state, 0.01)
    assert res.scored == 1 and res.new_best
    assert state.score == 1 and state.best == 1 and store.best == 1
    res = engine.update(state, 0.01)
    assert res.scored == 0
    assert state.score == 1 and store.saves == 1


def test_no_save_below_best():
    store = MemoryStore(best=5)
    engine, state = _fresh(store=store)
    state.best = 5
    state.fences.append(Fence(x=state.horse.x - 80, gap_y=state.horse.y + 15, gap=170.0))
    res = engine.update(state, 0.01)
    assert res.scored == 1 and not res.new_best
    assert state.best == 5 and store.saves == 0


def test_expired_fence_scored_before_removal():
    engine, state = _fresh()
    state.fences.append(Fence(x=-95.0, gap_y=300.0, gap=150.0))   # right edge at -25
    res = engine.update(state, 0.01)
    assert res.scored == 1
    assert len(state.fences) == 0


def test_fence_collision_outside_gap():
    engine, state = _fresh()
    state.horse.y = 300.0
    state.fences.append(Fence(x=state.horse.x, gap_y=150.0, gap=120.0))
    res = engine.update(state, 0.01)
    assert res.collided and res.cause == "fence"
    assert not state.running


def test_gap_band_symmetry():
    fence = Fence(x=100.0, gap_y=315.0, gap=170.0)   # gap 230..400
    inside = [float(y) for y in range(230, 400 - HORSE_H + 1)]
    above = [float(y) for y in range(150, 230)]
    below = [float(y) for y in range(400 - HORSE_H + 1, 460)]
    for y in inside:
        assert not hits_fence(Horse(x=106.0, y=y), fence), y
    for y in above + below:
        assert hits_fence(Horse(x=106.0, y=y), fence), y
    # no horizontal overlap, never a hit
    assert not hits_fence(Horse(x=106.0, y=0.0), Fence(x=146.0, gap_y=315.0, gap=170.0))
    assert not hits_fence(Horse(x=106.0, y=0.0), Fence(x=36.0, gap_y=315.0, gap=170.0))


def test_first_spawn_after_interval():
    engine, state = _fresh()
    for i in range(40):
        state.horse.y, state.horse.vy = 300.0, 0.0
        engine.update(state, MAX_DT)
        if i < 38:
            assert len(state.fences) == 0
    assert len(state.fences) == 1
    assert math.isclose(state.fences[0].x, state.field_w + 30 - 140.0 * MAX_DT)


def test_long_run_invariants():
    # Scripted rng at 0.5 keeps every gap centred at the same y
    engine, state = _fresh(rng_value=0.5)
    lo, hi = 40, HEIGHT - GROUND_H - 40
    prev_score = 0
    passed_seen = 0
    for _ in range(3000):
        state.horse.y, state.horse.vy = 332.0 - HORSE_H / 2, 0.0
        res = engine.update(state, MAX_DT)
        assert not res.collided
        assert 0.0 <= res.dt <= MAX_DT
        assert res.scored in (0, 1)
        assert state.score == prev_score + res.scored
        prev_score = state.score
        passed_seen += res.scored
        xs = [f.x for f in state.fences]
        assert xs == sorted(xs)
        for f in state.fences:
            assert 120.0 <= f.gap <= 190.0
            assert lo <= f.gap_top and f.gap_bottom <= hi
    assert state.score == passed_seen > 10
    assert state.best == state.score


def main():
    ap = argparse.ArgumentParser()
    ap.parse_args()
    tests = [v for k, v in sorted(globals().items()) if k.startswith("test_") and callable(v)]
    try:
        for t in tests:
            t()
            print(f"✓ {t.__name__}")
    except AssertionError as e:
        print(f"✗ Test failed: {e}", file=sys.stderr)
        sys.exit(1)
    print("🎉 All engine tests passed")


if __name__ == "__main__":
    main()
