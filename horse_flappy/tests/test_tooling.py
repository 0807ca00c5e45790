# horse_flappy/tests/test_tooling.py
"""
Rollout/replay tooling: a saved flap trace replays to the same outcome.

Usage (from repo root):
  python -m horse_flappy.tests.test_tooling
"""

from __future__ import annotations
import argparse
import os
import sys
import tempfile
from pathlib import Path

import numpy as np

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

from experiments.replay import read_meta, replay
from experiments.sanity_rollout import RunResult, play, save_trace


def test_trace_replays_to_same_outcome():
    for policy in ("random", "heuristic"):
        res, actions = play(policy, seed=101, frame_skip=4, steps_limit=400)
        assert isinstance(res, RunResult)
        assert res.decisions == len(actions) and res.flaps == sum(actions)
        with tempfile.TemporaryDirectory() as tmp:
            save_trace(Path(tmp), policy, 101, 4, actions)
            path = Path(tmp) / "traces" / policy / "101_actions.npy"
            meta = read_meta(path)
            assert meta == {"seed": "101", "frame_skip": "4", "policy": policy}
            stored = np.load(path)
            assert stored.tolist() == actions
            score, cause = replay(stored, int(meta["seed"]), int(meta["frame_skip"]))
        assert score == res.score, policy
        if res.end in ("ceiling", "ground", "fence"):
            assert cause == res.end, policy


def test_random_runs_end_in_a_death_cause():
    ends = {play("random", seed, 4, 2000)[0].end for seed in (101, 102, 103)}
    assert ends <= {"ceiling", "ground", "fence"}


def test_read_meta_without_sidecar():
    with tempfile.TemporaryDirectory() as tmp:
        assert read_meta(Path(tmp) / "7_actions.npy") == {}


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
    print("🎉 All tooling tests passed")


if __name__ == "__main__":
    main()
