# experiments/replay.py
"""
Replay a flap trace saved by `experiments.sanity_rollout --save-traces`.

The same seed + frame_skip + flap sequence reproduces the run exactly, so the
replayed score and ending can be checked against the rollout's runs.csv.

Usage (from repo root):
  python -m experiments.replay --policy heuristic --seed 105
  python -m experiments.replay --trace experiments/runs/traces/random/112_actions.npy --headless
"""

from __future__ import annotations
import argparse
from pathlib import Path
from typing import Dict, Optional, Tuple

import numpy as np

from horse_flappy.env.flappy_env import FlappyEnv


def read_meta(actions_path: Path) -> Dict[str, str]:
    meta_path = actions_path.with_name(actions_path.name.replace("_actions.npy", "_meta.txt"))
    meta: Dict[str, str] = {}
    if meta_path.exists():
        for line in meta_path.read_text(encoding="utf-8").splitlines():
            if "=" in line:
                k, v = line.split("=", 1)
                meta[k.strip()] = v.strip()
    return meta


def replay(actions: np.ndarray, seed: int, frame_skip: int,
           render_mode: Optional[str] = None) -> Tuple[int, Optional[str]]:
    """Feed the stored flaps back through the env; returns (score, death_cause)."""
    env = FlappyEnv(render_mode=render_mode, frame_skip=frame_skip, time_limit_seconds=None)
    info = {"score": 0, "death_cause": None}
    try:
        env.reset(seed=seed)
        for a in actions:
            _obs, _r, term, _trunc, info = env.step(int(a))
            if term:
                break
    finally:
        env.close()
    return info["score"], info["death_cause"]


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--policy", choices=["random", "heuristic"], default="heuristic")
    ap.add_argument("--seed", type=int, default=None, help="Run seed (required unless --trace)")
    ap.add_argument("--trace", type=str, default=None, help="Explicit *_actions.npy path")
    ap.add_argument("--out-dir", type=str, default="experiments/runs")
    ap.add_argument("--headless", action="store_true", help="No window, just print the outcome")
    args = ap.parse_args()

    if args.trace:
        path = Path(args.trace)
    else:
        if args.seed is None:
            ap.error("--seed is required without --trace")
        path = Path(args.out_dir) / "traces" / args.policy / f"{args.seed}_actions.npy"
    if not path.exists():
        raise FileNotFoundError(f"Trace not found: {path}")

    meta = read_meta(path)
    seed = args.seed if args.seed is not None else int(meta["seed"])
    frame_skip = int(meta.get("frame_skip", 4))
    actions = np.load(path)

    score, cause = replay(actions, seed, frame_skip, None if args.headless else "human")
    print(f"replayed {len(actions)} decisions (seed={seed}, frame_skip={frame_skip}): "
          f"score={score} end={cause or 'alive'}")


if __name__ == "__main__":
    main()
