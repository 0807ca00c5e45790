# /experiments/sanity_rollout.py
"""
Sanity rollouts for FlappyEnv.

Plays a RANDOM flapper and a TINY-HEURISTIC "stay above the gap floor"
policy over fixed seeds, then prints per-policy score stats and how the
runs ended (ceiling / ground / fence / time limit). One CSV row per run
lands in <out-dir>/runs.csv; with --save-traces the flap sequence of each
run is stored for `experiments.replay`.

Usage (from repo root):
  python -m experiments.sanity_rollout
  python -m experiments.sanity_rollout --policies heuristic --seeds 111,222,333
  python -m experiments.sanity_rollout --policies random --steps 300 --save-traces
"""

from __future__ import annotations
import argparse
import csv
from collections import Counter
from dataclasses import dataclass, astuple, fields
from pathlib import Path
from typing import Callable, Dict, List, Tuple

import numpy as np

from horse_flappy.env.flappy_env import FlappyEnv

Policy = Callable[[np.ndarray], int]


# ------------------------ Policies ------------------------

def random_flapper(seed: int, flap_prob: float = 0.15) -> Policy:
    rng = np.random.RandomState(10_000 + seed)
    return lambda _obs: int(rng.random_sample() < flap_prob)


def gap_floor_heuristic(seed: int, margin: float = 0.15) -> Policy:
    """Flap when falling with the horse's top in the lower part of the next gap."""
    def act(obs: np.ndarray) -> int:
        y_norm, vy_norm, gap_bot = obs[0], obs[1], obs[4]
        return int(vy_norm >= 0.0 and y_norm > gap_bot - margin)
    return act


POLICIES: Dict[str, Callable[[int], Policy]] = {
    "random": random_flapper,
    "heuristic": gap_floor_heuristic,
}


# ------------------------ Rollout ------------------------

@dataclass
class RunResult:
    policy: str
    seed: int
    decisions: int
    flaps: int
    score: int
    end: str          # "ceiling" | "ground" | "fence" | "time" | "cap"


def play(policy_name: str, seed: int, frame_skip: int, steps_limit: int) -> Tuple[RunResult, List[int]]:
    env = FlappyEnv(frame_skip=frame_skip)
    policy = POLICIES[policy_name](seed)
    actions: List[int] = []
    end, score = "cap", 0
    try:
        obs, _ = env.reset(seed=seed)
        for _ in range(steps_limit):
            a = policy(obs)
            actions.append(a)
            obs, _r, term, trunc, info = env.step(a)
            score = info["score"]
            if term:
                end = info["death_cause"]
                break
            if trunc:
                end = "time"
                break
    finally:
        env.close()
    return RunResult(policy_name, seed, len(actions), sum(actions), score, end), actions


def save_trace(out_dir: Path, policy_name: str, seed: int, frame_skip: int, actions: List[int]):
    """<seed>_actions.npy plus a key=value sidecar, both read back by experiments.replay."""
    trace_dir = out_dir / "traces" / policy_name
    trace_dir.mkdir(parents=True, exist_ok=True)
    np.save(trace_dir / f"{seed}_actions.npy", np.asarray(actions, dtype=np.int8))
    (trace_dir / f"{seed}_meta.txt").write_text(
        f"seed={seed}\nframe_skip={frame_skip}\npolicy={policy_name}\n", encoding="utf-8")


def summarize(results: List[RunResult]):
    by_policy: Dict[str, List[RunResult]] = {}
    for r in results:
        by_policy.setdefault(r.policy, []).append(r)
    for name, runs in by_policy.items():
        scores = np.array([r.score for r in runs])
        ends = Counter(r.end for r in runs)
        end_txt = "  ".join(f"{k}={v}" for k, v in sorted(ends.items()))
        print(f"[{name:9s}] runs={len(runs)}  score mean={scores.mean():.2f} "
              f"median={np.median(scores):.1f} max={scores.max()}  | {end_txt}")


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--policies", default="both", choices=["random", "heuristic", "both"])
    ap.add_argument("--seeds", default="", help="Comma-separated seeds (default 101..120)")
    ap.add_argument("--frame-skip", type=int, default=4, help="Sim frames per decision")
    ap.add_argument("--steps", type=int, default=10_000, help="Hard cap on decisions per run")
    ap.add_argument("--out-dir", default="experiments/runs")
    ap.add_argument("--save-traces", action="store_true", help="Store flap sequences for replay")
    args = ap.parse_args()

    seeds = [int(s) for s in args.seeds.split(",") if s.strip()] or list(range(101, 121))
    names = list(POLICIES) if args.policies == "both" else [args.policies]
    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    results: List[RunResult] = []
    for name in names:
        for seed in seeds:
            res, actions = play(name, seed, args.frame_skip, args.steps)
            results.append(res)
            if args.save_traces:
                save_trace(out_dir, name, seed, args.frame_skip, actions)
            print(f"  {name} seed={seed} score={res.score} end={res.end} flaps={res.flaps}/{res.decisions}")

    csv_path = out_dir / "runs.csv"
    with csv_path.open("w", newline="") as f:
        w = csv.writer(f)
        w.writerow([fl.name for fl in fields(RunResult)])
        w.writerows(astuple(r) for r in results)

    summarize(results)
    print(f"✓ {len(results)} runs written to {csv_path}")


if __name__ == "__main__":
    main()
