# /experiments/sanity_rollout.py
"""
Sanity rollouts for FlappyEnv:
- Runs RANDOM and/or TINY-HEURISTIC policies over fixed seeds
- Writes an episodes CSV for notebook analysis
- Optionally saves per-episode action sequences for exact replay

Usage examples (from repo root):
  # Both policies over 20 default seeds on Beginner, save traces:
  python -m experiments.sanity_rollout --policies both --save-traces

  # Only heuristic on Expert with custom seeds:
  python -m experiments.sanity_rollout --policies heuristic --level expert --seeds 111,222,333
"""

from __future__ import annotations
import argparse
import csv
from pathlib import Path
from typing import List, Tuple, Optional

import numpy as np

from flappykiro.env.flappy_env import FlappyEnv
from flappykiro.game.config import HEIGHT, ACTOR_H, LEVEL_ORDER


# ------------------------ Policies ------------------------

def random_policy_init(action_seed: int, flap_prob: float = 0.08):
    rng = np.random.RandomState(action_seed)
    def act(_obs: np.ndarray) -> int:
        return int(rng.rand() < flap_prob)
    return act

def tiny_heuristic_policy_init(margin_px: float = 15.0):
    """
    Flap when falling and the ghost's bottom edge is about to drop below
    the next gap's bottom edge (minus a small margin).
    """
    def act(obs: np.ndarray) -> int:
        y_top = float(obs[0]) * (HEIGHT - ACTOR_H)
        bottom = y_top + ACTOR_H
        gap_bottom = float(obs[4]) * HEIGHT
        falling = obs[1] >= 0.0
        return 1 if (falling and bottom > gap_bottom - margin_px) else 0
    return act


# ------------------------ Rollout core ------------------------

def write_episode_row(csv_path: Path, header: List[str], row: List):
    exists = csv_path.exists()
    with csv_path.open("a", newline="") as f:
        w = csv.writer(f)
        if not exists:
            w.writerow(header)
        w.writerow(row)

def run_one_episode(policy_name: str,
                    seed: int,
                    level: str,
                    frame_skip: int,
                    steps_limit: int,
                    save_traces: bool,
                    out_dir: Path) -> Tuple[int, float, int, float, bool, bool, Optional[str]]:
    """
    Returns: (ep_len, ret_sum, score, distance, terminated, truncated, death_cause)
    """
    env = FlappyEnv(level=level, frame_skip=frame_skip)

    if policy_name == "random":
        policy = random_policy_init(10_000 + seed)
    elif policy_name == "heuristic":
        policy = tiny_heuristic_policy_init()
    else:
        raise ValueError(f"Unknown policy {policy_name!r}")

    actions: List[int] = []
    ret_sum = 0.0
    ep_len = 0
    term = trunc = False
    info: dict = {}

    try:
        obs, info = env.reset(seed=seed)
        for _ in range(steps_limit):
            a = policy(obs)
            actions.append(int(a))
            obs, r, term, trunc, info = env.step(a)
            ret_sum += float(r)
            ep_len += 1
            if term or trunc:
                break
    finally:
        env.close()

    if save_traces:
        trace_dir = out_dir / "traces" / policy_name
        trace_dir.mkdir(parents=True, exist_ok=True)
        np.save(trace_dir / f"{level}_{seed}_actions.npy", np.asarray(actions, dtype=np.int8))

    return (ep_len, ret_sum, int(info.get("score", 0)), float(info.get("distance", 0.0)),
            bool(term), bool(trunc), info.get("death_cause"))


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--policies", default="both", choices=["random", "heuristic", "both"])
    ap.add_argument("--level", default="beginner", choices=list(LEVEL_ORDER))
    ap.add_argument("--seeds", type=str, default="",
                    help="Comma-separated seeds. If empty, uses 20 defaults: 101..120")
    ap.add_argument("--frame-skip", type=int, default=1, help="Sim ticks per decision step")
    ap.add_argument("--steps", type=int, default=10_000,
                    help="Hard cap on decision steps (env may truncate earlier)")
    ap.add_argument("--out-dir", type=str, default="experiments/runs",
                    help="Directory to store episodes.csv and traces/")
    ap.add_argument("--save-traces", action="store_true", help="Save action sequences")
    args = ap.parse_args()

    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    if args.seeds.strip():
        seeds = [int(s) for s in args.seeds.split(",") if s.strip()]
    else:
        seeds = list(range(101, 121))

    episodes_csv = out_dir / "episodes.csv"
    header = [
        "policy_name", "level", "seed", "frame_skip",
        "episode_len_decisions", "return_sum", "score", "distance",
        "terminated", "truncated", "death_cause",
    ]
    to_run = ["random", "heuristic"] if args.policies == "both" else [args.policies]

    print(f"Running policies={to_run} on {len(seeds)} seeds (level={args.level}, frame_skip={args.frame_skip})")
    print(f"Writing summaries to {episodes_csv}")

    for policy_name in to_run:
        for seed in seeds:
            ep_len, ret_sum, score, dist, terminated, truncated, cause = run_one_episode(
                policy_name=policy_name,
                seed=seed,
                level=args.level,
                frame_skip=args.frame_skip,
                steps_limit=args.steps,
                save_traces=args.save_traces,
                out_dir=out_dir,
            )
            write_episode_row(episodes_csv, header, [
                policy_name, args.level, seed, args.frame_skip,
                ep_len, f"{ret_sum:.1f}", score, f"{dist:.1f}",
                int(terminated), int(truncated), (cause or ""),
            ])
            print(f"[{policy_name}] seed={seed}  len={ep_len}  score={score}  dist={dist:.1f}  "
                  f"ret={ret_sum:.1f}  term={terminated} trunc={truncated}  cause={cause}")

    print("✓ Sanity rollouts complete")


if __name__ == "__main__":
    main()
