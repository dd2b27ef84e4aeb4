"""
Tendril - Turn-Based Plant Growth Demo

Plays a full game with a hand-coded allocation policy standing in for the
player, then prints per-turn progress and a summary table.

Run:
  python main.py
  python main.py --turns 40 --seed 7 --policy bushy
  python main.py --compare
"""

import argparse
import logging

import jax.random as jr

from tendril import engine, rollout
from tendril.policies import (
    PolicyFn,
    baseline_policy,
    bushy_policy,
    growth_focused_policy,
    idle_policy,
    make_random_policy,
)


def make_policies(seed: int) -> dict[str, PolicyFn]:
    return {
        "baseline": baseline_policy,
        "growth": growth_focused_policy,
        "bushy": bushy_policy,
        "idle": idle_policy,
        "random": make_random_policy(jr.PRNGKey(seed + 1)),
    }


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play a tendril growth game.")
    parser.add_argument("--turns", type=int, default=25, help="final turn number")
    parser.add_argument("--seed", type=int, default=42, help="random seed")
    parser.add_argument(
        "--policy",
        default="baseline",
        choices=sorted(make_policies(0)),
        help="allocation policy standing in for the player",
    )
    parser.add_argument(
        "--compare", action="store_true", help="compare every policy on one seed"
    )
    parser.add_argument("--verbose", action="store_true", help="log every turn")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    key = jr.PRNGKey(args.seed)
    policies = make_policies(args.seed)

    print("\n" + "=" * 60)
    print("  TENDRIL: Turn-Based Plant Growth")
    print("=" * 60)

    if args.compare:
        results = rollout.compare_policies(policies, args.turns, key)
        print(f"\n{'policy':10s} {'nodes':>8s} {'length':>10s} {'tips':>6s} {'branches':>9s}")
        for name, summary in results.items():
            print(
                f"{name:10s} {summary['TotalNodes']:>8d} "
                f"{summary['TotalLength']:>10.2f} {summary['GrowingTips']:>6d} "
                f"{summary['Branches']:>9d}"
            )
        return

    print(f"\nPlaying {args.turns} turns with the '{args.policy}' policy...")
    trajectory = rollout.run_game(args.turns, key, policy=policies[args.policy])

    for state in trajectory.states:
        if state.turn % 5 == 0:
            s = engine.stats(state)
            print(
                f"  Turn {s.turn}: nodes={s.total_nodes}, "
                f"length={s.total_length:.1f}, tips={s.growing_tip_count}"
            )

    trajectory.print_summary()


if __name__ == "__main__":
    main()
