# generate_deals.py
import argparse
import logging
import time

from klondike_gym.constants import Difficulty, TRIES_BY_DIFFICULTY
from klondike_gym.dealer import collect_candidates, generate_deal, scores_by_tier
from klondike_gym.rng import DeterministicRNG


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument('--draw_mode', type=int, choices=[1, 3], default=1)
    parser.add_argument('--difficulty', type=str, choices=[d.value for d in Difficulty], default='easy')
    parser.add_argument('--seed', type=int, default=None)
    parser.add_argument('--num_deals', type=int, default=1)
    parser.add_argument('--survey', action='store_true',
                        help="Score one candidate pool and show what every tier would pick")
    parser.add_argument('--show_solution', action='store_true')
    parser.add_argument('--verbose', action='store_true')
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    rng = DeterministicRNG(args.seed)
    print(f"Master seed: {rng.master_seed}")

    if args.survey:
        tries = TRIES_BY_DIFFICULTY[Difficulty(args.difficulty)]
        start = time.time()
        candidates = collect_candidates(args.draw_mode, tries, rng)
        print(f"{len(candidates)}/{tries} candidates solvable in {time.time() - start:.2f}s")
        for difficulty, score in scores_by_tier(candidates).items():
            print(f"  {difficulty.value:8} → score {score}")
        return

    for i in range(args.num_deals):
        start = time.time()
        result = generate_deal(args.draw_mode, args.difficulty, rng=rng)
        elapsed = time.time() - start
        if result is None:
            print(f"Deal {i + 1}: no solvable deal found ({elapsed:.2f}s)")
            continue

        print(f"\nDeal {i + 1} ({elapsed:.2f}s) – score {result.score}, "
              f"{len(result.solution_moves)} solver moves, seed {result.seed}"
              + (" [fallback]" if result.fallback else ""))
        print(result.deal)
        if args.show_solution:
            print(", ".join(str(m) for m in result.solution_moves))


if __name__ == "__main__":
    main()
