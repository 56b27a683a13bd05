"""Difficulty-aware deal selection.

`generate_deal()` is the entry point a game session calls at round start:

1. Deal `tries` candidates (count depends on the tier).
2. Solve each on a private copy; keep only the solvable ones.
3. Score them with `ease_score()` and pick by tier from the
   hardest-first ordering (`pick_by_difficulty()`).
4. If nothing solved, fall back to the first solvable deal out of
   `fallback_tries` more attempts, or return ``None``.

Total work is bounded by ``(tries + fallback_tries) × MAX_SOLVER_ITERATIONS``.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from klondike_gym.board import Board, deal
from klondike_gym.constants import (
    FALLBACK_TRIES,
    MAX_SOLVER_ITERATIONS,
    PICK_FRACTION,
    TRIES_BY_DIFFICULTY,
    Difficulty,
    DrawMode,
)
from klondike_gym.moves import Move
from klondike_gym.rng import DeterministicRNG
from klondike_gym.scoring import DEFAULT_WEIGHTS, DifficultyWeights, ease_score
from klondike_gym.solver import GreedySolver

logger = logging.getLogger(__name__)


@dataclass
class DealCandidate:
    deal: Board
    moves: List[Move]
    score: int
    seed: Optional[int] = None


@dataclass
class DealResult:
    """A fresh deal plus the winning line the solver found for it."""
    deal: Board
    solution_moves: List[Move] = field(default_factory=list)
    difficulty: Optional[Difficulty] = None
    score: Optional[int] = None
    seed: Optional[int] = None
    # True when the tiered pool was empty and the fallback loop produced it
    fallback: bool = False


def pick_by_difficulty(candidates: List[DealCandidate], difficulty: Difficulty | str) -> Optional[DealCandidate]:
    """Sort *candidates* ascending by score (in place) and index by tier.

    easy → easiest, medium → 80 % of the way from the hard end,
    hard → 30 %, extreme → the single hardest.
    """
    difficulty = Difficulty.coerce(difficulty)
    if not candidates:
        return None
    candidates.sort(key=lambda c: c.score)  # low = hard, high = easy
    index = math.floor(PICK_FRACTION[difficulty] * (len(candidates) - 1))
    return candidates[max(0, min(len(candidates) - 1, index))]


def _candidate(
    draw_mode: DrawMode,
    rng: DeterministicRNG,
    solver: GreedySolver,
) -> tuple[Board, Optional[List[Move]], int]:
    seed = rng.get_int('candidate_sampling', 0, 2**32 - 1)
    board = deal(draw_mode, DeterministicRNG(seed))
    result = solver.solve(board)
    return board, (result.moves if result.solved else None), seed


def collect_candidates(
    draw_mode: DrawMode | int,
    tries: int,
    rng: Optional[DeterministicRNG] = None,
    weights: DifficultyWeights = DEFAULT_WEIGHTS,
    max_iterations: int = MAX_SOLVER_ITERATIONS,
) -> List[DealCandidate]:
    """Deal *tries* boards and return the solvable ones, scored."""
    draw_mode = DrawMode.coerce(draw_mode)
    rng = rng or DeterministicRNG()
    solver = GreedySolver(max_iterations)

    candidates: List[DealCandidate] = []
    for _ in range(tries):
        board, moves, seed = _candidate(draw_mode, rng, solver)
        if moves is None:
            continue
        score = ease_score(board, moves, weights)
        candidates.append(DealCandidate(board, moves, score, seed))
        logger.debug("candidate seed=%d score=%d moves=%d", seed, score, len(moves))
    return candidates


def generate_deal(
    draw_mode: DrawMode | int = DrawMode.ONE,
    difficulty: Difficulty | str = Difficulty.EASY,
    rng: Optional[DeterministicRNG] = None,
    tries: Optional[int] = None,
    fallback_tries: int = FALLBACK_TRIES,
    weights: DifficultyWeights = DEFAULT_WEIGHTS,
    max_iterations: int = MAX_SOLVER_ITERATIONS,
) -> Optional[DealResult]:
    """Return a solvable deal matching *difficulty*, or ``None``.

    ``None`` is an expected outcome: the caller decides whether to deal an
    unverified board instead.
    """
    draw_mode = DrawMode.coerce(draw_mode)
    difficulty = Difficulty.coerce(difficulty)
    rng = rng or DeterministicRNG()
    tries = TRIES_BY_DIFFICULTY[difficulty] if tries is None else tries

    candidates = collect_candidates(draw_mode, tries, rng, weights, max_iterations)
    picked = pick_by_difficulty(candidates, difficulty)
    if picked is not None:
        logger.info(
            "dealt %s (draw %d): score=%d, %d/%d candidates solvable",
            difficulty.value, draw_mode, picked.score, len(candidates), tries,
        )
        return DealResult(picked.deal, picked.moves, difficulty, picked.score, picked.seed)

    logger.warning("no solvable %s deal in %d tries, falling back", difficulty.value, tries)
    solver = GreedySolver(max_iterations)
    for _ in range(fallback_tries):
        board, moves, seed = _candidate(draw_mode, rng, solver)
        if moves is not None:
            score = ease_score(board, moves, weights)
            return DealResult(board, moves, difficulty, score, seed, fallback=True)

    logger.warning("no solvable deal after %d fallback tries", fallback_tries)
    return None


def scores_by_tier(candidates: Sequence[DealCandidate]) -> dict:
    """Score the tier picks over one candidate pool (for reports / tuning)."""
    pool = list(candidates)
    picks = {}
    for difficulty in Difficulty:
        picked = pick_by_difficulty(pool, difficulty)
        picks[difficulty] = None if picked is None else picked.score
    return picks


__all__ = [
    "DealCandidate",
    "DealResult",
    "pick_by_difficulty",
    "collect_candidates",
    "generate_deal",
    "scores_by_tier",
]
