"""klondike_gym/scoring.py

Ease score for a solved deal (**higher = easier**):

    baseline
      − per_move         × total solution moves
      + early_foundation × foundation moves among the first `early_window`
      + flip             × flips in the whole solution
      + visible_ace      × Aces on top of a column in the initial deal
      − recycle          × stock recycles in the solution

The weights are empirically tuned; `DifficultyWeights` keeps the stock
values as defaults so existing scores stay comparable, and lets callers
experiment with their own.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from klondike_gym.board import Board
from klondike_gym.cards import Rank
from klondike_gym.constants import FOUNDATION_MOVES, MoveType
from klondike_gym.moves import Move


@dataclass(frozen=True)
class DifficultyWeights:
    baseline: int = 300
    per_move: int = 1
    early_foundation: int = 6
    flip: int = 2
    visible_ace: int = 8
    recycle: int = 12
    early_window: int = 30


DEFAULT_WEIGHTS = DifficultyWeights()


@dataclass(frozen=True)
class SolutionStats:
    total_moves: int
    early_foundation: int
    flips: int
    recycles: int
    visible_aces: int


def solution_stats(initial: Board, moves: Sequence[Move], early_window: int = 30) -> SolutionStats:
    visible_aces = 0
    for col in initial.tableau:
        if col and col[-1].rank == Rank.ACE:
            visible_aces += 1
    return SolutionStats(
        total_moves=len(moves),
        early_foundation=sum(1 for m in moves[:early_window] if m.type in FOUNDATION_MOVES),
        flips=sum(1 for m in moves if m.type == MoveType.FLIP),
        recycles=sum(1 for m in moves if m.type == MoveType.RECYCLE),
        visible_aces=visible_aces,
    )


def ease_score(initial: Board, moves: Sequence[Move], weights: DifficultyWeights = DEFAULT_WEIGHTS) -> int:
    """Score *initial* given its winning line *moves*. Lower means harder."""
    stats = solution_stats(initial, moves, weights.early_window)
    return (
        weights.baseline
        - weights.per_move * stats.total_moves
        + weights.early_foundation * stats.early_foundation
        + weights.flip * stats.flips
        + weights.visible_ace * stats.visible_aces
        - weights.recycle * stats.recycles
    )


__all__ = [
    "DifficultyWeights",
    "DEFAULT_WEIGHTS",
    "SolutionStats",
    "solution_stats",
    "ease_score",
]
