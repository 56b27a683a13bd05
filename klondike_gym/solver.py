"""Greedy Klondike solver.

Strategy per iteration, in strict priority order:

1. **Foundation** – waste top first, then column tops left → right.
2. **Tableau** – move a face-up run between columns (source column
   left → right, source row from the deepest face-up card up, destination
   left → right; empty columns take Kings only), else waste top onto a
   column (destination left → right).
3. **Stock** – draw, or recycle the waste when the stock is empty.

Visited states are remembered by `Board.fingerprint()`; when a state
repeats the solver forces a draw/recycle to break the cycle.  The loop is
capped at `MAX_SOLVER_ITERATIONS`, which is the only timeout.

This is a heuristic, not an exhaustive search: ``solved=False`` means
"try another deal", never "unsolvable".  The scan order is load-bearing –
it decides which deals solve within the cap and which move lists get
recorded – so keep it exactly as is.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Set

from klondike_gym.board import Board
from klondike_gym.constants import MAX_SOLVER_ITERATIONS, NUM_COLUMNS, MoveType
from klondike_gym.moves import Move, apply_move, auto_flip, draw_or_recycle
from klondike_gym.rules import (
    can_place_on_foundation,
    can_place_on_tableau,
    is_valid_movable_stack,
)

logger = logging.getLogger(__name__)


@dataclass
class SolveResult:
    solved: bool
    moves: List[Move] = field(default_factory=list)
    iterations: int = 0

    def __bool__(self) -> bool:
        return self.solved


class GreedySolver:
    """Deterministic greedy search over a private copy of the board."""

    def __init__(self, max_iterations: int = MAX_SOLVER_ITERATIONS):
        self.max_iterations = max_iterations

    def solve(self, board: Board) -> SolveResult:
        state = board.copy()
        seen: Set[tuple] = set()
        path: List[Move] = []

        iterations = 0
        while iterations < self.max_iterations:
            iterations += 1
            if state.is_won():
                logger.debug("solved in %d iterations, %d moves", iterations, len(path))
                return SolveResult(True, path, iterations)

            key = state.fingerprint()
            if key in seen:
                move = draw_or_recycle(state)
                if move is None:
                    break
                path.append(move)
                continue
            seen.add(key)

            if self._to_foundation(state, path):
                continue
            if self._to_tableau(state, path):
                continue
            move = draw_or_recycle(state)
            if move is None:
                break
            path.append(move)

        logger.debug("gave up after %d iterations", iterations)
        return SolveResult(False, [], iterations)

    # ------------------------------------------------------------------
    # Move generators (each applies at most one move)
    # ------------------------------------------------------------------

    @staticmethod
    def _commit(state: Board, path: List[Move], move: Move) -> bool:
        if not apply_move(state, move):
            return False
        path.append(move)
        if move.src is not None and move.type != MoveType.FLIP:
            flip = auto_flip(state, move.src)
            if flip is not None:
                path.append(flip)
        return True

    def _to_foundation(self, state: Board, path: List[Move]) -> bool:
        card = state.waste_top()
        if card is not None and can_place_on_foundation(card, state.found[card.suit]):
            return self._commit(state, path, Move.waste_to_found(card.suit))

        for c in range(NUM_COLUMNS):
            top = state.column_top(c)
            if top is None or not top.face_up:
                continue
            if can_place_on_foundation(top, state.found[top.suit]):
                return self._commit(state, path, Move.tab_to_found(c, top.suit))
        return False

    def _to_tableau(self, state: Board, path: List[Move]) -> bool:
        for c in range(NUM_COLUMNS):
            col = state.tableau[c]
            for i in range(len(col)):
                if not col[i].face_up or not is_valid_movable_stack(col[i:]):
                    continue
                for d in range(NUM_COLUMNS):
                    if d == c:
                        continue
                    if can_place_on_tableau(col[i], state.column_top(d)):
                        return self._commit(state, path, Move.tab_to_tab(c, i, d))

        card = state.waste_top()
        if card is not None:
            for d in range(NUM_COLUMNS):
                target = state.column_top(d)
                if can_place_on_tableau(card, target):
                    move = Move.waste_to_tab_empty(d) if target is None else Move.waste_to_tab(d)
                    return self._commit(state, path, move)
        return False


def solve(board: Board, max_iterations: int = MAX_SOLVER_ITERATIONS) -> SolveResult:
    """Try to find a winning move list for *board*; *board* is never mutated."""
    return GreedySolver(max_iterations).solve(board)


__all__ = ["SolveResult", "GreedySolver", "solve"]
