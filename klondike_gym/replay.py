"""Deterministic replay of a recorded move list onto a live board.

`replay()` applies everything at once (validation, tests); `AutoPlayer`
applies contiguous batches so a UI can animate an "auto-win" a few moves
per tick.  Moves are never reordered or skipped.
"""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional, Sequence

from klondike_gym.board import Board
from klondike_gym.constants import MAX_SOLVER_ITERATIONS, REPLAY_BATCH_SIZE
from klondike_gym.moves import Move, apply_move
from klondike_gym.solver import GreedySolver

logger = logging.getLogger(__name__)


def replay(board: Board, moves: Sequence[Move]) -> bool:
    """Apply *moves* to *board* in place.

    Returns ``False`` at the first illegal move (board left as it was just
    before that move), otherwise whether the board ended up won.
    """
    for step, move in enumerate(moves):
        if not apply_move(board, move):
            logger.debug("replay rejected move %d (%s)", step, move)
            return False
    return board.is_won()


class AutoPlayer:
    """Incremental replay of a solver line onto the board it was computed for.

    The board must be state-equivalent to the one the solver analysed; an
    illegal move means it is not, and `tick()` raises `RuntimeError`.
    """

    def __init__(self, board: Board, moves: Sequence[Move], batch_size: int = REPLAY_BATCH_SIZE):
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        self.board = board
        self.moves: List[Move] = list(moves)
        self.batch_size = batch_size
        self.applied = 0

    @property
    def remaining(self) -> int:
        return len(self.moves) - self.applied

    @property
    def done(self) -> bool:
        return self.applied >= len(self.moves)

    def tick(self) -> List[Move]:
        """Apply the next batch (a contiguous prefix of what is left)."""
        if self.done:
            raise RuntimeError("`tick()` called on a finished replay")
        batch = self.moves[self.applied:self.applied + self.batch_size]
        for move in batch:
            if not apply_move(self.board, move):
                raise RuntimeError(
                    f"move {self.applied} ({move}) is illegal on the live board"
                )
            self.applied += 1
        return batch

    def run(self) -> bool:
        while not self.done:
            self.tick()
        return self.board.is_won()

    def __iter__(self) -> Iterator[Board]:
        """Yield a snapshot of the board after every tick."""
        while not self.done:
            self.tick()
            yield self.board.copy()


def auto_win(
    board: Board,
    batch_size: int = REPLAY_BATCH_SIZE,
    max_iterations: int = MAX_SOLVER_ITERATIONS,
) -> Optional[AutoPlayer]:
    """Solve the live *board* and return a player for the winning line.

    ``None`` when the solver cannot finish from here; the player may make a
    few moves and try again.
    """
    result = GreedySolver(max_iterations).solve(board)
    if not result.solved:
        return None
    return AutoPlayer(board, result.moves, batch_size)


__all__ = ["replay", "AutoPlayer", "auto_win"]
