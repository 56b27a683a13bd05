"""Round rewards and the session boundary around the solitaire core.

The wallet ("casino" ledger) and the player profile (XP / coins) are
external collaborators.  They are passed in explicitly – a round never
reaches for a global store – and only ever see three calls:

* ``ledger.spend(entry_fee)`` at round start,
* ``ledger.credit(payout)`` after a win,
* ``progression.add_xp(...)`` / ``progression.add_coins(...)`` at round end.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

from klondike_gym.board import Board, deal
from klondike_gym.constants import MoveType, Difficulty, DrawMode
from klondike_gym.dealer import DealResult, generate_deal
from klondike_gym.moves import Move, apply_move, auto_flip
from klondike_gym.replay import AutoPlayer, auto_win
from klondike_gym.rng import DeterministicRNG

logger = logging.getLogger(__name__)

_TABLEAU_SOURCES = (MoveType.TAB_TO_FOUND, MoveType.TAB_TO_TAB)


class RoundOutcome(str, Enum):
    WIN = "win"
    LOSS = "loss"


class RoundState(Enum):
    IDLE = 0
    PLAYING = 1
    WON = 2
    LOST = 3


@dataclass(frozen=True)
class Reward:
    xp: int
    coins: int


@dataclass(frozen=True)
class RewardTable:
    win: Reward = Reward(xp=40, coins=12)
    loss: Reward = Reward(xp=6, coins=0)


DEFAULT_REWARDS = RewardTable()


def calculate_rewards(outcome: RoundOutcome | str, table: RewardTable = DEFAULT_REWARDS) -> Reward:
    outcome = RoundOutcome(outcome)
    return table.win if outcome is RoundOutcome.WIN else table.loss


class Ledger(Protocol):
    def spend(self, amount: int) -> None: ...
    def credit(self, amount: int) -> None: ...


class Progression(Protocol):
    def add_xp(self, amount: int, reason: str = "") -> None: ...
    def add_coins(self, amount: int) -> None: ...


class SolitaireRound:
    """One paid round of Klondike: entry fee, deal, play, payout."""

    def __init__(
        self,
        ledger: Ledger,
        progression: Progression,
        *,
        draw_mode: DrawMode | int = DrawMode.ONE,
        difficulty: Difficulty | str = Difficulty.EASY,
        entry_fee: int = 0,
        win_payout: int = 0,
        rewards: RewardTable = DEFAULT_REWARDS,
        rng: Optional[DeterministicRNG] = None,
    ):
        self.ledger = ledger
        self.progression = progression
        self.draw_mode = DrawMode.coerce(draw_mode)
        self.difficulty = Difficulty.coerce(difficulty)
        self.entry_fee = entry_fee
        self.win_payout = win_payout
        self.rewards = rewards
        self.rng = rng or DeterministicRNG()

        self.state = RoundState.IDLE
        self.board: Optional[Board] = None
        self.deal_result: Optional[DealResult] = None
        self.moves_played = 0

    @property
    def verified(self) -> bool:
        """Whether the solver confirmed the dealt board is winnable."""
        return self.deal_result is not None

    def start(self) -> Board:
        if self.state is RoundState.PLAYING:
            raise RuntimeError("round already in progress")
        self.ledger.spend(self.entry_fee)

        self.deal_result = generate_deal(self.draw_mode, self.difficulty, rng=self.rng)
        if self.deal_result is None:
            logger.warning("dealing an unverified %s board", self.difficulty.value)
            self.board = deal(self.draw_mode, self.rng)
        else:
            self.board = self.deal_result.deal.copy()
        self.moves_played = 0
        self.state = RoundState.PLAYING
        return self.board

    def play(self, move: Move) -> bool:
        """Apply a player move; reveals exposed cards and settles a win."""
        if self.state is not RoundState.PLAYING:
            return False
        if not apply_move(self.board, move):
            return False
        self.moves_played += 1
        if move.type in _TABLEAU_SOURCES:
            auto_flip(self.board, move.src)
        if self.board.is_won():
            self._finish(RoundOutcome.WIN)
        return True

    def auto_win(self) -> Optional[AutoPlayer]:
        if self.state is not RoundState.PLAYING:
            return None
        return auto_win(self.board)

    def check_win(self) -> bool:
        """Settle the round if the board was won outside `play()` (auto-win)."""
        if self.state is RoundState.PLAYING and self.board.is_won():
            self._finish(RoundOutcome.WIN)
        return self.state is RoundState.WON

    def give_up(self) -> None:
        if self.state is RoundState.PLAYING:
            self._finish(RoundOutcome.LOSS)

    def _finish(self, outcome: RoundOutcome) -> None:
        reward = calculate_rewards(outcome, self.rewards)
        if reward.xp > 0:
            self.progression.add_xp(reward.xp, reason=f"Solitaire:{outcome.value}")
        if reward.coins > 0:
            self.progression.add_coins(reward.coins)
        if outcome is RoundOutcome.WIN and self.win_payout > 0:
            self.ledger.credit(self.win_payout)
        self.state = RoundState.WON if outcome is RoundOutcome.WIN else RoundState.LOST
        logger.info("solitaire round finished: %s after %d moves", outcome.value, self.moves_played)


__all__ = [
    "RoundOutcome",
    "RoundState",
    "Reward",
    "RewardTable",
    "calculate_rewards",
    "Ledger",
    "Progression",
    "SolitaireRound",
]
