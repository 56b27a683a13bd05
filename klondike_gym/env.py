"""
klondike_gym/env.py
===================

Gymnasium environment for **Klondike solitaire** built on the same engine
the deal generator and solver use.

Action
------
A flat `Discrete(ACTION_SPACE_SIZE)` space covering every move shape:

    0-6       flip column c
    7         waste → foundation
    8-14      column c → foundation
    15-945    column src, row index, → column dst   (7 × 19 × 7)
    946-952   waste → column dst (empty columns take Kings)
    953       draw
    954       recycle

`action_mask` marks the legal subset at every step.  Cards exposed by a
move are revealed automatically, as in the interactive game.

Observation
-----------
Dict(
    tableau     : Box(7×19) int8 – -1 empty slot, 0 face-down, 1-52 card id+1
    waste_top   : Discrete(53)   – 0 empty, else card id+1
    stock_size  : Discrete(25)
    waste_size  : Discrete(25)
    foundations : Box(4) int8    – cards per suit (♠ ♥ ♦ ♣)
    action_mask : MultiBinary(955)
)

Reward
------
+1 per card reaching a foundation, +10 for clearing the board, 0 for an
illegal action (the board is left untouched and ``info["illegal"]`` is set).
"""

from __future__ import annotations

from typing import Optional

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from klondike_gym.board import Board, deal
from klondike_gym.cards import Suit
from klondike_gym.constants import (
    CARDS_PER_SUIT,
    DECK_SIZE,
    MAX_COLUMN_HEIGHT,
    NUM_COLUMNS,
    NUM_FOUNDATIONS,
    STOCK_DEAL_SIZE,
    Difficulty,
    DrawMode,
    MoveType,
)
from klondike_gym.dealer import generate_deal
from klondike_gym.moves import Move, apply_move, auto_flip, legal_moves
from klondike_gym.rng import DeterministicRNG

# --------------------------------------------------------------------------- #
# Action-space helpers                                                        #
# --------------------------------------------------------------------------- #

FLIP_OFFSET = 0
WASTE_TO_FOUND_ID = FLIP_OFFSET + NUM_COLUMNS                       # 7
TAB_TO_FOUND_OFFSET = WASTE_TO_FOUND_ID + 1                         # 8
TAB_TO_TAB_OFFSET = TAB_TO_FOUND_OFFSET + NUM_COLUMNS               # 15
NUM_TAB_TO_TAB = NUM_COLUMNS * MAX_COLUMN_HEIGHT * NUM_COLUMNS      # 931
WASTE_TO_TAB_OFFSET = TAB_TO_TAB_OFFSET + NUM_TAB_TO_TAB            # 946
DRAW_ID = WASTE_TO_TAB_OFFSET + NUM_COLUMNS                         # 953
RECYCLE_ID = DRAW_ID + 1                                            # 954

ACTION_SPACE_SIZE = RECYCLE_ID + 1                                  # 955

WIN_BONUS = 10.0


def encode_action(move: Move) -> int:
    """Flat action id for *move*."""
    match move.type:
        case MoveType.FLIP:
            return FLIP_OFFSET + move.src
        case MoveType.WASTE_TO_FOUND:
            return WASTE_TO_FOUND_ID
        case MoveType.TAB_TO_FOUND:
            return TAB_TO_FOUND_OFFSET + move.src
        case MoveType.TAB_TO_TAB:
            return (
                TAB_TO_TAB_OFFSET
                + (move.src * MAX_COLUMN_HEIGHT + move.index) * NUM_COLUMNS
                + move.dst
            )
        case MoveType.WASTE_TO_TAB | MoveType.WASTE_TO_TAB_EMPTY:
            return WASTE_TO_TAB_OFFSET + move.dst
        case MoveType.DRAW:
            return DRAW_ID
        case _:
            return RECYCLE_ID


def decode_action(action_id: int, board: Board) -> Move:
    """Concrete `Move` for *action_id* on *board* (suit/draw size filled in).

    The move may still be illegal; `apply_move` decides that.
    """
    action_id = int(action_id)
    if not 0 <= action_id < ACTION_SPACE_SIZE:
        raise ValueError(f"Action id out of range: {action_id}")

    if action_id < WASTE_TO_FOUND_ID:
        return Move.flip(action_id - FLIP_OFFSET)
    if action_id == WASTE_TO_FOUND_ID:
        card = board.waste_top()
        return Move.waste_to_found(card.suit if card else Suit.SPADES)
    if action_id < TAB_TO_TAB_OFFSET:
        src = action_id - TAB_TO_FOUND_OFFSET
        card = board.column_top(src)
        return Move.tab_to_found(src, card.suit if card else Suit.SPADES)
    if action_id < WASTE_TO_TAB_OFFSET:
        rest, dst = divmod(action_id - TAB_TO_TAB_OFFSET, NUM_COLUMNS)
        src, index = divmod(rest, MAX_COLUMN_HEIGHT)
        return Move.tab_to_tab(src, index, dst)
    if action_id < DRAW_ID:
        dst = action_id - WASTE_TO_TAB_OFFSET
        if board.column_top(dst) is None:
            return Move.waste_to_tab_empty(dst)
        return Move.waste_to_tab(dst)
    if action_id == DRAW_ID:
        return Move.draw(min(int(board.draw_mode), len(board.stock)))
    return Move.recycle()


def card_code(card) -> int:
    """0 for a face-down card, otherwise its 0-51 id shifted by one."""
    return int(card) + 1 if card.face_up else 0


# --------------------------------------------------------------------------- #
# Environment                                                                 #
# --------------------------------------------------------------------------- #


class KlondikeEnv(gym.Env):
    """
    Klondike solitaire, one deal per episode.

    ``reset(options={"draw_mode": 3, "difficulty": "hard"})`` deals through
    the difficulty selector; without a difficulty the deal is a plain
    (possibly unwinnable) shuffle.
    """

    metadata = {"render_modes": ["human", "ansi"]}

    def __init__(
        self,
        *,
        render_mode: str | None = None,
        draw_mode: DrawMode | int = DrawMode.ONE,
        difficulty: Difficulty | str | None = None,
        max_steps: int = 1000,
    ):
        super().__init__()
        self.render_mode = render_mode
        self.draw_mode = DrawMode.coerce(draw_mode)
        self.difficulty = None if difficulty is None else Difficulty.coerce(difficulty)
        self.max_steps = max_steps

        # Static spaces
        self.action_space = spaces.Discrete(ACTION_SPACE_SIZE)
        self.observation_space = spaces.Dict(
            {
                "tableau": spaces.Box(-1, DECK_SIZE, shape=(NUM_COLUMNS, MAX_COLUMN_HEIGHT), dtype=np.int8),
                "waste_top": spaces.Discrete(DECK_SIZE + 1),
                "stock_size": spaces.Discrete(STOCK_DEAL_SIZE + 1),
                "waste_size": spaces.Discrete(STOCK_DEAL_SIZE + 1),
                "foundations": spaces.Box(0, CARDS_PER_SUIT, shape=(NUM_FOUNDATIONS,), dtype=np.int8),
                "action_mask": spaces.MultiBinary(ACTION_SPACE_SIZE),
            }
        )

        # Internal state
        self.board: Board | None = None
        self.solution: list[Move] | None = None
        self.steps: int = 0
        self._terminated: bool = False

    # ------------------------------- Helpers -------------------------------- #

    def _deal(self, draw_mode: DrawMode, difficulty: Optional[Difficulty]) -> Board:
        rng = DeterministicRNG(int(self.np_random.integers(0, 2**32 - 1)))
        self.solution = None
        if difficulty is not None:
            result = generate_deal(draw_mode, difficulty, rng=rng)
            if result is not None:
                self.solution = result.solution_moves
                return result.deal
        return deal(draw_mode, rng)

    def action_mask(self) -> np.ndarray:
        mask = np.zeros(ACTION_SPACE_SIZE, dtype=np.int8)
        for move in legal_moves(self.board):
            mask[encode_action(move)] = 1
        return mask

    def valid_actions(self) -> list[int]:
        return [int(i) for i in np.flatnonzero(self.action_mask())]

    def _get_obs(self) -> dict:
        tableau = np.full((NUM_COLUMNS, MAX_COLUMN_HEIGHT), -1, dtype=np.int8)
        for c, col in enumerate(self.board.tableau):
            for r, card in enumerate(col):
                tableau[c, r] = card_code(card)
        top = self.board.waste_top()
        return {
            "tableau": tableau,
            "waste_top": np.int64(card_code(top) if top else 0),
            "stock_size": np.int64(len(self.board.stock)),
            "waste_size": np.int64(len(self.board.waste)),
            "foundations": np.array([len(self.board.found[s]) for s in Suit], dtype=np.int8),
            "action_mask": self.action_mask(),
        }

    # ---------------------------- Gym interface ----------------------------- #

    def reset(self, *, seed: int | None = None, options=None):
        super().reset(seed=seed)
        options = options or {}
        draw_mode = DrawMode.coerce(options.get("draw_mode", self.draw_mode))
        difficulty = options.get("difficulty", self.difficulty)
        difficulty = None if difficulty is None else Difficulty.coerce(difficulty)

        self.board = self._deal(draw_mode, difficulty)
        self.steps = 0
        self._terminated = False
        return self._get_obs(), {"verified": self.solution is not None}

    def step(self, action: int):
        if self._terminated:
            raise RuntimeError("`step()` called on terminated episode")

        self.steps += 1
        info = {"illegal": False}
        before = self.board.foundation_count()

        move = decode_action(action, self.board)
        if apply_move(self.board, move):
            if move.type in (MoveType.TAB_TO_FOUND, MoveType.TAB_TO_TAB):
                auto_flip(self.board, move.src)
        else:
            info["illegal"] = True

        reward = float(self.board.foundation_count() - before)
        terminated = self.board.is_won()
        if terminated:
            reward += WIN_BONUS
            self._terminated = True
        truncated = not terminated and self.steps >= self.max_steps
        if truncated:
            self._terminated = True

        return self._get_obs(), reward, terminated, truncated, info

    # ------------------------------- Render -------------------------------- #

    def render(self):
        text = str(self.board)
        if self.render_mode == "ansi":
            return text
        if self.render_mode == "human":
            print(text)
