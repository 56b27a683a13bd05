from gymnasium.envs.registration import register

from .board import Board, board_from_columns, deal
from .cards import Card, Rank, Suit, is_red, rank_value
from .constants import Difficulty, DrawMode, MoveType
from .dealer import DealResult, generate_deal
from .moves import Move, apply_move, legal_moves
from .replay import AutoPlayer, auto_win, replay
from .rules import can_place_on_foundation, can_place_on_tableau, is_valid_movable_stack
from .solver import SolveResult, solve

register(
    id="klondike-gym/Klondike-v0",
    entry_point="klondike_gym.env:KlondikeEnv",
)


def make(id: str, **kwargs):
    if id == "Klondike-v0":
        from .env import KlondikeEnv
        return KlondikeEnv(**kwargs)
    raise ValueError(f"Unknown id {id}")
