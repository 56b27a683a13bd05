"""Move records and the single place where a move mutates a board.

A `Move` is a pure description; `apply_move()` validates it with the
rules module and applies it in place.  Illegal moves return ``False`` and
leave the board untouched – they are not errors.

`apply_move()` never reveals cards on its own.  Exposing a face-down card
is its own `FLIP` move so that a recorded move list replays exactly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from klondike_gym.board import Board
from klondike_gym.cards import Suit
from klondike_gym.constants import NUM_COLUMNS, MoveType
from klondike_gym.rules import (
    can_place_on_foundation,
    can_place_on_tableau,
    is_valid_movable_stack,
)


@dataclass(frozen=True)
class Move:
    type: MoveType
    src: Optional[int] = None    # source column (FLIP uses it as "the column")
    index: Optional[int] = None  # first row of the moved run (TAB_TO_TAB)
    dst: Optional[int] = None    # destination column
    suit: Optional[Suit] = None  # destination foundation
    count: Optional[int] = None  # cards drawn (DRAW)

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def flip(cls, col: int) -> "Move":
        return cls(MoveType.FLIP, src=col)

    @classmethod
    def waste_to_found(cls, suit: Suit) -> "Move":
        return cls(MoveType.WASTE_TO_FOUND, suit=Suit(suit))

    @classmethod
    def tab_to_found(cls, src: int, suit: Suit) -> "Move":
        return cls(MoveType.TAB_TO_FOUND, src=src, suit=Suit(suit))

    @classmethod
    def tab_to_tab(cls, src: int, index: int, dst: int) -> "Move":
        return cls(MoveType.TAB_TO_TAB, src=src, index=index, dst=dst)

    @classmethod
    def waste_to_tab(cls, dst: int) -> "Move":
        return cls(MoveType.WASTE_TO_TAB, dst=dst)

    @classmethod
    def waste_to_tab_empty(cls, dst: int) -> "Move":
        return cls(MoveType.WASTE_TO_TAB_EMPTY, dst=dst)

    @classmethod
    def recycle(cls) -> "Move":
        return cls(MoveType.RECYCLE)

    @classmethod
    def draw(cls, count: int) -> "Move":
        return cls(MoveType.DRAW, count=count)

    def __str__(self) -> str:
        match self.type:
            case MoveType.FLIP:
                return f"flip C{self.src + 1}"
            case MoveType.WASTE_TO_FOUND:
                return f"waste → {self.suit.symbol()}"
            case MoveType.TAB_TO_FOUND:
                return f"C{self.src + 1} → {self.suit.symbol()}"
            case MoveType.TAB_TO_TAB:
                return f"C{self.src + 1}[{self.index}:] → C{self.dst + 1}"
            case MoveType.WASTE_TO_TAB | MoveType.WASTE_TO_TAB_EMPTY:
                return f"waste → C{self.dst + 1}"
            case MoveType.RECYCLE:
                return "recycle"
            case _:
                return f"draw {self.count}"


def _valid_col(col: Optional[int]) -> bool:
    return col is not None and 0 <= col < NUM_COLUMNS


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------

def apply_move(board: Board, move: Move) -> bool:
    """Apply *move* to *board* in place. Returns ``False`` (no-op) if illegal."""
    match move.type:
        case MoveType.FLIP:
            if not _valid_col(move.src):
                return False
            top = board.column_top(move.src)
            if top is None or top.face_up:
                return False
            top.face_up = True
            return True

        case MoveType.WASTE_TO_FOUND:
            card = board.waste_top()
            if card is None or (move.suit is not None and card.suit != move.suit):
                return False
            pile = board.found[card.suit]
            if not can_place_on_foundation(card, pile):
                return False
            pile.append(board.waste.pop())
            return True

        case MoveType.TAB_TO_FOUND:
            if not _valid_col(move.src):
                return False
            card = board.column_top(move.src)
            if card is None or not card.face_up:
                return False
            if move.suit is not None and card.suit != move.suit:
                return False
            pile = board.found[card.suit]
            if not can_place_on_foundation(card, pile):
                return False
            pile.append(board.tableau[move.src].pop())
            return True

        case MoveType.TAB_TO_TAB:
            if not (_valid_col(move.src) and _valid_col(move.dst)) or move.src == move.dst:
                return False
            src = board.tableau[move.src]
            if move.index is None or not 0 <= move.index < len(src):
                return False
            run = src[move.index:]
            if not is_valid_movable_stack(run):
                return False
            if not can_place_on_tableau(run[0], board.column_top(move.dst)):
                return False
            del src[move.index:]
            board.tableau[move.dst].extend(run)
            return True

        case MoveType.WASTE_TO_TAB | MoveType.WASTE_TO_TAB_EMPTY:
            if not _valid_col(move.dst):
                return False
            card = board.waste_top()
            target = board.column_top(move.dst)
            if (target is None) != (move.type == MoveType.WASTE_TO_TAB_EMPTY):
                return False
            if not can_place_on_tableau(card, target):
                return False
            board.tableau[move.dst].append(board.waste.pop())
            return True

        case MoveType.RECYCLE:
            if board.stock or not board.waste:
                return False
            board.stock = board.waste[::-1]
            for card in board.stock:
                card.face_up = False
            board.waste = []
            return True

        case MoveType.DRAW:
            if not board.stock:
                return False
            n = min(int(board.draw_mode), len(board.stock))
            taken = board.stock[-n:]
            del board.stock[-n:]
            for card in taken:
                card.face_up = True
            board.waste.extend(taken)
            return True

    return False


def auto_flip(board: Board, col: int) -> Optional[Move]:
    """Reveal the top of *col* if it is face-down; return the FLIP applied."""
    move = Move.flip(col)
    return move if apply_move(board, move) else None


def draw_or_recycle(board: Board) -> Optional[Move]:
    """Draw from stock, or recycle the waste when the stock is empty."""
    if board.stock:
        move = Move.draw(min(int(board.draw_mode), len(board.stock)))
    else:
        move = Move.recycle()
    return move if apply_move(board, move) else None


# ---------------------------------------------------------------------------
# Enumeration
# ---------------------------------------------------------------------------

def legal_moves(board: Board) -> List[Move]:
    """Every legal move, in the solver's scan order.

    Foundation moves (waste first, then columns left → right), then
    tableau runs (source column, then row from the bottom up, then
    destination), then waste → tableau, flips, and finally draw/recycle.
    """
    moves: List[Move] = []

    card = board.waste_top()
    if can_place_on_foundation(card, board.found[card.suit] if card else []):
        moves.append(Move.waste_to_found(card.suit))
    for c in range(NUM_COLUMNS):
        top = board.column_top(c)
        if top is not None and top.face_up and can_place_on_foundation(top, board.found[top.suit]):
            moves.append(Move.tab_to_found(c, top.suit))

    for c, col in enumerate(board.tableau):
        for i in range(len(col)):
            if not col[i].face_up or not is_valid_movable_stack(col[i:]):
                continue
            for d in range(NUM_COLUMNS):
                if d != c and can_place_on_tableau(col[i], board.column_top(d)):
                    moves.append(Move.tab_to_tab(c, i, d))

    if card is not None:
        for d in range(NUM_COLUMNS):
            target = board.column_top(d)
            if can_place_on_tableau(card, target):
                moves.append(Move.waste_to_tab_empty(d) if target is None else Move.waste_to_tab(d))

    for c in range(NUM_COLUMNS):
        top = board.column_top(c)
        if top is not None and not top.face_up:
            moves.append(Move.flip(c))

    if board.stock:
        moves.append(Move.draw(min(int(board.draw_mode), len(board.stock))))
    elif board.waste:
        moves.append(Move.recycle())
    return moves


__all__ = [
    "Move",
    "apply_move",
    "auto_flip",
    "draw_or_recycle",
    "legal_moves",
]
