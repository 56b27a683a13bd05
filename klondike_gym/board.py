"""Board state and the deal generator.

The `Board` is the single source of truth for a round: seven tableau
columns, stock, waste and four foundations.  Every card lives in exactly
one of those places; moves (see `klondike_gym.moves`) relocate cards by
pop + append and never duplicate them.

Snapshots use `Board.copy()` – an explicit structural clone – and cycle
detection uses `Board.fingerprint()`, a plain hashable tuple.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence

from klondike_gym.cards import Card, Suit, make_deck
from klondike_gym.constants import CARDS_PER_SUIT, NUM_COLUMNS, DrawMode
from klondike_gym.rng import DeterministicRNG


def _empty_foundations() -> Dict[Suit, List[Card]]:
    return {suit: [] for suit in Suit}


@dataclass
class Board:
    """Klondike layout. Every list is ordered bottom → top (last item = top)."""

    tableau: List[List[Card]] = field(default_factory=lambda: [[] for _ in range(NUM_COLUMNS)])
    stock: List[Card] = field(default_factory=list)
    waste: List[Card] = field(default_factory=list)
    found: Dict[Suit, List[Card]] = field(default_factory=_empty_foundations)
    draw_mode: DrawMode = DrawMode.ONE

    def __post_init__(self):
        self.draw_mode = DrawMode.coerce(self.draw_mode)

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def copy(self) -> "Board":
        """Deep structural clone; cards are copied so flips stay private."""
        return Board(
            tableau=[[c.copy() for c in col] for col in self.tableau],
            stock=[c.copy() for c in self.stock],
            waste=[c.copy() for c in self.waste],
            found={suit: [c.copy() for c in pile] for suit, pile in self.found.items()},
            draw_mode=self.draw_mode,
        )

    def fingerprint(self) -> tuple:
        """Canonical hashable key of everything that affects future play."""
        return (
            tuple(
                tuple((int(c.rank), int(c.suit), c.face_up) for c in col)
                for col in self.tableau
            ),
            tuple(c.identity for c in self.waste),
            len(self.stock),
            tuple(len(self.found[suit]) for suit in Suit),
            int(self.draw_mode),
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def column_top(self, col: int) -> Optional[Card]:
        column = self.tableau[col]
        return column[-1] if column else None

    def waste_top(self) -> Optional[Card]:
        return self.waste[-1] if self.waste else None

    def foundation_count(self) -> int:
        return sum(len(pile) for pile in self.found.values())

    def is_won(self) -> bool:
        return all(len(self.found[suit]) == CARDS_PER_SUIT for suit in Suit)

    def all_cards(self) -> Iterator[Card]:
        for col in self.tableau:
            yield from col
        yield from self.stock
        yield from self.waste
        for pile in self.found.values():
            yield from pile

    def __str__(self) -> str:
        found = " ".join(
            f"{suit.symbol()}:{self.found[suit][-1].rank.short if self.found[suit] else '-'}"
            for suit in Suit
        )
        waste = str(self.waste[-1]) if self.waste else "--"
        lines = [f"Stock[{len(self.stock)}] Waste[{len(self.waste)}]: {waste}   Found {found}"]
        height = max((len(col) for col in self.tableau), default=0)
        lines.append("  ".join(f"C{i + 1:<2}" for i in range(NUM_COLUMNS)))
        for row in range(height):
            cells = []
            for col in self.tableau:
                cells.append(f"{col[row].label():<3}" if row < len(col) else "   ")
            lines.append("  ".join(cells).rstrip())
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Deal generator
# ---------------------------------------------------------------------------

def deal(draw_mode: DrawMode | int = DrawMode.ONE, rng: Optional[DeterministicRNG] = None) -> Board:
    """Shuffle a fresh deck and lay out a standard Klondike deal.

    Column *i* receives *i+1* cards with only the last one face up; the
    remaining 24 cards form the face-down stock.
    """
    deck = make_deck(rng)
    board = Board(draw_mode=draw_mode)
    idx = 0
    for c in range(NUM_COLUMNS):
        for r in range(c + 1):
            card = deck[idx]
            idx += 1
            card.face_up = r == c
            board.tableau[c].append(card)
    board.stock = deck[idx:]
    return board


def board_from_columns(
    tableau: Sequence[Sequence[Card]],
    stock: Sequence[Card] = (),
    waste: Sequence[Card] = (),
    found: Optional[Dict[Suit, Sequence[Card]]] = None,
    draw_mode: DrawMode | int = DrawMode.ONE,
) -> Board:
    """Assemble a board from explicit piles (tests, fixtures, saved layouts).

    The caller is responsible for the 52-card invariant; nothing is checked.
    """
    columns = [list(col) for col in tableau]
    columns += [[] for _ in range(NUM_COLUMNS - len(columns))]
    piles = _empty_foundations()
    for suit, pile in (found or {}).items():
        piles[Suit(suit)] = list(pile)
    return Board(
        tableau=columns,
        stock=list(stock),
        waste=list(waste),
        found=piles,
        draw_mode=draw_mode,
    )


__all__ = ["Board", "deal", "board_from_columns"]
