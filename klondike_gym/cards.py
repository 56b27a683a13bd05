"""Card-level primitives shared across the solitaire engine.

Goals
-----
* **Single source of truth** – one `Card` definition for deals, solver and env.
* **Low memory footprint** – `@dataclass(slots=True)` avoids per‑instance `__dict__`.
* **Interoperable with NumPy** – `IntEnum` values are integers so you can store them in `np.int8` arrays without casting.

Ranks are numbered the Klondike way (Ace low = 1 … King = 13).  Games that
rank Aces high (Hi‑Lo) keep their own mapping; do not unify the two.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, unique
from typing import Final, List, Optional

from klondike_gym.rng import DeterministicRNG


@unique
class Suit(IntEnum):
    """Card suit (♠ ♥ ♦ ♣), in foundation order."""

    SPADES: int = 0
    HEARTS: int = 1
    DIAMONDS: int = 2
    CLUBS: int = 3

    def symbol(self) -> str:  # → "♠" / "♥" / "♦" / "♣"
        return "♠♥♦♣"[self]

    @property
    def is_red(self) -> bool:
        return self in (Suit.HEARTS, Suit.DIAMONDS)


@unique
class Rank(IntEnum):
    """Card rank encoded as its tableau value (A=1 … K=13)."""

    ACE: int = 1
    TWO: int = 2
    THREE: int = 3
    FOUR: int = 4
    FIVE: int = 5
    SIX: int = 6
    SEVEN: int = 7
    EIGHT: int = 8
    NINE: int = 9
    TEN: int = 10
    JACK: int = 11
    QUEEN: int = 12
    KING: int = 13

    @property
    def short(self) -> str:  # → "A" … "K"
        lookup: Final = {
            Rank.ACE: "A",
            Rank.JACK: "J",
            Rank.QUEEN: "Q",
            Rank.KING: "K",
        }
        return lookup.get(self, str(self.value))


@dataclass(slots=True)
class Card:
    """Playing card. Identity is (rank, suit); only `face_up` ever changes."""

    rank: Rank
    suit: Suit
    face_up: bool = False

    def __str__(self) -> str:
        return f"{self.rank.short}{self.suit.symbol()}"

    def label(self) -> str:
        return str(self) if self.face_up else "##"

    @property
    def identity(self) -> tuple[int, int]:
        return (int(self.rank), int(self.suit))

    @property
    def is_red(self) -> bool:
        return self.suit.is_red

    def __int__(self) -> int:  # unique 0–51 mapping → suit * 13 + (rank‑1)
        return self.suit * 13 + (self.rank - 1)

    def copy(self) -> "Card":
        return Card(self.rank, self.suit, self.face_up)


def rank_value(rank: Rank | int) -> int:
    """Numeric value 1–13 used by tableau and foundation rules."""
    return int(Rank(rank))


def is_red(suit: Suit | int) -> bool:
    return Suit(suit).is_red


def make_deck(rng: Optional[DeterministicRNG] = None) -> List[Card]:
    """Return the 52 face-down cards, shuffled on the ``deck_shuffle`` stream."""
    rng = rng or DeterministicRNG()
    deck = [Card(rank, suit) for suit in Suit for rank in Rank]
    rng.shuffle("deck_shuffle", deck)
    return deck


__all__ = [
    "Suit",
    "Rank",
    "Card",
    "rank_value",
    "is_red",
    "make_deck",
]
