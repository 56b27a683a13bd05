"""Placement rules. Pure predicates: they never mutate and never raise."""

from __future__ import annotations

from typing import Optional, Sequence

from klondike_gym.cards import Card, Rank


def can_place_on_tableau(moving: Optional[Card], target: Optional[Card]) -> bool:
    """Can *moving* (bottom card of a run) go onto a column whose top is *target*?

    An empty column (``target is None``) accepts Kings only.
    """
    if moving is None:
        return False
    if target is None:
        return moving.rank == Rank.KING
    return moving.is_red != target.is_red and moving.rank == target.rank - 1


def can_place_on_foundation(card: Optional[Card], pile: Sequence[Card]) -> bool:
    if card is None:
        return False
    if not pile:
        return card.rank == Rank.ACE
    top = pile[-1]
    return card.suit == top.suit and card.rank == top.rank + 1


def is_valid_movable_stack(cards: Sequence[Card]) -> bool:
    """Face-up run, alternating colours, descending by one toward the top."""
    if not cards or not cards[0].face_up:
        return False
    for lower, upper in zip(cards, cards[1:]):
        if not upper.face_up:
            return False
        if lower.is_red == upper.is_red:
            return False
        if lower.rank != upper.rank + 1:
            return False
    return True


__all__ = [
    "can_place_on_tableau",
    "can_place_on_foundation",
    "is_valid_movable_stack",
]
