"""Centralised enumerations and tunables for Klondike Gym
=======================================================

Import these enums everywhere instead of raw numbers / strings:

1. **Safety** – `MoveType.TAB_TO_TAB` cannot be confused with a column index.
2. **Readability** – `Difficulty.EXTREME` is self‑explanatory; `3` is not.
3. **Refactor‑friendliness** – change a value here, *all* call‑sites update.

Usage
-----
```python
from klondike_gym.constants import Difficulty, DrawMode

result = generate_deal(DrawMode.ONE, Difficulty.HARD)
```

Public entry points also accept raw values (`1`, `3`, `"easy"`) and coerce
them with `DrawMode.coerce` / `Difficulty.coerce`.
"""

from __future__ import annotations
from enum import Enum, IntEnum, unique


@unique
class DrawMode(IntEnum):
    """How many cards move from stock to waste per draw."""
    ONE = 1
    THREE = 3

    @classmethod
    def coerce(cls, value: "DrawMode | int") -> "DrawMode":
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            raise ValueError(f"Unknown draw mode: {value!r} (expected 1 or 3)") from None


@unique
class Difficulty(str, Enum):
    """Requested deal difficulty tier."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXTREME = "extreme"

    @classmethod
    def coerce(cls, value: "Difficulty | str") -> "Difficulty":
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown difficulty: {value!r}") from None


@unique
class MoveType(IntEnum):
    """Every move shape the engine can record or replay."""
    FLIP = 0
    WASTE_TO_FOUND = 1
    TAB_TO_FOUND = 2
    TAB_TO_TAB = 3
    WASTE_TO_TAB = 4
    WASTE_TO_TAB_EMPTY = 5
    RECYCLE = 6
    DRAW = 7


FOUNDATION_MOVES = frozenset({MoveType.WASTE_TO_FOUND, MoveType.TAB_TO_FOUND})

# ---------------------------------------------------------------------------
# Table geometry
# ---------------------------------------------------------------------------
DECK_SIZE: int = 52
NUM_COLUMNS: int = 7
NUM_FOUNDATIONS: int = 4
CARDS_PER_SUIT: int = 13
TABLEAU_DEAL_SIZE: int = NUM_COLUMNS * (NUM_COLUMNS + 1) // 2   # 28
STOCK_DEAL_SIZE: int = DECK_SIZE - TABLEAU_DEAL_SIZE            # 24
# 6 face-down cards under a full K→A run
MAX_COLUMN_HEIGHT: int = NUM_COLUMNS - 1 + CARDS_PER_SUIT       # 19

# ---------------------------------------------------------------------------
# Solver / deal selection budgets
# ---------------------------------------------------------------------------
MAX_SOLVER_ITERATIONS: int = 1200

# Hard deals are rarer, so the harder tiers sample more candidates.
TRIES_BY_DIFFICULTY = {
    Difficulty.EASY: 45,
    Difficulty.MEDIUM: 45,
    Difficulty.HARD: 60,
    Difficulty.EXTREME: 60,
}
FALLBACK_TRIES: int = 50

# Position in the ascending (hardest-first) candidate list, as a fraction of n-1.
PICK_FRACTION = {
    Difficulty.EASY: 1.0,
    Difficulty.MEDIUM: 0.8,
    Difficulty.HARD: 0.3,
    Difficulty.EXTREME: 0.0,
}

# ---------------------------------------------------------------------------
# Replay pacing
# ---------------------------------------------------------------------------
REPLAY_BATCH_SIZE: int = 3


__all__ = [
    "DrawMode",
    "Difficulty",
    "MoveType",
    "FOUNDATION_MOVES",
    "DECK_SIZE",
    "NUM_COLUMNS",
    "NUM_FOUNDATIONS",
    "CARDS_PER_SUIT",
    "TABLEAU_DEAL_SIZE",
    "STOCK_DEAL_SIZE",
    "MAX_COLUMN_HEIGHT",
    "MAX_SOLVER_ITERATIONS",
    "TRIES_BY_DIFFICULTY",
    "FALLBACK_TRIES",
    "PICK_FRACTION",
    "REPLAY_BATCH_SIZE",
]
