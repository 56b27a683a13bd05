"""Seeded RNG with one independent stream per subsystem.

Only the deal generator draws randomness; the solver, scoring and replay
are deterministic.  Keeping shuffles and candidate sampling on separate
streams means a seed reproduces the exact same deals.
"""

from __future__ import annotations

import random
from typing import Any, Dict, List, Optional

STREAM_NAMES = (
    'deck_shuffle',
    'candidate_sampling',
)

# Draw log length; older entries are dropped
HISTORY_LIMIT = 1000


class DeterministicRNG:
    """Centralized RNG system with separate streams for each subsystem"""

    def __init__(self, master_seed: Optional[int] = None):
        self.master_seed = master_seed if master_seed is not None else random.randint(0, 2**32 - 1)
        self.streams: Dict[str, random.Random] = {}
        self.history: List[tuple] = []
        self._initialize_streams()

    def _initialize_streams(self):
        for i, name in enumerate(STREAM_NAMES):
            # Each stream gets a unique seed derived from master seed
            stream_seed = (self.master_seed + i * 1000) % (2**32)
            self.streams[name] = random.Random(stream_seed)

    def _stream(self, stream: str) -> random.Random:
        if stream not in self.streams:
            raise ValueError(f"Unknown RNG stream: {stream}")
        return self.streams[stream]

    def _record(self, entry: tuple) -> None:
        self.history.append(entry)
        if len(self.history) > HISTORY_LIMIT:
            del self.history[:-HISTORY_LIMIT]

    def get_int(self, stream: str, low: int, high: int) -> int:
        """Get random integer from a specific stream (inclusive)"""
        value = self._stream(stream).randint(low, high)
        self._record((stream, 'int', value))
        return value

    def shuffle(self, stream: str, sequence: List[Any]) -> None:
        """Shuffle a sequence in-place (Fisher–Yates)"""
        self._stream(stream).shuffle(sequence)
        self._record((stream, 'shuffle', len(sequence)))

    def get_state(self) -> Dict[str, Any]:
        """Get complete RNG state for saving"""
        return {
            'master_seed': self.master_seed,
            'streams': {name: rng.getstate() for name, rng in self.streams.items()},
            'history_length': len(self.history),
        }

    def set_state(self, state: Dict[str, Any]) -> None:
        """Restore complete RNG state"""
        self.master_seed = state['master_seed']
        for name, stream_state in state['streams'].items():
            if name in self.streams:
                self.streams[name].setstate(stream_state)
        del self.history[state.get('history_length', len(self.history)):]
