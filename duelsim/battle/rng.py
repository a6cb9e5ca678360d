"""Seeded random number generator.

A multiplicative linear congruential generator (Numerical Recipes constants).
Two generators built from the same seed and driven through the same calls
produce identical values, which is what makes every battle replayable.
"""
from __future__ import annotations
import math
import time
from typing import Optional

from duelsim.core.errors import InvalidArgument

_A = 1664525
_C = 1013904223
_M = 2 ** 32


class SeededRNG:
    def __init__(self, seed: Optional[int] = None):
        if seed is None:
            seed = int(time.time() * 1000)
        if isinstance(seed, bool) or not isinstance(seed, int):
            raise InvalidArgument(f"seed must be an integer, got {seed!r}")
        self._state = seed

    def get_seed(self) -> int:
        """Current internal state; feed it to :meth:`from_seed` to resume the stream."""
        return self._state

    def _next_raw(self) -> float:
        self._state = (_A * self._state + _C) % _M
        return self._state / _M

    def next(self) -> float:
        """Float in [0, 1)."""
        return self._next_raw()

    def next_int(self, max_value: int) -> int:
        """Integer in [0, max_value)."""
        if max_value <= 0:
            raise InvalidArgument("max must be greater than 0")
        return math.floor(self._next_raw() * max_value)

    def next_float(self, min_value: float, max_value: float) -> float:
        """Float in [min_value, max_value)."""
        return min_value + (max_value - min_value) * self._next_raw()

    def chance(self, probability: float) -> bool:
        if not (0 <= probability <= 1):
            raise InvalidArgument("probability must be between 0 and 1")
        return self._next_raw() < probability

    @classmethod
    def from_seed(cls, seed: int) -> "SeededRNG":
        return cls(seed)

    def __repr__(self) -> str:
        return "SeededRNG(...)"

__all__ = ["SeededRNG"]
