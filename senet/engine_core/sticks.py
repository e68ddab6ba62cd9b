"""
Stick Oracle - Throwing the four Senet sticks.

Each stick has a light and a dark face. The count of light faces (0-4)
decides the move distance and whether the thrower goes again.

Randomness is injected: the oracle draws from the random.Random it is
given, so games replay exactly from a seed.
"""

from __future__ import annotations
import random
from dataclasses import dataclass


NUM_STICKS = 4

DISTANCE_FOR_ZERO = 5
EXTRA_TURN_COUNTS = frozenset({0, 1, 4})


def _check_count(count: int) -> None:
    if not 0 <= count <= NUM_STICKS:
        raise ValueError(f"Stick count must be 0-{NUM_STICKS}, got {count}")


def move_distance(count: int) -> int:
    """Squares moved for a throw: 0 light faces moves 5, otherwise the count."""
    _check_count(count)
    return DISTANCE_FOR_ZERO if count == 0 else count


def has_extra_turn(count: int) -> bool:
    """Throws of 0, 1 and 4 let the thrower go again."""
    _check_count(count)
    return count in EXTRA_TURN_COUNTS


@dataclass(frozen=True)
class StickThrow:
    """
    Outcome of one throw.

    faces holds the four sticks (True = light side up) for display;
    count is the number of light faces.
    """
    faces: tuple[bool, ...]

    def __post_init__(self):
        if len(self.faces) != NUM_STICKS:
            raise ValueError(f"A throw has {NUM_STICKS} sticks, got {len(self.faces)}")

    @property
    def count(self) -> int:
        return sum(1 for face in self.faces if face)

    @property
    def distance(self) -> int:
        return move_distance(self.count)

    @property
    def extra_turn(self) -> bool:
        return has_extra_turn(self.count)

    @classmethod
    def from_count(cls, count: int) -> StickThrow:
        """Canonical throw with the given number of light faces first."""
        _check_count(count)
        return cls(faces=tuple(i < count for i in range(NUM_STICKS)))


def throw_sticks(rng: random.Random) -> StickThrow:
    """Draw four independent fair sticks."""
    return StickThrow(faces=tuple(rng.random() < 0.5 for _ in range(NUM_STICKS)))


class StickOracle:
    """
    Source of stick throws for a session.

    Usage:
        oracle = StickOracle(seed=42)
        throw = oracle.throw()
    """

    def __init__(self, rng: random.Random | None = None, seed: int | None = None):
        self.rng = rng if rng is not None else random.Random(seed)

    def throw(self) -> StickThrow:
        return throw_sticks(self.rng)
