"""
duel_types.py

Value types shared by every engine module, broken out to avoid circular imports
"""
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional, Union

# Both players normally hold five cards, and five copies of each rank exist.
HAND_SIZE = 5


class CardRank(IntEnum):
    ONE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5

    @classmethod
    def from_int(cls, n: int) -> Optional['CardRank']:
        """Rank for n, or None when n is outside 1..5"""
        if 1 <= n <= 5:
            return cls(n)
        return None

    @property
    def index(self) -> int:
        """Zero-based slot of this rank in per-rank tables"""
        return self.value - 1


@dataclass(frozen=True, order=True)
class Quantity:
    """
    Number of copies of one rank, always within [0, HAND_SIZE].

    Arithmetic saturates instead of failing: sums clamp at 5, differences at 0.
    """
    value: int

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"Quantity must be an int, got {type(self.value).__name__}")
        if not 0 <= self.value <= HAND_SIZE:
            raise ValueError(f"Quantity must be within 0..{HAND_SIZE}, got {self.value}")

    @classmethod
    def from_int(cls, n: int) -> Optional['Quantity']:
        if 0 <= n <= HAND_SIZE:
            return cls(n)
        return None

    @classmethod
    def clamp(cls, n: int) -> 'Quantity':
        return cls(min(max(n, 0), HAND_SIZE))

    def checked_add(self, other: 'Quantity') -> Optional['Quantity']:
        return Quantity.from_int(self.value + other.value)

    def saturating_add(self, other: 'Quantity') -> 'Quantity':
        return Quantity.clamp(self.value + other.value)

    def saturating_sub(self, other: 'Quantity') -> 'Quantity':
        return Quantity.clamp(self.value - other.value)

    def saturating_mul(self, n: int) -> 'Quantity':
        return Quantity.clamp(self.value * n)

    def __int__(self):
        return self.value

    def __str__(self):
        return str(self.value)


Quantity.ZERO = Quantity(0)
Quantity.ONE = Quantity(1)
Quantity.TWO = Quantity(2)
Quantity.THREE = Quantity(3)
Quantity.FOUR = Quantity(4)
Quantity.FIVE = Quantity(5)
Quantity.MAX = Quantity.FIVE

# An attack with this many copies cannot be beaten.
LETHAL_COUNT = Quantity.THREE


class Direction(Enum):
    FORWARD = 'F'
    BACK = 'B'

    @classmethod
    def from_str(cls, token: str) -> 'Direction':
        """Parse the one-letter wire token ("F" or "B")"""
        for direction in cls:
            if direction.value == token:
                return direction
        raise ValueError(f"Not a valid direction: {token!r}")

    def __str__(self):
        return self.value


def _as_rank(rank) -> CardRank:
    if isinstance(rank, CardRank):
        return rank
    converted = CardRank.from_int(int(rank))
    if converted is None:
        raise ValueError(f"Card rank must be within 1..5, got {rank}")
    return converted


@dataclass(frozen=True)
class Move:
    rank: CardRank
    direction: Direction

    def __post_init__(self):
        object.__setattr__(self, 'rank', _as_rank(self.rank))

    def __str__(self):
        return f"Move({int(self.rank)}{self.direction})"


@dataclass(frozen=True)
class Attack:
    rank: CardRank
    quantity: Quantity

    def __post_init__(self):
        object.__setattr__(self, 'rank', _as_rank(self.rank))
        if not isinstance(self.quantity, Quantity):
            object.__setattr__(self, 'quantity', Quantity(self.quantity))
        if self.quantity == Quantity.ZERO:
            raise ValueError("An attack must spend at least one card")

    def __str__(self):
        return f"Attack({int(self.rank)}x{self.quantity})"


Action = Union[Move, Attack]
