"""
core_duel_mechanics.py

Card accounting and board rules: unseen-card tallies, hand/count conversions
and the legal actions available from a position.
"""
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Sequence, Tuple

from engarde.duel_types import (
    HAND_SIZE, Action, Attack, CardRank, Direction, Move, Quantity,
)

# Positions run from 1 to BOARD_LENGTH inclusive.
BOARD_LENGTH = 23

Counts = Tuple[Quantity, ...]


@dataclass(frozen=True)
class RestCounts:
    """
    Copies of each rank not yet seen played by either side, i.e. still in the
    deck or in the opponent's hand. Slot i holds rank i + 1.
    """
    counts: Counts = tuple(Quantity.MAX for _ in CardRank)

    def __post_init__(self):
        if len(self.counts) != len(CardRank):
            raise ValueError(f"RestCounts needs exactly {len(CardRank)} slots, got {len(self.counts)}")
        object.__setattr__(
            self, 'counts',
            tuple(c if isinstance(c, Quantity) else Quantity(c) for c in self.counts)
        )

    @classmethod
    def fresh(cls) -> 'RestCounts':
        """Tally at the start of a round: nothing has been played yet"""
        return cls()

    @classmethod
    def from_ints(cls, values: Sequence[int]) -> 'RestCounts':
        return cls(tuple(Quantity(v) for v in values))

    def __getitem__(self, rank: CardRank) -> Quantity:
        return self.counts[CardRank(rank).index]

    def __iter__(self) -> Iterator[Quantity]:
        return iter(self.counts)

    def __len__(self):
        return len(self.counts)

    def total(self) -> int:
        return sum(c.value for c in self.counts)

    def played(self, rank: CardRank) -> Quantity:
        """Copies of rank already seen on the table"""
        return Quantity.MAX.saturating_sub(self[rank])

    def after_play(self, action: Action) -> 'RestCounts':
        """
        Tally after observing `action` played by either side.

        A move reveals one card. An attack is counted twice over: the attacker's
        copies are revealed and the defender has to answer with as many.
        """
        if isinstance(action, Move):
            rank, spent = action.rank, Quantity.ONE
        elif isinstance(action, Attack):
            rank, spent = action.rank, action.quantity.saturating_mul(2)
        else:
            raise TypeError(f"Not an action: {action!r}")
        counts = list(self.counts)
        counts[rank.index] = counts[rank.index].saturating_sub(spent)
        return RestCounts(tuple(counts))

    def as_ints(self) -> List[int]:
        return [c.value for c in self.counts]

    def __str__(self):
        return "Rest[" + " ".join(f"{r.value}:{c}" for r, c in zip(CardRank, self.counts)) + "]"


def _ranks_of(hand: Sequence[int]) -> Optional[List[CardRank]]:
    ranks = []
    for card in hand:
        rank = CardRank.from_int(int(card))
        if rank is None:
            return None
        ranks.append(rank)
    return ranks


def sorted_hand(hand: Sequence[int]) -> Optional[List[CardRank]]:
    """Hand as ascending CardRanks, or None if it holds a non-rank value"""
    ranks = _ranks_of(hand)
    if ranks is None:
        return None
    return sorted(ranks)


def counts_from_hand(hand: Sequence[int]) -> Optional[Counts]:
    """
    Per-rank counts of a hand.
    Returns None when the hand is longer than HAND_SIZE or holds a value that
    is not a card rank.
    """
    if len(hand) > HAND_SIZE:
        return None
    ranks = _ranks_of(hand)
    if ranks is None:
        return None
    tally = Counter(ranks)
    counts = []
    for rank in CardRank:
        quantity = Quantity.from_int(tally.get(rank, 0))
        if quantity is None:
            return None
        counts.append(quantity)
    return tuple(counts)


def hand_from_counts(counts: Sequence[Quantity]) -> Optional[List[CardRank]]:
    """Expand per-rank counts back into a sorted hand; None if more than HAND_SIZE cards"""
    if len(counts) != len(CardRank):
        raise ValueError(f"Count table needs exactly {len(CardRank)} slots, got {len(counts)}")
    if sum(int(c) for c in counts) > HAND_SIZE:
        return None
    hand = []
    for rank, quantity in zip(CardRank, counts):
        hand.extend([rank] * int(quantity))
    return hand


def count_in_hand(hand: Sequence[int], rank: CardRank) -> Optional[Quantity]:
    return Quantity.from_int(sum(1 for card in hand if card == rank))


class PlayerSide(Enum):
    LEFT = 0   # starts at position 1, moves forward by increasing position
    RIGHT = 1  # starts at position BOARD_LENGTH

    @property
    def start_position(self) -> int:
        return 1 if self is PlayerSide.LEFT else BOARD_LENGTH


def board_distance(left_position: int, right_position: int) -> int:
    return right_position - left_position


def legal_actions(
    hand: Sequence[int],
    my_position: int,
    enemy_position: int,
    side: PlayerSide,
    board_length: int = BOARD_LENGTH,
) -> List[Action]:
    """
    Every action the rules allow from the current position.

    Each distinct held rank may move back while staying on the board and
    forward while not reaching the opponent. An attack spends every held copy
    of the rank equal to the distance.
    """
    ranks = sorted_hand(hand)
    if ranks is None:
        return []

    if side is PlayerSide.LEFT:
        left, right = my_position, enemy_position
    else:
        left, right = enemy_position, my_position

    actions: List[Action] = []
    for rank in sorted(set(ranks)):
        if side is PlayerSide.LEFT:
            can_back = my_position - rank >= 1
            can_forward = my_position + rank < enemy_position
        else:
            can_back = my_position + rank <= board_length
            can_forward = my_position - rank > enemy_position
        if can_back:
            actions.append(Move(rank, Direction.BACK))
        if can_forward:
            actions.append(Move(rank, Direction.FORWARD))

    target = CardRank.from_int(board_distance(left, right))
    if target is not None:
        held = Quantity.from_int(ranks.count(target))
        if held is not None and held > Quantity.ZERO:
            actions.append(Attack(target, held))
    return actions
