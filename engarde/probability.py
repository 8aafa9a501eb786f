"""
probability.py

Exact distribution of how many copies of each rank the opponent holds.

    rest = RestCounts.fresh()
    table = build_probability_table(rest, total_unseen_cards=20)
    table.probability(CardRank.THREE, Quantity.ONE)   # Fraction

All arithmetic is done with fractions.Fraction so downstream checks such as
"probability == 1" or ">= 3/4" are exact.
"""
import math
from dataclasses import dataclass
from fractions import Fraction
from typing import Tuple

from engarde.core_duel_mechanics import RestCounts
from engarde.duel_types import HAND_SIZE, CardRank, Quantity

Distribution = Tuple[Fraction, ...]


def permutation(n: int, r: int) -> int:
    """n * (n-1) * ... * (n-r+1); 0 when n < r"""
    if n < r:
        return 0
    return math.perm(n, r)


def combination(n: int, r: int) -> int:
    return permutation(n, r) // math.factorial(r)


def hypergeometric_distribution(target: int, total_unseen_cards: int, hand_size: int = HAND_SIZE) -> Distribution:
    """
    P(opponent holds exactly k copies), k = 0..hand_size, when `target` of the
    `total_unseen_cards` hidden cards are of the rank and the opponent's hand
    is a uniform draw of `hand_size` of them.

        P(k) = C(h, k) * Perm(t, k) * Perm(N - t, h - k) / Perm(N, h)

    which equals the textbook C(t, k) * C(N - t, h - k) / C(N, h).
    """
    if total_unseen_cards < hand_size:
        raise ValueError(
            f"Need at least {hand_size} unseen cards to draw a hand, got {total_unseen_cards}"
        )
    if not 0 <= target <= total_unseen_cards:
        raise ValueError(f"Target count {target} outside 0..{total_unseen_cards}")

    denominator = permutation(total_unseen_cards, hand_size)
    return tuple(
        Fraction(
            combination(hand_size, k)
            * permutation(target, k)
            * permutation(total_unseen_cards - target, hand_size - k),
            denominator,
        )
        for k in range(hand_size + 1)
    )


@dataclass(frozen=True)
class ProbabilityTable:
    """Per rank, the distribution over how many copies the opponent holds (0..5)"""
    distributions: Tuple[Distribution, ...]
    total_unseen_cards: int

    def distribution(self, rank: CardRank) -> Distribution:
        return self.distributions[CardRank(rank).index]

    def probability(self, rank: CardRank, quantity: Quantity) -> Fraction:
        return self.distribution(rank)[int(quantity)]

    def expected_count(self, rank: CardRank) -> Fraction:
        return sum((k * p for k, p in enumerate(self.distribution(rank))), Fraction(0))

    @classmethod
    def from_deck(cls, deck_size: int, rest_counts: RestCounts) -> 'ProbabilityTable':
        """Build from the number of cards left in the deck; the opponent's hand is also unseen"""
        return build_probability_table(rest_counts, deck_size + HAND_SIZE)


def build_probability_table(rest_counts: RestCounts, total_unseen_cards: int) -> ProbabilityTable:
    return ProbabilityTable(
        distributions=tuple(
            hypergeometric_distribution(int(rest_counts[rank]), total_unseen_cards)
            for rank in CardRank
        ),
        total_unseen_cards=total_unseen_cards,
    )
