"""
evaluators.py

Safety and win probabilities of a candidate action, computed from the
opponent-hand distribution in a ProbabilityTable.
"""
from fractions import Fraction
from typing import Optional, Sequence

from engarde.core_duel_mechanics import RestCounts, counts_from_hand
from engarde.duel_types import LETHAL_COUNT, Action, Attack, CardRank, Direction, Move, Quantity
from engarde.probability import ProbabilityTable

# Opponent holdings worth weighing. Past LETHAL_COUNT the exchange is already decided.
ENEMY_QUANTITIES = (Quantity.ZERO, Quantity.ONE, Quantity.TWO, LETHAL_COUNT)


def _matched_mass(held: Quantity, table: ProbabilityTable, rank: CardRank, strict: bool) -> Fraction:
    """Probability the opponent holds few enough copies of `rank` for `held` to answer"""
    total = Fraction(0)
    for enemy_quantity in ENEMY_QUANTITIES:
        enough = held > enemy_quantity if strict else held >= enemy_quantity
        if enough:
            total += table.probability(rank, enemy_quantity)
    return total


def safe_possibility(
    distance: int,
    rest_counts: RestCounts,
    hand: Sequence[int],
    table: ProbabilityTable,
    action: Action,
) -> Optional[Fraction]:
    """
    Probability that after `action` the opponent has no card answer that
    beats us outright.

    Returns None if the hand cannot be counted or the rank the opponent would
    need lies outside 1..5.
    """
    counts = counts_from_hand(hand)
    if counts is None:
        return None

    if isinstance(action, Attack):
        rank = action.rank
        held = counts[rank.index]
        # Every unseen copy is already in our hand.
        if rest_counts[rank] <= held:
            return Fraction(1)
        return _matched_mass(held, table, rank, strict=False)

    if not isinstance(action, Move):
        raise TypeError(f"Not an action: {action!r}")

    rank = action.rank
    if action.direction is Direction.FORWARD:
        # Landing at half the distance means the opponent can answer with the
        # very rank we just spent, so one copy is no longer ours to parry with.
        dup = distance == 2 * rank
        reserved = Quantity.ONE if dup else Quantity.ZERO
        if rest_counts[rank] <= counts[rank.index].saturating_sub(reserved):
            return Fraction(1)
        enemy_rank = CardRank.from_int(distance - rank)
        if enemy_rank is None:
            return None
        return _matched_mass(counts[enemy_rank.index].saturating_sub(reserved), table, enemy_rank, strict=False)

    if rest_counts[rank] <= counts[rank.index]:
        return Fraction(1)
    enemy_rank = CardRank.from_int(distance + rank)
    if enemy_rank is None:
        return None
    return _matched_mass(counts[enemy_rank.index], table, enemy_rank, strict=False)


def win_poss_attack(
    rest_counts: RestCounts,
    hand: Sequence[int],
    table: ProbabilityTable,
    action: Action,
) -> Optional[Fraction]:
    """
    Probability that `action` wins the round outright. Moves never do.
    Returns None if the hand cannot be counted.
    """
    if isinstance(action, Move):
        return Fraction(0)
    if not isinstance(action, Attack):
        raise TypeError(f"Not an action: {action!r}")

    counts = counts_from_hand(hand)
    if counts is None:
        return None
    rank = action.rank
    held = counts[rank.index]
    if rest_counts[rank] < held:
        return Fraction(1)
    # Winning needs strictly more copies than the opponent; a tie is only a parry.
    return _matched_mass(held, table, rank, strict=True)
