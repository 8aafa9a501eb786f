"""
policy.py

Layered move selection built on the safety/win evaluators:

    initial_move         opening, while the players are still far apart
    should_go_to_2_or_7  positional adjustment toward a comfortable distance
    middle_move          attack if it probably wins, else a safe adjustment
    last_move            endgame: attack when the win is certain
"""
import os
from dataclasses import dataclass
from fractions import Fraction
from typing import Optional, Sequence, Set, Tuple

import yaml

from engarde.core_duel_mechanics import Counts, RestCounts, count_in_hand, counts_from_hand
from engarde.duel_types import Action, Attack, CardRank, Direction, Move, Quantity
from engarde.errors import InapplicablePhaseError, MalformedHandError
from engarde.evaluators import safe_possibility, win_poss_attack
from engarde.probability import ProbabilityTable

from engarde.logging_config import get_logger
logger = get_logger(__name__)


# Load configuration
config_path = os.path.join(os.path.dirname(__file__), 'config.yaml')
if os.path.exists(config_path):
    with open(config_path, 'r', encoding='utf-8') as f:
        config = yaml.safe_load(f) or {}
else:
    config = {}

policy_config = config.get('policy') or {}
OPENING_DISTANCE = int(policy_config.get('opening_distance', 12))
HIGH_CARD_DISTANCE = int(policy_config.get('high_card_distance', 12))
COMFORTABLE_DISTANCES = tuple(int(d) for d in policy_config.get('comfortable_distances', [7, 2]))
ATTACK_THRESHOLD = Fraction(str(policy_config.get('attack_threshold', '3/4')))
MOVE_THRESHOLD = Fraction(str(policy_config.get('move_threshold', '3/4')))


def count_high_cards(counts: Counts) -> int:
    """Held copies of ranks 4 and 5 together"""
    return int(counts[CardRank.FOUR.index]) + int(counts[CardRank.FIVE.index])


def hand_average(hand: Sequence[int]) -> Optional[Fraction]:
    if not hand:
        return None
    return Fraction(sum(int(card) for card in hand), len(hand))


@dataclass(frozen=True)
class AcceptableNumbers:
    """Which ranks the policy may propose spending, recomputed per decision"""
    can_use: Tuple[bool, ...]

    @staticmethod
    def can_use_1(counts: Counts, rest: RestCounts) -> bool:
        # Ones are kept for the endgame unless enough have already been seen.
        used = rest.played(CardRank.ONE)
        return counts[CardRank.ONE.index] > Quantity.THREE.saturating_sub(used)

    @staticmethod
    def can_use_2(counts: Counts) -> bool:
        return counts[CardRank.TWO.index] > Quantity.ONE

    @staticmethod
    def can_use_3(counts: Counts) -> bool:
        return counts[CardRank.THREE.index] > Quantity.ZERO

    @staticmethod
    def can_use_4_and_5(counts: Counts, distance: int, high_card_distance: int = HIGH_CARD_DISTANCE) -> bool:
        # Far away, a lone high card is what gets us back into range.
        if distance >= high_card_distance:
            return count_high_cards(counts) >= 2
        return True

    @classmethod
    def from_counts(
        cls,
        counts: Counts,
        rest: RestCounts,
        distance: int,
        high_card_distance: int = HIGH_CARD_DISTANCE,
    ) -> 'AcceptableNumbers':
        high = cls.can_use_4_and_5(counts, distance, high_card_distance)
        return cls((
            cls.can_use_1(counts, rest),
            cls.can_use_2(counts),
            cls.can_use_3(counts),
            high,
            high,
        ))

    def __getitem__(self, rank: CardRank) -> bool:
        return self.can_use[CardRank(rank).index]


def initial_move(
    hand: Sequence[int],
    distance: int,
    acceptable: AcceptableNumbers,
    opening_distance: int = OPENING_DISTANCE,
) -> Action:
    """
    Opening move: step forward with the largest rank we are willing to spend.

    Raises InapplicablePhaseError once the players are within
    `opening_distance`; the other layers take over from there.
    """
    if distance <= opening_distance:
        raise InapplicablePhaseError(
            f"initial_move needs distance > {opening_distance}, got {distance}",
            details={'distance': distance, 'opening_distance': opening_distance},
        )
    counts = counts_from_hand(hand)
    if counts is None:
        raise MalformedHandError(f"Cannot count hand {list(hand)}", details={'hand': list(hand)})

    for rank in reversed(CardRank):
        if acceptable[rank] and counts[rank.index] > Quantity.ZERO:
            return Move(rank, Direction.FORWARD)

    average = hand_average(hand)
    if average is None:
        raise MalformedHandError("Cannot choose an opening move from an empty hand")
    if average < 3:
        return Move(CardRank.TWO, Direction.FORWARD)
    return Move(CardRank.FIVE, Direction.FORWARD)


def action_togo(target: int, distance: int) -> Optional[Move]:
    """The single move that changes `distance` into `target`, if one card can do it"""
    if target > distance:
        rank = CardRank.from_int(target - distance)
        return Move(rank, Direction.BACK) if rank is not None else None
    if target < distance:
        rank = CardRank.from_int(distance - target)
        return Move(rank, Direction.FORWARD) if rank is not None else None
    return None


def reachable_distances(hand: Sequence[int], distance: int) -> Set[int]:
    """Distances reachable by playing one card from hand"""
    reachable = set()
    for card in set(int(c) for c in hand):
        if distance - card > 0:
            reachable.add(distance - card)
        reachable.add(distance + card)
    return reachable


def should_go_to_2_or_7(
    hand: Sequence[int],
    distance: int,
    rest: RestCounts,
    table: ProbabilityTable,
    comfortable_distances: Sequence[int] = COMFORTABLE_DISTANCES,
) -> Optional[Action]:
    """
    Forward move that brings the distance to 7, or failing that to 2.
    Only moves we hold and are willing to spend qualify.
    """
    counts = counts_from_hand(hand)
    if counts is None:
        return None
    acceptable = AcceptableNumbers.from_counts(counts, rest, distance)

    for target in comfortable_distances:
        movement = action_togo(target, distance)
        if movement is None or movement.direction is not Direction.FORWARD:
            continue
        if counts[movement.rank.index] != Quantity.ZERO and acceptable[movement.rank]:
            return movement
    return None


def middle_move(
    hand: Sequence[int],
    distance: int,
    rest: RestCounts,
    table: ProbabilityTable,
    attack_threshold: Fraction = ATTACK_THRESHOLD,
    move_threshold: Fraction = MOVE_THRESHOLD,
) -> Optional[Action]:
    """
    Attack with every copy of the distance rank when the win probability
    reaches `attack_threshold`; otherwise take the positional adjustment if
    its safety reaches `move_threshold`. None means neither applies.
    """
    counts = counts_from_hand(hand)
    if counts is None:
        return None

    attack = None
    rank = CardRank.from_int(distance)
    if rank is not None and counts[rank.index] > Quantity.ZERO:
        candidate = Attack(rank, counts[rank.index])
        win = win_poss_attack(rest, hand, table, candidate)
        logger.debug(f"middle_move: {candidate} wins with probability {win}")
        if win is not None and win >= attack_threshold:
            attack = candidate

    movement = None
    candidate = should_go_to_2_or_7(hand, distance, rest, table)
    if candidate is not None:
        safety = safe_possibility(distance, rest, hand, table, candidate)
        logger.debug(f"middle_move: {candidate} is safe with probability {safety}")
        if safety is not None and safety >= move_threshold:
            movement = candidate

    return attack if attack is not None else movement


def is_last_move(rest: RestCounts, parried_count: int) -> bool:
    """Whether so few cards remain undetermined that our next action closes the round"""
    return rest.total() <= 1 + parried_count


def last_move(
    rest: RestCounts,
    hand: Sequence[int],
    position: Tuple[int, int],
    parried_count: int,
    table: ProbabilityTable,
) -> Optional[int]:
    """
    Endgame solver. `position` is (far player's position, near player's
    position). Returns the distance to attack at when that attack is a
    certain win, else None.
    """
    if not is_last_move(rest, parried_count):
        return None
    far, near = position
    distance = far - near
    rank = CardRank.from_int(distance)
    if rank is None:
        return None
    held = count_in_hand(hand, rank)
    if held is None or held == Quantity.ZERO:
        return None
    win = win_poss_attack(rest, hand, table, Attack(rank, held))
    logger.debug(f"last_move: attack at {distance} wins with probability {win}")
    if win == 1:
        return distance
    return None
