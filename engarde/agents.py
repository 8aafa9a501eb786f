"""
agents.py

Agents that turn a duel state into an action. AlgorithmAgent layers the
probability policy; RandomAgent is the baseline it is measured against.
"""
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Dict, List, Optional

import numpy as np

from engarde.action_encoding import evaluation_vector
from engarde.core_duel_mechanics import (
    BOARD_LENGTH, PlayerSide, RestCounts, count_in_hand, counts_from_hand, legal_actions,
)
from engarde.duel_types import Action, Attack, CardRank, Direction, Move
from engarde.errors import EngineError, ErrorCode, InapplicablePhaseError
from engarde.evaluators import safe_possibility
from engarde.play_tracker import PlayTracker
from engarde.policy import AcceptableNumbers, config, initial_move, last_move, middle_move
from engarde.probability import ProbabilityTable

from engarde.logging_config import logger

board_config = config.get('board') or {}
INITIAL_DECK_SIZE = int(board_config.get('initial_deck_size', 15))


@dataclass
class DuelState:
    """What one player can see at a decision point"""
    hand: List[int]
    my_position: int
    enemy_position: int
    side: PlayerSide
    rest_counts: RestCounts = field(default_factory=RestCounts.fresh)
    parried_count: int = 0
    deck_size: int = INITIAL_DECK_SIZE
    board_length: int = int(board_config.get('length', BOARD_LENGTH))

    @property
    def left_position(self) -> int:
        return self.my_position if self.side is PlayerSide.LEFT else self.enemy_position

    @property
    def right_position(self) -> int:
        return self.enemy_position if self.side is PlayerSide.LEFT else self.my_position

    @property
    def distance(self) -> int:
        return self.right_position - self.left_position

    def legal_actions(self) -> List[Action]:
        return legal_actions(self.hand, self.my_position, self.enemy_position, self.side, self.board_length)

    def table(self) -> ProbabilityTable:
        return ProbabilityTable.from_deck(self.deck_size, self.rest_counts)

    @classmethod
    def from_tracker(cls, tracker: PlayTracker, hand: List[int], my_position: int, enemy_position: int,
                     side: PlayerSide, deck_size: int = INITIAL_DECK_SIZE) -> 'DuelState':
        """Snapshot the tracker's tally of seen cards and parries"""
        return cls(
            hand=list(hand),
            my_position=my_position,
            enemy_position=enemy_position,
            side=side,
            rest_counts=tracker.rest_counts,
            parried_count=tracker.parried_count,
            deck_size=deck_size,
        )


def default_order_key(action: Action):
    """Attacks first, then forward moves from the largest rank, then back moves from the smallest"""
    if isinstance(action, Attack):
        return (0, 0)
    if action.direction is Direction.FORWARD:
        return (1, -int(action.rank))
    return (2, int(action.rank))


def evaluate_actions(state: DuelState) -> Dict[Action, Fraction]:
    """
    Safety of every legal move, normalised to sum to 1.
    Empty when no move has any chance of being safe.
    """
    moves = [a for a in state.legal_actions() if isinstance(a, Move)]
    table = state.table()
    safety = {}
    for action in moves:
        p = safe_possibility(state.distance, state.rest_counts, state.hand, table, action)
        safety[action] = p if p is not None else Fraction(0)
    total = sum(safety.values(), Fraction(0))
    if total == 0:
        return {}
    return {action: p / total for action, p in safety.items()}


class Agent(ABC):
    name = 'Agent'

    @abstractmethod
    def get_action(self, state: DuelState) -> Action:
        pass


class RandomAgent(Agent):
    name = 'RandomAgent'

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def get_action(self, state: DuelState) -> Action:
        actions = state.legal_actions()
        if not actions:
            raise EngineError(ErrorCode.ERR_NO_LEGAL_ACTION, f"No legal action for hand {state.hand}")
        return self.rng.choice(actions)


class AlgorithmAgent(Agent):
    """
    Picks an action with the probability policy, in priority order:
    a proven endgame attack, the opening move, the mid-game move, and finally
    the first legal action in default order.
    """
    name = 'AlgorithmAgent'

    def __init__(self, name: str = 'AlgorithmAgent', logger=logger):
        self.name = name
        self.logger = logger

    def get_action(self, state: DuelState) -> Action:
        actions = state.legal_actions()
        if not actions:
            raise EngineError(
                ErrorCode.ERR_NO_LEGAL_ACTION,
                f"No legal action for hand {state.hand}",
                details={'hand': list(state.hand), 'distance': state.distance},
            )

        table = state.table()
        distance = state.distance

        solved = last_move(
            state.rest_counts, state.hand,
            (state.right_position, state.left_position),
            state.parried_count, table,
        )
        if solved is not None:
            rank = CardRank(solved)
            attack = Attack(rank, count_in_hand(state.hand, rank))
            if attack in actions:
                return self._chosen(attack, 'endgame')

        counts = counts_from_hand(state.hand)
        if counts is not None:
            acceptable = AcceptableNumbers.from_counts(counts, state.rest_counts, distance)
            try:
                opening = initial_move(state.hand, distance, acceptable)
            except InapplicablePhaseError:
                opening = None
            if opening is not None:
                if opening in actions:
                    return self._chosen(opening, 'opening')
                self.logger.debug(f"{self.name}: opening {opening} is not legal here, skipping")

        middle = middle_move(state.hand, distance, state.rest_counts, table)
        if middle is not None and middle in actions:
            return self._chosen(middle, 'middle')

        fallback = sorted(actions, key=default_order_key)[0]
        self.logger.warning(f"{self.name}: no policy move at distance {distance}, defaulting to {fallback}")
        return fallback

    def get_evaluation(self, state: DuelState) -> np.ndarray:
        """Normalised move safety spread over the 35 action slots, zeros elsewhere"""
        return evaluation_vector(evaluate_actions(state))

    def _chosen(self, action: Action, reason: str) -> Action:
        self.logger.info(f"{self.name} plays {action} ({reason})")
        return action
