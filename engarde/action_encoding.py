"""
action_encoding.py

x = encode_action(Attack(CardRank.THREE, Quantity.TWO))
print(x.shape)    # (35,)

Actions as slots of a fixed 35-wide vector:
    0-4    forward move with rank 1-5
    5-9    back move with rank 1-5
    10-34  attack, 5 slots per rank for quantity 1-5
"""
from typing import Dict

import numpy as np

from engarde.duel_types import HAND_SIZE, Action, Attack, CardRank, Direction, Move, Quantity

NUM_RANKS = len(CardRank)
NUM_ACTIONS = 2 * NUM_RANKS + NUM_RANKS * HAND_SIZE
ATTACK_OFFSET = 2 * NUM_RANKS


def action_to_index(action: Action) -> int:
    if isinstance(action, Move):
        if action.direction is Direction.FORWARD:
            return action.rank.index
        return NUM_RANKS + action.rank.index
    if isinstance(action, Attack):
        return ATTACK_OFFSET + HAND_SIZE * action.rank.index + (int(action.quantity) - 1)
    raise TypeError(f"Not an action: {action!r}")


def action_from_index(idx: int) -> Action:
    if not 0 <= idx < NUM_ACTIONS:
        raise ValueError(f"Action index must be within 0..{NUM_ACTIONS - 1}, got {idx}")
    if idx < NUM_RANKS:
        return Move(CardRank(idx + 1), Direction.FORWARD)
    if idx < ATTACK_OFFSET:
        return Move(CardRank(idx - NUM_RANKS + 1), Direction.BACK)
    rank_slot, quantity_slot = divmod(idx - ATTACK_OFFSET, HAND_SIZE)
    return Attack(CardRank(rank_slot + 1), Quantity(quantity_slot + 1))


def encode_action(action: Action) -> np.ndarray:
    """One-hot float32 vector for a single action"""
    vec = np.zeros(NUM_ACTIONS, dtype=np.float32)
    vec[action_to_index(action)] = 1.0
    return vec


def decode_action(vec: np.ndarray) -> Action:
    """Action with the highest score; ties resolve to the lowest index"""
    vec = np.asarray(vec)
    if vec.shape != (NUM_ACTIONS,):
        raise ValueError(f"Expected a vector of shape ({NUM_ACTIONS},), got {vec.shape}")
    return action_from_index(int(np.argmax(vec)))


def evaluation_vector(evaluation: Dict[Action, object]) -> np.ndarray:
    """Spread per-action scores (fractions or floats) over the 35 action slots"""
    vec = np.zeros(NUM_ACTIONS, dtype=np.float64)
    for action, score in evaluation.items():
        vec[action_to_index(action)] = float(score)
    return vec
