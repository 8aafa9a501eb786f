"""
play_tracker.py

Track which cards have been seen played during the current round
"""
from engarde.core_duel_mechanics import RestCounts
from engarde.duel_types import Action
from engarde.probability import ProbabilityTable


class PlayTracker:
    """Running tally of visible cards and opponent parries, reset every round"""

    def __init__(self):
        self.rest_counts = RestCounts.fresh()
        self.parried_count = 0

    def record_play(self, action: Action):
        """Record a play by either side"""
        self.rest_counts = self.rest_counts.after_play(action)

    def record_parry(self):
        """Record that the opponent parried instead of ending the round"""
        self.parried_count += 1

    def table(self, deck_size: int) -> ProbabilityTable:
        """Opponent-hand distribution for the current snapshot"""
        return ProbabilityTable.from_deck(deck_size, self.rest_counts)

    def get_status(self) -> str:
        return f"{self.rest_counts} | unseen: {self.rest_counts.total()} | parried: {self.parried_count}"

    def reset_for_new_round(self):
        self.rest_counts = RestCounts.fresh()
        self.parried_count = 0
