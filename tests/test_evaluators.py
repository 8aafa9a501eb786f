"""
Unit tests for engarde/evaluators.py
"""
import random
import unittest
from fractions import Fraction

from engarde.core_duel_mechanics import RestCounts
from engarde.duel_types import Attack, CardRank, Direction, Move, Quantity
from engarde.evaluators import safe_possibility, win_poss_attack
from engarde.probability import build_probability_table


class TestSafePossibilityAttack(unittest.TestCase):
    def setUp(self):
        self.rest = RestCounts.fresh()
        self.table = build_probability_table(self.rest, 20)
        self.p3 = self.table.distribution(CardRank.THREE)

    def test_all_unseen_copies_held_is_certain(self):
        rest = RestCounts.from_ints([5, 5, 3, 5, 5])
        table = build_probability_table(rest, 20)
        safety = safe_possibility(3, rest, [3, 3, 3], table, Attack(3, 3))
        self.assertEqual(safety, 1)

    def test_sums_opponent_holdings_we_can_match(self):
        safety = safe_possibility(3, self.rest, [3, 3], self.table, Attack(3, 2))
        self.assertEqual(safety, self.p3[0] + self.p3[1] + self.p3[2])

    def test_lethal_count_is_included(self):
        safety = safe_possibility(3, self.rest, [3, 3, 3, 3], self.table, Attack(3, 4))
        self.assertEqual(safety, self.p3[0] + self.p3[1] + self.p3[2] + self.p3[3])

    def test_malformed_hand(self):
        self.assertIsNone(safe_possibility(3, self.rest, [3, 3, 3, 3, 3, 3], self.table, Attack(3, 3)))

    def test_not_an_action(self):
        with self.assertRaises(TypeError):
            safe_possibility(3, self.rest, [3], self.table, "attack")


class TestSafePossibilityMove(unittest.TestCase):
    def setUp(self):
        self.rest = RestCounts.fresh()
        self.table = build_probability_table(self.rest, 20)

    def test_forward_to_half_distance_reserves_a_copy(self):
        # distance 6, forward 3: the opponent can answer with a 3 and we hold one spare
        safety = safe_possibility(6, self.rest, [3, 3], self.table, Move(3, Direction.FORWARD))
        p3 = self.table.distribution(CardRank.THREE)
        self.assertEqual(safety, p3[0] + p3[1])

    def test_forward_guard_counts_reserved_copy(self):
        rest = RestCounts.from_ints([5, 5, 1, 5, 5])
        table = build_probability_table(rest, 20)
        safety = safe_possibility(6, rest, [3, 3], table, Move(3, Direction.FORWARD))
        self.assertEqual(safety, 1)

    def test_forward_guard_fails_without_spare(self):
        rest = RestCounts.from_ints([5, 5, 1, 5, 5])
        table = build_probability_table(rest, 20)
        safety = safe_possibility(6, rest, [3], table, Move(3, Direction.FORWARD))
        p3 = table.distribution(CardRank.THREE)
        self.assertEqual(safety, p3[0])

    def test_forward_uses_rank_at_new_distance(self):
        safety = safe_possibility(5, self.rest, [1, 2, 3, 3], self.table, Move(2, Direction.FORWARD))
        p3 = self.table.distribution(CardRank.THREE)
        self.assertEqual(safety, p3[0] + p3[1] + p3[2])

    def test_forward_out_of_attack_range(self):
        self.assertIsNone(safe_possibility(10, self.rest, [2], self.table, Move(2, Direction.FORWARD)))

    def test_forward_past_opponent(self):
        self.assertIsNone(safe_possibility(2, self.rest, [4], self.table, Move(4, Direction.FORWARD)))

    def test_back_uses_rank_at_new_distance(self):
        safety = safe_possibility(2, self.rest, [1, 3], self.table, Move(1, Direction.BACK))
        p3 = self.table.distribution(CardRank.THREE)
        self.assertEqual(safety, p3[0] + p3[1])

    def test_back_guard(self):
        rest = RestCounts.from_ints([1, 5, 5, 5, 5])
        table = build_probability_table(rest, 20)
        self.assertEqual(safe_possibility(2, rest, [1], table, Move(1, Direction.BACK)), 1)

    def test_back_out_of_attack_range(self):
        self.assertIsNone(safe_possibility(4, self.rest, [2], self.table, Move(2, Direction.BACK)))

    def test_malformed_hand_forward(self):
        self.assertIsNone(safe_possibility(6, self.rest, [3] * 6, self.table, Move(3, Direction.FORWARD)))

    def test_malformed_hand_back(self):
        self.assertIsNone(safe_possibility(2, self.rest, [1] * 6, self.table, Move(1, Direction.BACK)))

    def test_unknown_rank_in_hand_move(self):
        self.assertIsNone(safe_possibility(6, self.rest, [3, 7], self.table, Move(3, Direction.FORWARD)))


class TestWinPossAttack(unittest.TestCase):
    def setUp(self):
        self.rest = RestCounts.fresh()
        self.table = build_probability_table(self.rest, 20)
        self.p3 = self.table.distribution(CardRank.THREE)

    def test_more_copies_than_unseen_is_certain(self):
        rest = RestCounts.from_ints([5, 5, 1, 5, 5])
        table = build_probability_table(rest, 20)
        self.assertEqual(win_poss_attack(rest, [3, 3], table, Attack(3, 2)), 1)

    def test_equal_copies_is_not_certain(self):
        rest = RestCounts.from_ints([5, 5, 2, 5, 5])
        table = build_probability_table(rest, 20)
        p3 = table.distribution(CardRank.THREE)
        self.assertEqual(win_poss_attack(rest, [3, 3], table, Attack(3, 2)), p3[0] + p3[1])

    def test_needs_strictly_more_copies(self):
        self.assertEqual(win_poss_attack(self.rest, [3], self.table, Attack(3, 1)), self.p3[0])
        self.assertEqual(
            win_poss_attack(self.rest, [3, 3, 3], self.table, Attack(3, 3)),
            self.p3[0] + self.p3[1] + self.p3[2],
        )

    def test_moves_never_win(self):
        self.assertEqual(win_poss_attack(self.rest, [3], self.table, Move(3, Direction.FORWARD)), 0)

    def test_malformed_hand(self):
        self.assertIsNone(win_poss_attack(self.rest, [9], self.table, Attack(3, 1)))


class TestEvaluatorProperties(unittest.TestCase):
    def test_win_never_exceeds_safety(self):
        rng = random.Random(2024)
        for _ in range(500):
            rest = RestCounts.from_ints([rng.randint(0, 5) for _ in range(5)])
            table = build_probability_table(rest, rng.randint(5, 25))
            hand = sorted(rng.randint(1, 5) for _ in range(rng.randint(1, 5)))
            rank = CardRank(rng.choice(hand))
            attack = Attack(rank, Quantity(hand.count(rank)))
            safety = safe_possibility(int(rank), rest, hand, table, attack)
            win = win_poss_attack(rest, hand, table, attack)
            self.assertTrue(Fraction(0) <= win <= safety <= Fraction(1), f"{rest} {hand} {attack}")

    def test_move_safety_within_unit_interval(self):
        rng = random.Random(99)
        for _ in range(500):
            rest = RestCounts.from_ints([rng.randint(0, 5) for _ in range(5)])
            table = build_probability_table(rest, rng.randint(5, 25))
            hand = [rng.randint(1, 5) for _ in range(rng.randint(1, 5))]
            move = Move(rng.choice(hand), rng.choice(list(Direction)))
            safety = safe_possibility(rng.randint(1, 22), rest, hand, table, move)
            if safety is not None:
                self.assertTrue(0 <= safety <= 1)


if __name__ == '__main__':
    unittest.main()
