"""
Unit tests for movie scoring and weekly pick selection.
"""

import unittest
import sys
import os
from types import SimpleNamespace

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from errors import PreconditionError
from pick_scoring import score_candidate, select_best_pick, is_eligible


def candidate(intent, interest=None, watched=False, name=""):
    return SimpleNamespace(
        proposal_intent=intent,
        interest_score=interest,
        watched=watched,
        name=name
    )


class TestScoreCandidate(unittest.TestCase):

    def test_unscored_is_zero(self):
        """Test an unrated movie scores zero whatever the intent."""
        for intent in range(1, 5):
            self.assertEqual(score_candidate(candidate(intent)), 0)

    def test_zero_interest_treated_as_unscored(self):
        """Test an interest score of 0 behaves like no score."""
        self.assertEqual(score_candidate(candidate(4, 0)), 0)

    def test_perfect_match_bonus(self):
        """Test both ratings at 4 earn the bonus."""
        self.assertEqual(score_candidate(candidate(4, 4)), 20)

    def test_low_interest_penalty(self):
        """Test interest of 1 is penalised and can go negative."""
        self.assertEqual(score_candidate(candidate(1, 1)), -7)
        self.assertEqual(score_candidate(candidate(4, 1)), -4)

    def test_plain_product(self):
        """Test ratings with no bonus or penalty."""
        self.assertEqual(score_candidate(candidate(3, 2)), 6)
        self.assertEqual(score_candidate(candidate(2, 4)), 8)
        self.assertEqual(score_candidate(candidate(4, 3)), 12)

    def test_deterministic(self):
        """Test repeated calls give the same answer and leave the input alone."""
        movie = candidate(3, 3)
        results = {score_candidate(movie) for _ in range(5)}
        self.assertEqual(results, {9})
        self.assertEqual(movie.interest_score, 3)

    def test_out_of_range_rejected(self):
        """Test values off the 1-4 scale raise PreconditionError."""
        with self.assertRaises(PreconditionError):
            score_candidate(candidate(5, 2))
        with self.assertRaises(PreconditionError):
            score_candidate(candidate(0, 2))
        with self.assertRaises(PreconditionError):
            score_candidate(candidate(2, 5))
        with self.assertRaises(PreconditionError):
            score_candidate(candidate(2, -1))
        with self.assertRaises(PreconditionError):
            score_candidate(candidate(2.5, 2))


class TestSelectBestPick(unittest.TestCase):

    def test_empty(self):
        self.assertIsNone(select_best_pick([]))

    def test_all_watched(self):
        """Test watched movies never win."""
        movies = [candidate(4, 4, watched=True), candidate(3, 3, watched=True)]
        self.assertIsNone(select_best_pick(movies))

    def test_only_unscored(self):
        self.assertIsNone(select_best_pick([candidate(4), candidate(2)]))

    def test_scored_beats_unscored(self):
        """Test the scored movie is returned even with a negative score."""
        scored = candidate(1, 1, name="scored")
        result = select_best_pick([candidate(4, name="unscored"), scored])
        self.assertIs(result, scored)

    def test_highest_score_wins(self):
        low = candidate(2, 2, name="low")
        high = candidate(4, 4, name="high")
        mid = candidate(3, 3, name="mid")
        self.assertIs(select_best_pick([low, high, mid]), high)

    def test_tie_goes_to_first(self):
        """Test ties go to whichever movie appears first."""
        first = candidate(2, 3, name="first")
        second = candidate(3, 2, name="second")
        self.assertIs(select_best_pick([first, second]), first)
        self.assertIs(select_best_pick([second, first]), second)

    def test_watched_excluded_even_if_best(self):
        best = candidate(4, 4, watched=True, name="watched")
        other = candidate(2, 4, name="other")
        self.assertIs(select_best_pick([best, other]), other)

    def test_accepts_generator(self):
        movies = (candidate(i, 2) for i in range(1, 5))
        self.assertEqual(select_best_pick(movies).proposal_intent, 4)

    def test_is_eligible(self):
        self.assertTrue(is_eligible(candidate(2, 2)))
        self.assertFalse(is_eligible(candidate(2)))
        self.assertFalse(is_eligible(candidate(2, 0)))
        self.assertFalse(is_eligible(candidate(2, 2, watched=True)))


if __name__ == '__main__':
    unittest.main()
