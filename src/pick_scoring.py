"""
Weekly pick scoring.

A proposed movie is scored from two ratings on the 1-4 scale: the proposer's
own intent and the interest score given by another member. The weekly pick
is the best scored movie that has been rated and not yet watched.
"""

from errors import PreconditionError
from utils import (
    MIN_RATING,
    MAX_RATING,
    PERFECT_MATCH_BONUS,
    LOW_INTEREST_PENALTY,
    is_valid_rating
)


def _check_rating(name, value):
    if not is_valid_rating(value):
        raise PreconditionError(
            f"{name} must be an integer between {MIN_RATING} and {MAX_RATING}, got {value!r}"
        )


def score_candidate(candidate):
    """
    Score a single proposed movie.

    Args:
        candidate: Object with proposal_intent and interest_score attributes

    Returns:
        Integer score, 0 for an unrated movie. Can be negative.

    Raises:
        PreconditionError: if either rating is outside 1-4
    """
    _check_rating("proposal_intent", candidate.proposal_intent)

    interest = candidate.interest_score
    if not interest:
        return 0
    _check_rating("interest_score", interest)

    score = candidate.proposal_intent * interest

    # Both members maximally keen
    if candidate.proposal_intent == MAX_RATING and interest == MAX_RATING:
        score += PERFECT_MATCH_BONUS

    # Strong signal to skip this one, whatever the proposer thought
    if interest == MIN_RATING:
        score -= LOW_INTEREST_PENALTY

    return score


def is_eligible(candidate):
    """Unwatched and scored. An interest score of 0 counts as unscored."""
    return not candidate.watched and bool(candidate.interest_score)


def select_best_pick(candidates):
    """
    Pick the highest scored movie that is rated and unwatched.

    Ties go to whichever movie comes first in `candidates`.

    Returns:
        The winning candidate, or None when nothing is eligible
    """
    best = None
    best_score = None
    for candidate in candidates:
        if not is_eligible(candidate):
            continue
        score = score_candidate(candidate)
        if best_score is None or score > best_score:
            best, best_score = candidate, score
    return best
