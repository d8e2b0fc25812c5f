"""Rating aggregation.

A joke keeps only its running mean and vote count; individual votes are not
stored. Each new vote is folded in with:

    new_rating = (rating * votes + value) / (votes + 1)

The caller validates the vote first and bumps ``votes`` itself.
"""

import math

from jokeapi.errors import RatingValidationError

MIN_RATING = 0.0
MAX_RATING = 5.0


def apply_rating(current_rating: float, current_votes: int, new_value: float) -> float:
    """Fold one vote into a weighted-average rating.

    Assumes ``new_value`` was already validated. With ``current_votes == 0``
    the result is ``new_value``.

    Args:
        current_rating: Current mean rating.
        current_votes: Number of votes behind the current rating.
        new_value: Incoming vote.

    Returns:
        Updated mean rating.
    """
    return (current_rating * current_votes + new_value) / (current_votes + 1)


def validate_rating_value(value: object) -> float:
    """Validate a raw vote from a request body.

    Zero is a valid vote and is weighted into the average like any other.

    Raises:
        RatingValidationError: If value is missing, not a real number, not
            finite, or outside [0, 5].
    """
    # bool is an int subclass; JSON true/false is not a rating
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise RatingValidationError(value)
    if isinstance(value, float) and not math.isfinite(value):
        raise RatingValidationError(value)
    # int/float comparison is exact, so huge JSON integers never reach float()
    if not MIN_RATING <= value <= MAX_RATING:
        raise RatingValidationError(value)
    return float(value)
