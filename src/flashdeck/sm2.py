"""SM-2 spaced repetition algorithm."""
import logging
import math
from dataclasses import dataclass, replace
from datetime import datetime, timedelta

logger = logging.getLogger(__name__)

MIN_QUALITY = 0
MAX_QUALITY = 5
PASSING_QUALITY = 3
MIN_EASINESS_FACTOR = 1.3
DEFAULT_EASINESS_FACTOR = 2.5
MAX_INTERVAL = 36500  # days; keeps next_review inside datetime range


class InvalidQuality(ValueError):
    """Raised when a recall quality is not an integer in 0-5."""

    def __init__(self, quality):
        super().__init__(f"Quality must be an integer between {MIN_QUALITY} and {MAX_QUALITY}, got {quality!r}")
        self.quality = quality


@dataclass(frozen=True)
class ReviewState:
    easiness_factor: float
    repetitions: int
    interval: int
    next_review: datetime

    @classmethod
    def initial(cls, now: datetime | None = None) -> "ReviewState":
        """State of a card that has never been reviewed: due immediately."""
        return cls(
            easiness_factor=DEFAULT_EASINESS_FACTOR,
            repetitions=0,
            interval=0,
            next_review=now or datetime.now(),
        )


def validate_quality(quality) -> int:
    # bool is an int subclass but True/False are not ratings
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise InvalidQuality(quality)
    if quality < MIN_QUALITY or quality > MAX_QUALITY:
        raise InvalidQuality(quality)
    return quality


def is_lapse(quality: int) -> bool:
    return validate_quality(quality) < PASSING_QUALITY


def next_easiness_factor(easiness_factor: float, quality: int) -> float:
    delta = 0.1 - (5 - quality) * (0.08 + (5 - quality) * 0.02)
    return max(MIN_EASINESS_FACTOR, easiness_factor + delta)


def advance(state: ReviewState, quality: int, now: datetime | None = None) -> ReviewState:
    """Calculate the next review state using SM-2.

    Args:
        state: Current review state of the card.
        quality: Rating 0-5 (0=complete blackout, 5=perfect). Below 3 is a lapse.
        now: Instant the review is recorded. Defaults to the system clock.

    Returns:
        A new ReviewState. The input state is never modified.

    Raises:
        InvalidQuality: quality is not an integer in 0-5.
    """
    validate_quality(quality)
    reviewed_at = now or datetime.now()

    if quality < PASSING_QUALITY:
        # Lapse: start the streak over, keep the ease factor
        logger.debug("Lapse with quality %d after %d repetitions", quality, state.repetitions)
        new_ef = state.easiness_factor
        new_repetitions = 0
        new_interval = 1
    else:
        new_ef = next_easiness_factor(state.easiness_factor, quality)
        new_repetitions = state.repetitions + 1
        if new_repetitions == 1:
            new_interval = 1
        elif new_repetitions == 2:
            new_interval = 6
        else:
            # max() only matters for hand-built states with interval 0
            new_interval = min(MAX_INTERVAL, max(1, math.ceil(state.interval * new_ef)))

    return replace(
        state,
        easiness_factor=new_ef,
        repetitions=new_repetitions,
        interval=new_interval,
        next_review=reviewed_at + timedelta(days=new_interval),
    )
