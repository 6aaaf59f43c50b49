"""Data classes for cards and their review history."""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from flashdeck.sm2 import DEFAULT_EASINESS_FACTOR, ReviewState


@dataclass
class Card:
    id: int
    front: str
    back: str
    easiness_factor: float = DEFAULT_EASINESS_FACTOR
    repetitions: int = 0
    interval: int = 0
    next_review: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row) -> "Card":
        return cls(**{k: row[k] for k in row.keys()})

    @property
    def review_state(self) -> ReviewState:
        next_review = datetime.fromisoformat(self.next_review) if self.next_review else datetime.now()
        return ReviewState(
            easiness_factor=self.easiness_factor,
            repetitions=self.repetitions,
            interval=self.interval,
            next_review=next_review,
        )


@dataclass
class ReviewEvent:
    id: int
    card_id: int
    quality: int
    reviewed_at: Optional[str] = None

    @classmethod
    def from_row(cls, row) -> "ReviewEvent":
        return cls(**{k: row[k] for k in row.keys()})
