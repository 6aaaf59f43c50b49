"""Card storage and review recording with SM-2 scheduling."""
import logging
from datetime import datetime

from flashdeck.db import get_connection
from flashdeck.models import Card, ReviewEvent
from flashdeck.sm2 import ReviewState, advance, validate_quality

logger = logging.getLogger(__name__)


class CardNotFound(LookupError):
    def __init__(self, card_id: int):
        super().__init__(f"Card not found: {card_id}")
        self.card_id = card_id


def _timestamp(moment: datetime) -> str:
    return moment.isoformat(timespec="seconds")


def create_card(db_path: str, front: str, back: str, now: datetime | None = None) -> dict:
    """Add a new card. It starts with the default review state and is due right away."""
    front = (front or "").strip()
    back = (back or "").strip()
    if not front:
        raise ValueError("Front content is required")
    if not back:
        raise ValueError("Back content is required")
    state = ReviewState.initial(now)
    conn = get_connection(db_path)
    cursor = conn.execute(
        """INSERT INTO cards (front, back, easiness_factor, repetitions, interval, next_review, created_at)
        VALUES (?, ?, ?, ?, ?, ?, ?)""",
        (
            front, back, state.easiness_factor, state.repetitions, state.interval,
            _timestamp(state.next_review), _timestamp(state.next_review),
        ),
    )
    card = conn.execute("SELECT * FROM cards WHERE id = ?", (cursor.lastrowid,)).fetchone()
    conn.close()
    logger.info("Created card %d", card["id"])
    return dict(card)


def get_card(db_path: str, card_id: int) -> dict:
    conn = get_connection(db_path)
    card = conn.execute("SELECT * FROM cards WHERE id = ?", (card_id,)).fetchone()
    conn.close()
    if card is None:
        raise CardNotFound(card_id)
    return dict(card)


def list_cards(db_path: str) -> list:
    conn = get_connection(db_path)
    cards = conn.execute("SELECT * FROM cards ORDER BY next_review ASC, id ASC").fetchall()
    conn.close()
    return [dict(c) for c in cards]


def get_due_cards(db_path: str, limit: int = 15, now: datetime | None = None) -> list:
    conn = get_connection(db_path)
    cutoff = _timestamp(now or datetime.now())
    cards = conn.execute(
        """SELECT * FROM cards
        WHERE next_review <= ?
        ORDER BY next_review ASC, id ASC
        LIMIT ?""",
        (cutoff, limit),
    ).fetchall()
    conn.close()
    return [dict(c) for c in cards]


def get_review_events(db_path: str, card_id: int) -> list[ReviewEvent]:
    """Review history of one card, oldest first."""
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT * FROM reviews WHERE card_id = ? ORDER BY reviewed_at ASC, id ASC", (card_id,)
    ).fetchall()
    conn.close()
    return [ReviewEvent.from_row(r) for r in rows]


def delete_card(db_path: str, card_id: int) -> None:
    """Delete a card together with its review history."""
    conn = get_connection(db_path)
    cursor = conn.execute("DELETE FROM cards WHERE id = ?", (card_id,))
    conn.close()
    if cursor.rowcount == 0:
        raise CardNotFound(card_id)
    logger.info("Deleted card %d", card_id)


def review_card(db_path: str, card_id: int, quality: int, now: datetime | None = None) -> dict:
    """Apply one review to a card and record it.

    The quality is checked before the database is touched. Loading, scheduling,
    saving and logging the review event all run in one write transaction, so a
    concurrent review of the same card waits instead of overwriting this one.

    Returns:
        The updated card row as a dict.

    Raises:
        InvalidQuality: quality is not an integer in 0-5.
        CardNotFound: no card with this id.
    """
    validate_quality(quality)
    reviewed_at = now or datetime.now()
    conn = get_connection(db_path)
    try:
        conn.execute("BEGIN IMMEDIATE")
        row = conn.execute("SELECT * FROM cards WHERE id = ?", (card_id,)).fetchone()
        if row is None:
            raise CardNotFound(card_id)
        state = advance(Card.from_row(row).review_state, quality, now=reviewed_at)
        conn.execute(
            """UPDATE cards SET easiness_factor=?, repetitions=?, interval=?, next_review=?
            WHERE id=?""",
            (state.easiness_factor, state.repetitions, state.interval, _timestamp(state.next_review), card_id),
        )
        conn.execute(
            "INSERT INTO reviews (card_id, quality, reviewed_at) VALUES (?, ?, ?)",
            (card_id, quality, _timestamp(reviewed_at)),
        )
        updated = dict(conn.execute("SELECT * FROM cards WHERE id = ?", (card_id,)).fetchone())
        conn.execute("COMMIT")
    except BaseException:
        if conn.in_transaction:
            conn.execute("ROLLBACK")
        raise
    finally:
        conn.close()
    logger.info(
        "Reviewed card %d with quality %d: interval=%d repetitions=%d",
        card_id, quality, state.interval, state.repetitions,
    )
    return updated
