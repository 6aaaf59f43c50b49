"""Review history statistics: activity heatmap and retention."""
from datetime import datetime

from flashdeck.db import get_connection
from flashdeck.sm2 import PASSING_QUALITY


def get_heatmap_data(db_path: str) -> list[dict]:
    """Number of reviews per calendar day, oldest day first."""
    conn = get_connection(db_path)
    rows = conn.execute(
        """SELECT substr(reviewed_at, 1, 10) as day, COUNT(*) as count
        FROM reviews
        GROUP BY day
        ORDER BY day ASC"""
    ).fetchall()
    conn.close()
    return [{"date": r["day"], "count": r["count"]} for r in rows]


def get_retention(db_path: str) -> float:
    conn = get_connection(db_path)
    row = conn.execute(
        "SELECT COUNT(*) as t, SUM(CASE WHEN quality >= ? THEN 1 ELSE 0 END) as c FROM reviews",
        (PASSING_QUALITY,),
    ).fetchone()
    conn.close()
    if not row["t"]:
        return 0.0
    return round((row["c"] / row["t"]) * 100, 1)


def get_review_stats(db_path: str, now: datetime | None = None) -> dict:
    cutoff = (now or datetime.now()).isoformat(timespec="seconds")
    conn = get_connection(db_path)
    total_cards = conn.execute("SELECT COUNT(*) FROM cards").fetchone()[0]
    due_cards = conn.execute("SELECT COUNT(*) FROM cards WHERE next_review <= ?", (cutoff,)).fetchone()[0]
    reviews = conn.execute("SELECT COUNT(*) FROM reviews").fetchone()[0]
    lapses = conn.execute("SELECT COUNT(*) FROM reviews WHERE quality < ?", (PASSING_QUALITY,)).fetchone()[0]
    avg_row = conn.execute("SELECT AVG(easiness_factor) as avg FROM cards").fetchone()
    avg_ef = round(avg_row["avg"], 2) if avg_row["avg"] else 0.0
    conn.close()
    return {
        "total_cards": total_cards,
        "due_cards": due_cards,
        "reviews": reviews,
        "lapses": lapses,
        "retention": get_retention(db_path),
        "avg_easiness_factor": avg_ef,
    }
