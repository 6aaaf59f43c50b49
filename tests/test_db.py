"""Tests for database initialization and connection management."""
import sqlite3

import pytest

from flashdeck.db import init_db, get_connection


def test_init_db_creates_tables(tmp_db):
    init_db(tmp_db)
    conn = get_connection(tmp_db)
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name"
    )
    tables = {row[0] for row in cursor.fetchall()}
    assert {"cards", "reviews"}.issubset(tables)
    conn.close()


def test_init_db_is_idempotent(tmp_db):
    init_db(tmp_db)
    init_db(tmp_db)  # should not raise
    conn = get_connection(tmp_db)
    cursor = conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
    assert len(cursor.fetchall()) > 0
    conn.close()


def test_init_db_creates_parent_dir(tmp_path):
    db_path = str(tmp_path / "nested" / "deck.db")
    init_db(db_path)
    assert (tmp_path / "nested" / "deck.db").exists()


def test_reviews_reject_out_of_range_quality(tmp_db):
    init_db(tmp_db)
    conn = get_connection(tmp_db)
    conn.execute(
        "INSERT INTO cards (front, back, next_review) VALUES ('Q', 'A', '2026-03-02T09:30:00')"
    )
    with pytest.raises(sqlite3.IntegrityError):
        conn.execute("INSERT INTO reviews (card_id, quality, reviewed_at) VALUES (1, 6, 'x')")
    conn.close()
