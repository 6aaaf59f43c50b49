from datetime import datetime

import pytest


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_flashdeck.db")
    return db_path


@pytest.fixture
def now():
    """Fixed review clock."""
    return datetime(2026, 3, 2, 9, 30, 0)
