"""Tests for the request session dependency."""

import pytest

from app.database import SessionLocal, get_db
from app.models.categories import Category


class TestGetDb:
    def test_failed_request_is_rolled_back(self) -> None:
        """Should discard pending changes when the request raises."""
        sessions = get_db()
        db = next(sessions)
        db.add(Category(name="Pending"))
        db.flush()

        with pytest.raises(RuntimeError):
            sessions.throw(RuntimeError("handler failed"))

        check = SessionLocal()
        try:
            assert check.query(Category).filter(Category.name == "Pending").first() is None
        finally:
            check.close()

    def test_session_closed_after_success(self) -> None:
        sessions = get_db()
        db = next(sessions)
        db.add(Category(name="Committed"))
        db.commit()

        with pytest.raises(StopIteration):
            next(sessions)

        check = SessionLocal()
        try:
            assert check.query(Category).filter(Category.name == "Committed").count() == 1
        finally:
            check.close()
