"""
Tests for the commit helper shared by every service.
"""
import pytest
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from snapserve.core.exceptions import StorageError
from snapserve.db.session import commit_or_raise


class TestCommitOrRaise:
    """Test how commit failures are surfaced."""

    def test_storage_error_carries_logged_correlation_id(self, db: Session, monkeypatch, caplog):
        """Test the id returned to the caller is the one written to the log."""
        def broken_commit():
            raise OperationalError("COMMIT", {}, Exception("server has gone away"))

        monkeypatch.setattr(db, "commit", broken_commit)

        with caplog.at_level("ERROR"):
            with pytest.raises(StorageError) as exc_info:
                commit_or_raise(db)

        correlation_id = exc_info.value.correlation_id
        assert correlation_id
        assert correlation_id in caplog.text

    def test_integrity_error_is_passed_through(self, db: Session, monkeypatch):
        def conflicting_commit():
            raise IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))

        monkeypatch.setattr(db, "commit", conflicting_commit)

        with pytest.raises(IntegrityError):
            commit_or_raise(db)
