"""Tests for the scoped logging context."""

import pytest

from propmatch.logging.context import (
    get_log_context,
    log_context,
    pop_log_context,
    push_log_context,
)


class TestLogContext:
    """Tests for scoped logging fields."""

    def test_scope_adds_and_removes_fields(self):
        """Test fields exist only inside the block."""
        with log_context(listing_id="l1") as fields:
            assert fields == {"listing_id": "l1"}
            assert get_log_context() == {"listing_id": "l1"}

        assert get_log_context() == {}

    def test_nested_scopes(self):
        """Test inner scopes extend and override outer ones."""
        with log_context(listing_id="l1", run_id="r1"):
            with log_context(run_id="r2", profile_id="p1"):
                assert get_log_context() == {
                    "listing_id": "l1",
                    "run_id": "r2",
                    "profile_id": "p1",
                }
            assert get_log_context() == {"listing_id": "l1", "run_id": "r1"}

    def test_none_values_ignored(self):
        """Test None fields are not added."""
        with log_context(listing_id="l1", created_by=None):
            assert get_log_context() == {"listing_id": "l1"}

    def test_restored_after_exception(self):
        """Test the context is restored when the block raises."""
        with pytest.raises(RuntimeError):
            with log_context(listing_id="l1"):
                raise RuntimeError("boom")

        assert get_log_context() == {}

    def test_push_and_pop(self):
        """Test the token API restores the previous context."""
        token = push_log_context(run_id="r1")
        assert get_log_context()["run_id"] == "r1"

        pop_log_context(token)

        assert "run_id" not in get_log_context()
