"""Tests for identifier helpers."""

from propmatch.utils.hashing import compute_notification_id, hash_string, new_entity_id


class TestHashing:
    """Tests for identifier helpers."""

    def test_notification_id_is_deterministic(self):
        """Test the same pair always yields the same id."""
        first = compute_notification_id("listing-1", "profile-1")

        assert first == compute_notification_id(" listing-1 ", "profile-1")
        assert first == hash_string("listing-1:profile-1")
        assert len(first) == 64

    def test_notification_id_differs_per_pair(self):
        """Test swapping the pair changes the id."""
        assert compute_notification_id("a", "b") != compute_notification_id("b", "a")

    def test_new_entity_id_unique(self):
        """Test fresh ids are 32 hex characters and unique."""
        ids = {new_entity_id() for _ in range(50)}

        assert len(ids) == 50
        assert all(len(value) == 32 for value in ids)
