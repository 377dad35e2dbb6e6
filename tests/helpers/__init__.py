"""Test helpers shared across unit and integration tests."""
