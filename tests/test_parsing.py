"""Tests for lenient numeric parsing and text matching helpers."""

import pytest

from propmatch.utils.numbers import format_figure, parse_amount, parse_bound, within_bounds
from propmatch.utils.text import any_contains, clean_optional, contains, fold, split_terms


class TestNumbers:
    """Tests for numeric parsing and range checks."""

    @pytest.mark.parametrize(
        "value,expected",
        [(3, 3.0), (" 2.5 ", 2.5), ("0", 0.0), ("", None), ("tres", None), (None, None), (False, None)],
    )
    def test_parse_bound(self, value, expected):
        """Test bounds parse leniently."""
        assert parse_bound(value) == expected

    def test_parse_amount_keeps_digits(self):
        """Test currency formatting is stripped from amounts."""
        assert parse_amount("$150.000.000") == 150_000_000
        assert parse_amount("USD 1,250") == 1250
        assert parse_amount(99.5) == 99.5
        assert parse_amount("n/a") is None

    def test_within_bounds(self):
        """Test inclusive bounds, open sides and inverted ranges."""
        assert within_bounds(5, 5, 5)
        assert within_bounds(5)
        assert within_bounds(5, None, 10)
        assert not within_bounds(11, None, 10)
        assert not within_bounds(5, 10, 1)

    @pytest.mark.parametrize(
        "value,expected",
        [(2, "2"), (78.5, "78.5"), (1_500_000, "1,500,000"), (150_000_000.0, "150,000,000"), (1234.567, "1,234.57")],
    )
    def test_format_figure(self, value, expected):
        """Test figures render with separators and never in exponent notation."""
        assert format_figure(value) == expected


class TestText:
    """Tests for text helpers."""

    def test_fold(self):
        """Test folding collapses whitespace and case, keeping accents."""
        assert fold("  Jardín   AMPLIO ") == "jardín amplio"
        assert fold(None) == ""

    def test_contains(self):
        """Test case-insensitive substring matching."""
        assert contains("Las Condes, Santiago", "CONDES")
        assert contains("JARDÍN amplio", "jardín")
        assert contains("anything", "")
        assert not contains(None, "x")

    def test_any_contains(self):
        """Test at least one haystack must contain the needle."""
        assert any_contains(["Garaje", "Piscina climatizada"], "piscina")
        assert not any_contains([], "piscina")

    def test_split_terms(self):
        """Test splitting strings and lists with case-insensitive dedup."""
        assert split_terms("piscina, quincho,, Piscina") == ["piscina", "quincho"]
        assert split_terms(["  Garaje ", None, "garaje"]) == ["Garaje"]
        assert split_terms(None) == []

    def test_clean_optional(self):
        """Test blank strings become None."""
        assert clean_optional("  ") is None
        assert clean_optional(" Condes ") == "Condes"
        assert clean_optional(None) is None
