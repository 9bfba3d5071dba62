"""Tests for utility functions."""

import pytest

from aitools.utils import parse_bool, sanitize_input


class TestSanitizeInput:
    """Tests for sanitize_input function."""

    def test_removes_html_tags(self):
        result = sanitize_input("<script>alert('xss')</script>")
        assert "<" not in result
        assert ">" not in result
        assert "'" not in result

    def test_ampersand_is_escaped_once(self):
        assert sanitize_input("a & <b>") == "a &amp; &lt;b&gt;"

    def test_quotes(self):
        assert sanitize_input("\"x\"") == "&quot;x&quot;"

    def test_empty_string(self):
        assert sanitize_input("") == ""

    def test_non_string_input(self):
        assert sanitize_input(123) == ""
        assert sanitize_input(None) == ""


class TestParseBool:
    """Tests for parse_bool function."""

    @pytest.mark.parametrize("value", [True, "1", "true", "TRUE", "yes", "on", " on "])
    def test_true_values(self, value):
        assert parse_bool(value) is True

    @pytest.mark.parametrize("value", [False, "0", "false", "no", "off", ""])
    def test_false_values(self, value):
        assert parse_bool(value) is False

    def test_default(self):
        assert parse_bool(None) is False
        assert parse_bool(None, default=True) is True
