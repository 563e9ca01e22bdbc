"""Tests for input normalization helpers."""

from app.core.validation import canonicalize, normalize_single_line


class TestNormalizeSingleLine:
    def test_none_passthrough(self):
        assert normalize_single_line(None) is None

    def test_newlines_become_spaces(self):
        assert normalize_single_line("10th\nGrade") == "10th Grade"

    def test_preserves_case(self):
        assert normalize_single_line("  /uploads/Doc.PDF ") == "/uploads/Doc.PDF"

    def test_unicode_nfc(self):
        decomposed = "Ecole\u0301"
        assert normalize_single_line(decomposed) == "Ecol\u00e9"


class TestCanonicalize:
    def test_lowercases_and_trims(self):
        assert canonicalize("  Mathematics ") == "mathematics"

    def test_blank_is_none(self):
        assert canonicalize("   ") is None
        assert canonicalize("") is None
        assert canonicalize(None) is None

    def test_strips_control_characters(self):
        assert canonicalize("DPS\x00") == "dps"
