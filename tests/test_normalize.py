"""Tests for chat_budget/normalize.py."""
from __future__ import annotations

import pytest

from chat_budget.normalize import normalize, to_half_width


class TestToHalfWidth:
    def test_full_width_letters_digits_symbols(self):
        assert to_half_width("Ａ１％") == "A1%"

    def test_curly_quotes(self):
        assert to_half_width("“test”") == '"test"'
        assert to_half_width("‘it’") == "'it'"

    def test_full_alphabet(self):
        assert to_half_width("ＡＢＣＸＹＺａｂｃｘｙｚ０１２９") == "ABCXYZabcxyz0129"

    def test_punctuation(self):
        assert to_half_width("（［｛＜＞｝］）") == "([{<>}])"
        assert to_half_width("＼＾＿｀｜￣") == "\\^_`|~"

    def test_unmapped_text_unchanged(self):
        text = "Hello, 世界! Ｃａｆé ～"
        assert to_half_width(text) == "Hello, 世界! Café ~"

    def test_ascii_unchanged(self):
        text = "plain ascii text (with) [brackets] and \"quotes\""
        assert to_half_width(text) == text

    def test_empty(self):
        assert to_half_width("") == ""

    @pytest.mark.parametrize("text", [
        "Ａ１％",
        "“ｑｕｏｔｅｄ”  ‘ｓｉｎｇｌｅ’",
        "mixed Ｆｕｌｌ and half ＠＃＆",
        "",
    ])
    def test_idempotent(self, text):
        once = to_half_width(text)
        assert to_half_width(once) == once

    def test_normalize_alias(self):
        assert normalize is to_half_width
