"""Tests for line normalization and the strategy chain helper."""

from receipt_fields.parsers.base import ParseResult, ReceiptContext, first_success
from receipt_fields.parsers.normalizer import normalize_lines, to_ascii_digits


class TestNormalizeLines:
    """Test suite for normalize_lines."""

    def test_trims_and_drops_blank_lines(self):
        text = "  セブンイレブン  \n\n   \n合計 ¥500\r\n"
        assert normalize_lines(text) == ["セブンイレブン", "合計 ¥500"]

    def test_empty_text(self):
        assert normalize_lines("") == []
        assert normalize_lines(None) == []

    def test_preserves_order(self):
        assert normalize_lines("c\nb\na") == ["c", "b", "a"]

    def test_full_width_space_is_trimmed(self):
        assert normalize_lines("　ローソン　") == ["ローソン"]

    def test_context_builds_lines(self):
        context = ReceiptContext(full_text="a b c\n\n d ")
        assert context.lines == ["a b c", "d"]

    def test_context_accepts_none(self):
        context = ReceiptContext(full_text=None)
        assert context.full_text == ""
        assert context.lines == []


class TestToAsciiDigits:
    """Full-width digits are common in Japanese OCR output."""

    def test_full_width_digits(self):
        assert to_ascii_digits("１２３４") == "1234"

    def test_other_characters_untouched(self):
        assert to_ascii_digits("T１2-3") == "T12-3"


class TestFirstSuccess:
    """Test suite for the ordered strategy reducer."""

    def setup_method(self):
        self.context = ReceiptContext(full_text="text")
        self.calls = []

    def _strategy(self, name, value):
        def run(context):
            self.calls.append(name)
            return ParseResult(value=value, confidence=1.0) if value is not None else None
        return run

    def test_first_hit_wins_and_stops(self):
        strategies = [
            ('a', self._strategy('a', None)),
            ('b', self._strategy('b', 'B')),
            ('c', self._strategy('c', 'C')),
        ]

        result = first_success(strategies, self.context)

        assert result.value == 'B'
        assert result.metadata['strategy'] == 'b'
        assert self.calls == ['a', 'b']

    def test_all_miss(self):
        strategies = [('a', self._strategy('a', None))]
        assert first_success(strategies, self.context) is None
