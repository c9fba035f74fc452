"""Tests for AmountParser component."""

import pytest
from receipt_fields.parsers.amount_parser import AmountParser, keyword_pattern, parse_amount
from receipt_fields.parsers.base import ReceiptContext


class TestAmountParser:
    """Test suite for AmountParser."""

    def setup_method(self):
        """Set up test fixtures."""
        self.parser = AmountParser()

    def _parse(self, text):
        return self.parser.parse(ReceiptContext(full_text=text))

    def test_basic_yen_amount(self):
        """Test parsing 合計 with a yen sign."""
        result = self._parse("合計 ¥1,234")

        assert result is not None
        assert result.value == 1234
        assert result.metadata['strategy'] == 'keyword'

    def test_keyword_beats_larger_symbol_amount(self):
        """A labeled total wins regardless of magnitude."""
        text = """
        ドリップコーヒー ¥5,000
        合計 ¥1,200
        """

        result = self._parse(text)

        assert result.value == 1200
        assert result.metadata['strategy'] == 'keyword'

    def test_max_of_keyword_candidates(self):
        """Subtotal and total are both keywords; the larger one is taken."""
        text = """
        小計 ¥1,400
        合計 ¥1,540
        """

        result = self._parse(text)

        assert result.value == 1540
        assert sorted(result.metadata['candidates']) == [1400, 1540]

    def test_symbol_fallback_takes_max(self):
        """Without keywords the largest currency-marked amount is used."""
        text = """
        コーヒー ¥450
        ケーキ 600円
        """

        result = self._parse(text)

        assert result.value == 600
        assert result.metadata['strategy'] == 'symbol'

    def test_keyword_line_not_in_symbol_pool(self):
        """Currency-marked numbers on a keyword line count as keyword candidates."""
        result = self._parse("合計 (税込) ¥1,100")

        assert result.value == 1100
        assert result.metadata['strategy'] == 'keyword'
        assert result.metadata['candidates'] == [1100]

    def test_spaced_keyword_and_dot_grouping(self):
        """Test OCR spacing inside 合計 and a dot read for the comma."""
        result = self._parse("合 計 1.500")

        assert result.value == 1500

    def test_garbled_keyword(self):
        """Test 合計 misread as 全言十."""
        result = self._parse("全 言 十 2,980")

        assert result.value == 2980
        assert result.metadata['strategy'] == 'keyword'

    def test_receipt_number_after_keyword_ignored(self):
        """A number separated from the keyword by other text is not an amount."""
        text = """
        領収書 No.5012
        合計 ¥1,080
        """

        result = self._parse(text)

        assert result.value == 1080
        assert result.metadata['candidates'] == [1080]

    def test_keyword_number_with_colon(self):
        assert self._parse("合計：2,200").value == 2200

    def test_english_total(self):
        assert self._parse("Total: 3,300").value == 3300

    @pytest.mark.parametrize("line, expected", [
        ("\\2,500", 2500),
        ("y 800", 800),
        ("￥1,980", 1980),
        ("お買上げ 1,234円", 1234),
    ])
    def test_yen_symbol_variants(self, line, expected):
        result = self._parse(line)

        assert result.value == expected
        assert result.metadata['strategy'] == 'symbol'

    def test_zero_amount_rejected(self):
        assert self._parse("合計 ¥0") is None

    def test_no_amount(self):
        assert self._parse("ありがとうございました") is None
        assert self._parse("") is None


class TestAmountHelpers:
    """Test suite for amount parsing helpers."""

    @pytest.mark.parametrize("raw, expected", [
        ("1,234", 1234),
        ("1, 234", 1234),
        ("1.234", 1234),
        ("１，２３４", 1234),
        ("0", None),
        (" ", None),
        ("", None),
    ])
    def test_parse_amount(self, raw, expected):
        assert parse_amount(raw) == expected

    def test_keyword_pattern_tolerates_spacing(self):
        pattern = keyword_pattern("合計")

        assert pattern.search("合 計")
        assert pattern.search("合計")
        assert not pattern.search("合算")
