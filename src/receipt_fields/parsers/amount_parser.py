"""Total amount parsing: keyword candidates first, currency-marked amounts as fallback."""

import re
import logging
from typing import Optional, List, Tuple
from ..config import KeywordRules, load_rules
from .base import BaseParser, ParseResult, ReceiptContext

logger = logging.getLogger(__name__)

# A digit run where OCR may have inserted grouping commas, dots or spaces
DIGIT_RUN = r'\d[\d\s,.，．]*'
GROUPING_NOISE = re.compile(r'[\s,.，．]')

# The number must follow the keyword directly; only spaces or a colon may sit between
NUMBER_AFTER_KEYWORD = re.compile(r'[\s:：]*(' + DIGIT_RUN + ')')
# ¥ is frequently read as a backslash or a lowercase y
YEN_SYMBOL_PATTERN = re.compile(r'[¥￥\\y]\s*(' + DIGIT_RUN + ')')
YEN_SYMBOLS = ('¥', '￥', '\\', 'y')
YEN_SUFFIX_PATTERN = re.compile('(' + DIGIT_RUN + ')円')


def parse_amount(raw: str) -> Optional[int]:
    """Parse an OCR digit run into a positive integer, or None."""
    cleaned = GROUPING_NOISE.sub('', raw)
    if not cleaned.isdecimal():
        return None
    value = int(cleaned)
    return value if value > 0 else None


def keyword_pattern(keyword: str) -> re.Pattern:
    """Compile a keyword so OCR spacing between its characters is tolerated."""
    return re.compile(r'\s*'.join(re.escape(ch) for ch in keyword))


class AmountParser(BaseParser):
    """Specialized parser for extracting the total amount from Japanese receipts."""

    def __init__(self, rules: Optional[KeywordRules] = None):
        super().__init__()
        self.rules = rules or load_rules()

        # Total keywords, including garbled variants of 合計
        self.total_keywords: List[Tuple[str, re.Pattern]] = [
            (keyword, keyword_pattern(keyword)) for keyword in self.rules.total_keywords
        ]

    def parse(self, context: ReceiptContext) -> Optional[ParseResult]:
        """
        Extract the total amount from receipt text.

        Args:
            context: Receipt context with full text and lines

        Returns:
            ParseResult with the amount in JPY, or None
        """
        keyword_candidates: List[Tuple[int, str]] = []
        symbol_candidates: List[Tuple[int, str]] = []

        for line in context.lines:
            is_keyword_line = self._collect_keyword_amounts(line, keyword_candidates)
            self._collect_symbol_amounts(line, is_keyword_line, keyword_candidates, symbol_candidates)

        result = None
        if keyword_candidates:
            amount, line = max(keyword_candidates, key=lambda c: c[0])
            result = ParseResult(value=amount, confidence=0.9, source_text=line,
                                 metadata={'strategy': 'keyword',
                                           'candidates': [c[0] for c in keyword_candidates]})
        elif symbol_candidates:
            amount, line = max(symbol_candidates, key=lambda c: c[0])
            result = ParseResult(value=amount, confidence=0.6, source_text=line,
                                 metadata={'strategy': 'symbol',
                                           'candidates': [c[0] for c in symbol_candidates]})

        self._log_result(result, context)
        return result

    def _collect_keyword_amounts(self, line: str, candidates: List[Tuple[int, str]]) -> bool:
        """Add the first number after every keyword on the line; report whether any keyword matched."""
        is_keyword_line = False
        for keyword, pattern in self.total_keywords:
            match = pattern.search(line)
            if not match:
                continue
            is_keyword_line = True
            number = NUMBER_AFTER_KEYWORD.match(line, match.end())
            if number:
                amount = parse_amount(number.group(1))
                if amount:
                    self.logger.debug(f"Keyword {keyword} → ¥{amount}")
                    candidates.append((amount, line))
        return is_keyword_line

    def _collect_symbol_amounts(self, line: str, is_keyword_line: bool,
                                keyword_candidates: List[Tuple[int, str]],
                                symbol_candidates: List[Tuple[int, str]]):
        """Collect currency-marked amounts; keyword lines never feed the symbol pool."""
        if any(symbol in line for symbol in YEN_SYMBOLS):
            for match in YEN_SYMBOL_PATTERN.finditer(line):
                amount = parse_amount(match.group(1))
                if not amount:
                    continue
                if is_keyword_line:
                    keyword_candidates.append((amount, line))
                else:
                    symbol_candidates.append((amount, line))

        if not is_keyword_line and '円' in line:
            for match in YEN_SUFFIX_PATTERN.finditer(line):
                amount = parse_amount(match.group(1))
                if amount:
                    symbol_candidates.append((amount, line))
