"""Date parsing anchored on receipt time stamps, with OCR error recovery."""

import re
import logging
from typing import Optional, Callable, List, Tuple
from datetime import date, datetime
from .base import BaseParser, ParseResult, ReceiptContext, first_success
from .normalizer import to_ascii_digits

logger = logging.getLogger(__name__)

MIN_YEAR = 1900
MAX_YEAR = 2099

# Restrict years to 19XX/20XX so phone prefixes like 0463 never read as years
YEAR = r'((?:19|20)\d{2})'

TIME_PATTERN = re.compile(r'(\d{1,2}):(\d{1,2})')
NUMBER_TOKEN = re.compile(r'\d+')

RELAXED_PATTERN = re.compile(YEAR + r'\D+(\d{1,2})\D+(\d{1,2})\D+(\d{1,2}):(\d{1,2})')
CALENDAR_WORD_TIME_PATTERN = re.compile(
    YEAR + r'\s*年\s*(\d{1,2})\s*月\s*(\d{1,2})\s*日.*(\d{1,2}):(\d{1,2})'
)
CALENDAR_WORD_WEEKDAY_TIME_PATTERN = re.compile(
    YEAR + r'\s*年\s*(\d{1,2})\s*月\s*(\d{1,2})\s*日\s*[(（].*[)）]\s*(\d{1,2}):(\d{1,2})'
)
CALENDAR_WORD_PATTERN = re.compile(YEAR + r'\s*年\s*(\d{1,2})\s*月\s*(\d{1,2})\s*日')
SLASH_PATTERN = re.compile(YEAR + r'[/.\-](\d{1,2})[/.\-](\d{1,2})')
SLASH_TIME_PATTERN = re.compile(YEAR + r'[/.\-](\d{1,2})[/.\-](\d{1,2})\s+(\d{1,2}):(\d{1,2})')

# "2025/10706": the slash was read as a digit, leaving MM?DD
GARBLED_SEPARATOR_PATTERN = re.compile(YEAR + r'.*?(\d{5})')
# "5 生 10 月 8H( 水 ) 13:44": year unreadable, 日 often read as H
GARBLED_YEAR_PATTERN = re.compile(r'(\d{1,2})\s*月\s*(\d{1,2})\s*[H日].*(\d{1,2}):(\d{1,2})')

# Japanese era mappings: era year 1 is offset + 1
ERA_OFFSETS = {
    '令和': 2018,
    'R': 2018,
    '平成': 1988,
    '昭和': 1925,
}
ERA_PATTERN = re.compile(
    r'(令和|平成|昭和|R)\s*(\d{1,2}|元)\s*[./年]\s*(\d{1,2})\s*[./月]\s*(\d{1,2})'
)


def format_date(year, month, day) -> Optional[str]:
    """
    Build an ISO date string, or None if the parts are not a real date.

    Years outside 1900-2099 are rejected.
    """
    try:
        parsed = date(int(year), int(month), int(day))
    except (TypeError, ValueError):
        return None
    if not (MIN_YEAR <= parsed.year <= MAX_YEAR):
        return None
    return parsed.isoformat()


class DateParser(BaseParser):
    """Specialized parser for extracting transaction dates from Japanese receipts."""

    def __init__(self, reference_year: Optional[int] = None):
        """
        Args:
            reference_year: Year assumed when only month and day are legible.
                Defaults to the current calendar year at parse time.
        """
        super().__init__()
        self.reference_year = reference_year

        # Tried on time-stamped lines that also carry a plausible year
        self.anchored_rules: List[Tuple[str, Callable[[str], Optional[str]]]] = [
            ('relaxed', lambda line: self._ymd(RELAXED_PATTERN.search(line))),
            ('calendar_word', lambda line: self._ymd(CALENDAR_WORD_TIME_PATTERN.search(line))),
            ('slash', lambda line: self._ymd(SLASH_PATTERN.search(line))),
            ('garbled_separator', self._garbled_separator),
        ]

        # Tried against the whole text when no time-stamped line worked
        self.unanchored_rules: List[Tuple[str, Callable[[str], Optional[str]]]] = [
            ('calendar_word_time', lambda text: self._ymd(CALENDAR_WORD_WEEKDAY_TIME_PATTERN.search(text))),
            ('slash_time', lambda text: self._ymd(SLASH_TIME_PATTERN.search(text))),
            ('calendar_word', lambda text: self._ymd(CALENDAR_WORD_PATTERN.search(text))),
            ('slash', lambda text: self._ymd(SLASH_PATTERN.search(text))),
            ('era', self._era),
        ]

        self.strategies = [
            ('time_anchored', self._match_time_anchored),
            ('unanchored', self._match_unanchored),
            ('kanji', self._match_kanji_line),
        ]

    def parse(self, context: ReceiptContext) -> Optional[ParseResult]:
        """
        Extract and normalize the transaction date.

        Args:
            context: Receipt context with full text and lines

        Returns:
            ParseResult with an ISO date string, or None
        """
        result = first_success(self.strategies, context)
        self._log_result(result, context)
        return result

    def looks_like_date(self, line: str) -> bool:
        """
        Whether a line contains a date this parser could read.

        Covers calendar-word, slash and era dates as well as every
        time-anchored rule, including the garbled OCR shapes.
        """
        return bool(CALENDAR_WORD_PATTERN.search(line)
                    or SLASH_PATTERN.search(line)
                    or ERA_PATTERN.search(line)
                    or self._read_time_anchored(line))

    def _match_time_anchored(self, context: ReceiptContext) -> Optional[ParseResult]:
        """A real receipt date shares its line with a clock time."""
        for line in context.lines:
            result = self._read_time_anchored(line)
            if not result:
                continue

            pattern_type = result.metadata['pattern_type']
            if pattern_type == 'garbled_separator':
                self.logger.info(f"OCR CORRECTION: separator recovered in {line!r} → {result.value}")
            elif pattern_type == 'garbled_year':
                self.logger.warning(f"Year unreadable in {line!r}, assuming {result.value[:4]}")
            return result
        return None

    def _read_time_anchored(self, line: str) -> Optional[ParseResult]:
        if not TIME_PATTERN.search(line):
            return None

        if self._has_year_token(line):
            for pattern_type, rule in self.anchored_rules:
                iso_date = rule(line)
                if iso_date:
                    confidence = 0.6 if pattern_type == 'garbled_separator' else 0.9
                    return ParseResult(value=iso_date, confidence=confidence, source_text=line,
                                       metadata={'pattern_type': pattern_type})

        iso_date = self._garbled_year(line)
        if iso_date:
            return ParseResult(value=iso_date, confidence=0.5, source_text=line,
                               metadata={'pattern_type': 'garbled_year'})
        return None

    def _match_unanchored(self, context: ReceiptContext) -> Optional[ParseResult]:
        for pattern_type, rule in self.unanchored_rules:
            iso_date = rule(context.full_text)
            if iso_date:
                return ParseResult(value=iso_date, confidence=0.7,
                                   metadata={'pattern_type': pattern_type})
        return None

    def _match_kanji_line(self, context: ReceiptContext) -> Optional[ParseResult]:
        for line in context.lines:
            if not ('年' in line and '月' in line and '日' in line):
                continue
            nums = NUMBER_TOKEN.findall(line)
            if len(nums) < 3:
                continue
            year, month, day = (int(n) for n in nums[:3])
            if year > 2000 and 1 <= month <= 12 and 1 <= day <= 31:
                iso_date = format_date(year, month, day)
                if iso_date:
                    return ParseResult(value=iso_date, confidence=0.5, source_text=line,
                                       metadata={'pattern_type': 'kanji'})
        return None

    @staticmethod
    def _has_year_token(line: str) -> bool:
        nums = NUMBER_TOKEN.findall(line)
        if len(nums) < 3:
            return False
        return any(len(n) == 4 and to_ascii_digits(n[:2]) in ('19', '20') for n in nums)

    @staticmethod
    def _ymd(match) -> Optional[str]:
        if not match:
            return None
        year, month, day = match.groups()[:3]
        return format_date(year, month, day)

    def _garbled_separator(self, line: str) -> Optional[str]:
        match = GARBLED_SEPARATOR_PATTERN.search(line)
        if not match:
            return None
        run = match.group(2)
        month, day = int(run[:2]), int(run[3:5])
        if not (1 <= month <= 12 and 1 <= day <= 31):
            return None
        return format_date(match.group(1), month, day)

    def _garbled_year(self, line: str) -> Optional[str]:
        match = GARBLED_YEAR_PATTERN.search(line)
        if not match:
            return None
        year = self.reference_year or datetime.now().year
        return format_date(year, match.group(1), match.group(2))

    def _era(self, text: str) -> Optional[str]:
        match = ERA_PATTERN.search(text)
        if not match:
            return None
        era, era_year, month, day = match.groups()
        era_year = 1 if era_year == '元' else int(era_year)
        return format_date(ERA_OFFSETS[era] + era_year, month, day)
