"""Invoice registration number (T + 13 digits) extraction with OCR correction."""

import re
import logging
from typing import Optional
from ..config import KeywordRules, load_rules
from .base import BaseParser, ParseResult, ReceiptContext, first_success
from .normalizer import to_ascii_digits

logger = logging.getLogger(__name__)

# Letters OCR commonly reads in place of digits
LOOKALIKE_DIGITS = {
    'S': '5',
    'O': '0',
    'D': '0',
    'I': '1',
    'l': '1',
    'Z': '2',
    'B': '8',
    'G': '6',
}

_LOOKALIKE_TABLE = str.maketrans(LOOKALIKE_DIGITS)
_LOOKALIKE_CLASS = r'\d' + ''.join(LOOKALIKE_DIGITS)

# Horizontal whitespace only, so a match never runs into the next line
_SPACE = r'[ \t　]'

# Exactly 13 digits, optionally split by hyphens or spaces
STRICT_PATTERN = re.compile(rf'T{_SPACE}*(\d(?:[-\t 　]*\d){{12}})(?!\d)')
FUZZY_PATTERN = re.compile(rf'T{_SPACE}*([{_LOOKALIKE_CLASS}]{{13}})(?![{_LOOKALIKE_CLASS}])')
SEPARATORS = re.compile(r'[-\s]')


def correct_lookalikes(raw: str) -> str:
    """Map OCR look-alike letters to the digits they stand for."""
    return raw.translate(_LOOKALIKE_TABLE)


def canonical_registration(raw: str) -> Optional[str]:
    """
    Canonicalize a candidate to ``T`` + 13 ASCII digits.

    Accepts 13 digits or ``T`` + 13 digits, with spaces and hyphens ignored.
    """
    cleaned = to_ascii_digits(SEPARATORS.sub('', raw))
    if cleaned.startswith('T'):
        cleaned = cleaned[1:]
    if len(cleaned) == 13 and cleaned.isdigit():
        return f"T{cleaned}"
    return None


class RegistrationNumberParser(BaseParser):
    """Specialized parser for qualified-invoice registration numbers."""

    def __init__(self, rules: Optional[KeywordRules] = None):
        super().__init__()
        self.rules = rules or load_rules()

        labels = '|'.join(re.escape(label) for label in self.rules.registration_labels)
        # The number may follow on the next line, but the run itself stays on one line
        self.label_pattern = re.compile(
            rf'(?i:{labels})[.:：\s]*(T?{_SPACE}*\d(?:[-\t 　]*\d){{12}})(?!\d)'
        ) if labels else None

        # Strategies in priority order
        self.strategies = [
            ('strict', self._match_strict),
            ('labeled', self._match_labeled),
            ('fuzzy', self._match_fuzzy),
            ('line_scan', self._match_line_scan),
        ]

    def parse(self, context: ReceiptContext) -> Optional[ParseResult]:
        """
        Extract the registration number from receipt text.

        Args:
            context: Receipt context with full text and lines

        Returns:
            ParseResult with a ``T`` + 13 digit string, or None
        """
        result = first_success(self.strategies, context)
        self._log_result(result, context)
        return result

    def looks_like_registration(self, line: str) -> bool:
        """Whether a line carries something shaped like a registration number."""
        if self.has_label(line):
            return True
        if any(canonical_registration(m.group(1)) for m in STRICT_PATTERN.finditer(line)):
            return True
        return FUZZY_PATTERN.search(line) is not None

    def has_label(self, line: str) -> bool:
        lowered = line.lower()
        return any(label.lower() in lowered for label in self.rules.registration_labels)

    def _match_strict(self, context: ReceiptContext) -> Optional[ParseResult]:
        for line in context.lines:
            for match in STRICT_PATTERN.finditer(line):
                number = canonical_registration(match.group(1))
                if number:
                    return ParseResult(value=number, confidence=0.95, source_text=line)
        return None

    def _match_labeled(self, context: ReceiptContext) -> Optional[ParseResult]:
        if self.label_pattern is None:
            return None
        match = self.label_pattern.search(context.full_text)
        if not match:
            return None
        number = canonical_registration(match.group(1))
        if not number:
            self.logger.debug(f"Registration label found but number unusable: {match.group(1)!r}")
            return None
        return ParseResult(value=number, confidence=0.9, source_text=match.group().strip())

    def _match_fuzzy(self, context: ReceiptContext) -> Optional[ParseResult]:
        for line in context.lines:
            match = FUZZY_PATTERN.search(line)
            if match:
                raw = match.group(1)
                number = f"T{to_ascii_digits(correct_lookalikes(raw))}"
                if raw != number[1:]:
                    self.logger.info(f"OCR CORRECTION: registration {raw} → {number}")
                return ParseResult(value=number, confidence=0.7, source_text=line,
                                   metadata={'original_match': raw})
        return None

    def _match_line_scan(self, context: ReceiptContext) -> Optional[ParseResult]:
        for line in context.lines:
            digits = to_ascii_digits(''.join(ch for ch in line if ch.isdecimal()))
            # Numbers starting with 0 are almost always phone numbers
            if len(digits) == 13 and not digits.startswith('0'):
                return ParseResult(value=f"T{digits}", confidence=0.4, source_text=line)
        return None

