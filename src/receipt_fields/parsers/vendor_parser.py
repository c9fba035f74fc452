"""Payee (company) name extraction by elimination."""

import re
import logging
from typing import Optional
from .base import BaseParser, ParseResult, ReceiptContext
from .date_parser import DateParser
from .registration_parser import RegistrationNumberParser, SEPARATORS

logger = logging.getLogger(__name__)

PHONE_PATTERN = re.compile(r'\d{2,4}-\d{2,4}-\d{4}')
MIN_NAME_LENGTH = 3


class VendorParser(BaseParser):
    """
    Pick the first line that cannot be anything other than the merchant name.

    Store names are formatted too inconsistently for a positive pattern, so
    lines are eliminated instead: dates, registration numbers, phone numbers
    and fragments shorter than three characters.
    """

    def __init__(self, date_parser: DateParser, registration_parser: RegistrationNumberParser):
        super().__init__()
        self.date_parser = date_parser
        self.registration_parser = registration_parser

    def parse(self, context: ReceiptContext) -> Optional[ParseResult]:
        """
        Extract the company name from receipt text.

        Args:
            context: Receipt context; ``registration_number`` should already be set

        Returns:
            ParseResult with a single trimmed source line, or None
        """
        result = None
        for line_idx, line in enumerate(context.lines):
            reason = self._exclusion_reason(line, context.registration_number)
            if reason:
                self.logger.debug(f"Skipping line {line_idx} ({reason}): {line!r}")
                continue
            result = ParseResult(value=line, confidence=max(0.3, 0.8 - line_idx * 0.1),
                                 source_text=line,
                                 metadata={'strategy': 'elimination', 'line_idx': line_idx})
            break

        self._log_result(result, context)
        return result

    def _exclusion_reason(self, line: str, registration_number: Optional[str]) -> Optional[str]:
        if self.date_parser.looks_like_date(line):
            return 'date'
        if self.registration_parser.has_label(line):
            return 'registration label'
        if registration_number and self._contains_registration(line, registration_number):
            return 'registration number'
        if self.registration_parser.looks_like_registration(line):
            return 'registration pattern'
        if PHONE_PATTERN.search(line):
            return 'phone'
        if len(line) < MIN_NAME_LENGTH:
            return 'too short'
        return None

    @staticmethod
    def _contains_registration(line: str, registration_number: str) -> bool:
        compact = SEPARATORS.sub('', line)
        return registration_number in compact or registration_number[1:] in compact
