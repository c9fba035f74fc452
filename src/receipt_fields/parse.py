"""Compose the field parsers into a single receipt extraction pass."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Dict, Any
from .config import KeywordRules, load_rules
from .parsers import (
    AmountParser,
    DateParser,
    PaymentMethod,
    PaymentMethodParser,
    RegistrationNumberParser,
    VendorParser,
)
from .parsers.base import ParseResult, ReceiptContext

logger = logging.getLogger(__name__)


@dataclass
class ExtractedResult:
    """Structured fields recovered from one OCR result."""
    raw_text: str
    date: Optional[str] = None
    registration_number: Optional[str] = None
    total_amount: Optional[int] = None
    company_name: Optional[str] = None
    payment_method: PaymentMethod = PaymentMethod.CASH
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        """Render the record with the field names used by the receipt form."""
        return {
            'rawText': self.raw_text,
            'date': self.date,
            'registrationNumber': self.registration_number,
            'totalAmount': self.total_amount,
            'companyName': self.company_name,
            'paymentMethod': self.payment_method.value,
        }


class ReceiptParser:
    """
    Stateless extraction of receipt fields from raw OCR text.

    Parsers are built once; ``parse_receipt`` keeps no state between calls,
    so one instance can be shared across threads.
    """

    def __init__(self,
                 rules: Optional[KeywordRules] = None,
                 rules_path: Optional[Path] = None,
                 reference_year: Optional[int] = None):
        """
        Args:
            rules: Keyword rules; loaded from ``rules_path`` or the packaged defaults if omitted
            rules_path: Path to a keyword rules YAML file
            reference_year: Year assumed when a receipt's year is unreadable
        """
        self.rules = rules or load_rules(rules_path)

        self.registration_parser = RegistrationNumberParser(self.rules)
        self.date_parser = DateParser(reference_year=reference_year)
        self.amount_parser = AmountParser(self.rules)
        self.vendor_parser = VendorParser(self.date_parser, self.registration_parser)
        self.payment_parser = PaymentMethodParser(self.rules)

    def parse_receipt(self, text: Optional[str]) -> ExtractedResult:
        """
        Extract all fields from raw OCR text.

        Args:
            text: Raw OCR text; empty or None yields a result with every optional field absent

        Returns:
            ExtractedResult with per-field strategy details in ``metadata``
        """
        raw_text = text or ""
        logger.debug(f"OCR raw text:\n{raw_text}")

        context = ReceiptContext(full_text=raw_text)

        registration = self.registration_parser.parse(context)
        context.registration_number = registration.value if registration else None

        date = self.date_parser.parse(context)
        amount = self.amount_parser.parse(context)
        vendor = self.vendor_parser.parse(context)
        payment = self.payment_parser.parse(context)

        result = ExtractedResult(
            raw_text=raw_text,
            date=_value(date),
            registration_number=_value(registration),
            total_amount=_value(amount),
            company_name=_value(vendor),
            payment_method=payment.value,
            metadata={
                'date': _explain(date),
                'registration_number': _explain(registration),
                'total_amount': _explain(amount),
                'company_name': _explain(vendor),
                'payment_method': _explain(payment),
            },
        )

        logger.info(f"Parsed receipt: date={result.date}, amount=¥{result.total_amount}, "
                    f"registration={result.registration_number}, company={result.company_name}, "
                    f"payment={result.payment_method.value}")
        return result


def _value(result: Optional[ParseResult]):
    return result.value if result else None


def _explain(result: Optional[ParseResult]) -> Dict[str, Any]:
    if not result:
        return {}
    return {'confidence': result.confidence, **result.metadata}


_default_parser: Optional[ReceiptParser] = None


def extract_fields(text: Optional[str]) -> ExtractedResult:
    """Extract receipt fields from raw OCR text using the packaged keyword rules."""
    global _default_parser
    if _default_parser is None:
        _default_parser = ReceiptParser()
    return _default_parser.parse_receipt(text)
