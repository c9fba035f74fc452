"""Receipt Fields - Extract accounting fields from Japanese receipt OCR text."""

__version__ = "1.0.0"
__author__ = "Receipt OCR Team"
__email__ = ""

from .config import KeywordRules, load_rules
from .parse import ExtractedResult, ReceiptParser, extract_fields
from .parsers import PaymentMethod

__all__ = [
    'ExtractedResult',
    'KeywordRules',
    'PaymentMethod',
    'ReceiptParser',
    'extract_fields',
    'load_rules',
]
