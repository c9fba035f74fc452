"""Receipt field parsers - one focused parser per extracted field."""

from .normalizer import normalize_lines
from .registration_parser import RegistrationNumberParser
from .date_parser import DateParser
from .amount_parser import AmountParser
from .vendor_parser import VendorParser
from .payment_parser import PaymentMethod, PaymentMethodParser

__all__ = [
    'normalize_lines',
    'RegistrationNumberParser',
    'DateParser',
    'AmountParser',
    'VendorParser',
    'PaymentMethod',
    'PaymentMethodParser',
]
