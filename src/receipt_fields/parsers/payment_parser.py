"""Payment method classification from card and e-money vocabulary."""

import logging
from enum import Enum
from typing import Optional
from ..config import KeywordRules, load_rules
from .base import BaseParser, ParseResult, ReceiptContext

logger = logging.getLogger(__name__)


class PaymentMethod(str, Enum):
    """Closed set of payment instruments."""
    CASH = 'Cash'
    CREDIT_CARD = 'CreditCard'
    ELECTRONIC_MONEY = 'ElectronicMoney'

    @property
    def label(self) -> str:
        """Japanese label used on the receipt forms."""
        return {
            PaymentMethod.CASH: '現金',
            PaymentMethod.CREDIT_CARD: 'クレジットカード',
            PaymentMethod.ELECTRONIC_MONEY: '電子マネー',
        }[self]


class PaymentMethodParser(BaseParser):
    """Classify the payment method; credit wins over e-money, cash is the default."""

    def __init__(self, rules: Optional[KeywordRules] = None):
        super().__init__()
        self.rules = rules or load_rules()

    def parse(self, context: ReceiptContext) -> ParseResult:
        """
        Classify how the receipt was paid.

        Always returns a result: receipts without card or e-money hints are cash.
        """
        credit_hit = self._find_keyword(context, self.rules.credit_keywords)
        emoney_hit = self._find_keyword(context, self.rules.emoney_keywords)

        if credit_hit:
            result = ParseResult(value=PaymentMethod.CREDIT_CARD, confidence=0.8,
                                 metadata={'strategy': 'credit_keyword', 'keyword': credit_hit})
        elif emoney_hit:
            result = ParseResult(value=PaymentMethod.ELECTRONIC_MONEY, confidence=0.8,
                                 metadata={'strategy': 'emoney_keyword', 'keyword': emoney_hit})
        else:
            result = ParseResult(value=PaymentMethod.CASH, confidence=0.5,
                                 metadata={'strategy': 'default'})

        self._log_result(result, context)
        return result

    @staticmethod
    def _find_keyword(context: ReceiptContext, keywords) -> Optional[str]:
        for line in context.lines:
            for keyword in keywords:
                if keyword in line:
                    return keyword
        return None
