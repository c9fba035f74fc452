"""Tests for PaymentMethodParser component."""

import pytest
from receipt_fields.parsers.payment_parser import PaymentMethod, PaymentMethodParser
from receipt_fields.parsers.base import ReceiptContext


class TestPaymentMethodParser:
    """Test suite for PaymentMethodParser."""

    def setup_method(self):
        """Set up test fixtures."""
        self.parser = PaymentMethodParser()

    def _classify(self, text):
        return self.parser.parse(ReceiptContext(full_text=text))

    @pytest.mark.parametrize("text", [
        "VISA ****1234",
        "クレジット 一括",
        "JCB お支払",
    ])
    def test_credit_card(self, text):
        result = self._classify(text)

        assert result.value == PaymentMethod.CREDIT_CARD
        assert result.metadata['strategy'] == 'credit_keyword'

    @pytest.mark.parametrize("text", [
        "Suica 残高 500",
        "PayPay 支払",
        "交通系電子マネー",
        "楽天ペイ",
    ])
    def test_electronic_money(self, text):
        result = self._classify(text)

        assert result.value == PaymentMethod.ELECTRONIC_MONEY
        assert result.metadata['strategy'] == 'emoney_keyword'

    def test_credit_takes_priority(self):
        result = self._classify("交通系 ICOCA\nクレジットカード VISA")

        assert result.value == PaymentMethod.CREDIT_CARD

    def test_cash_default(self):
        result = self._classify("お預り ¥1,000\nお釣り ¥200")

        assert result.value == PaymentMethod.CASH
        assert result.metadata['strategy'] == 'default'

    def test_empty_text_is_cash(self):
        assert self._classify("").value == PaymentMethod.CASH


class TestPaymentMethod:
    """Test suite for the PaymentMethod enumeration."""

    def test_values(self):
        assert [m.value for m in PaymentMethod] == ['Cash', 'CreditCard', 'ElectronicMoney']

    def test_japanese_labels(self):
        assert PaymentMethod.CASH.label == '現金'
        assert PaymentMethod.CREDIT_CARD.label == 'クレジットカード'
        assert PaymentMethod.ELECTRONIC_MONEY.label == '電子マネー'

    def test_compares_as_string(self):
        assert PaymentMethod('CreditCard') is PaymentMethod.CREDIT_CARD
        assert PaymentMethod.CASH == 'Cash'
