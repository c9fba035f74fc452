"""Tests for keyword rules loading."""

import pytest
from receipt_fields import ReceiptParser
from receipt_fields.config import DEFAULT_RULES_PATH, KeywordRules, load_rules


CUSTOM_RULES = """
amount:
  total_keywords:
    - お会計
registration:
  labels:
    - 登録番号
payment:
  credit:
    - クレジット
  electronic_money:
    - nanaco
"""


class TestKeywordRules:
    """Test suite for KeywordRules and load_rules."""

    def test_packaged_defaults(self):
        rules = load_rules()

        assert DEFAULT_RULES_PATH.exists()
        assert '合計' in rules.total_keywords
        assert '全言十' in rules.total_keywords
        assert '登録番号' in rules.registration_labels
        assert 'VISA' in rules.credit_keywords
        assert 'Suica' in rules.emoney_keywords

    def test_custom_rules_file(self, tmp_path):
        rules_path = tmp_path / "rules.yml"
        rules_path.write_text(CUSTOM_RULES, encoding='utf-8')

        default_parser = ReceiptParser()
        custom_parser = ReceiptParser(rules_path=rules_path)

        assert default_parser.parse_receipt("お会計 1,500").total_amount is None
        assert custom_parser.parse_receipt("お会計 1,500").total_amount == 1500
        assert custom_parser.parse_receipt("nanaco 払い").payment_method.value == 'ElectronicMoney'

    def test_missing_section_raises(self, tmp_path):
        rules_path = tmp_path / "rules.yml"
        rules_path.write_text("amount:\n  total_keywords: [合計]\n", encoding='utf-8')

        with pytest.raises(ValueError, match="registration.labels"):
            load_rules(rules_path)

    def test_non_list_value_raises(self):
        data = {
            'amount': {'total_keywords': '合計'},
            'registration': {'labels': []},
            'payment': {'credit': [], 'electronic_money': []},
        }

        with pytest.raises(ValueError, match="must be a list"):
            KeywordRules.from_dict(data)

    def test_non_mapping_raises(self):
        with pytest.raises(ValueError):
            KeywordRules.from_dict(['合計'])

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_rules(tmp_path / "missing.yml")
