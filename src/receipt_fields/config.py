"""Keyword rules loaded from YAML."""

import yaml
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_RULES_PATH = Path(__file__).parent / "rules" / "keywords.yml"


@dataclass(frozen=True)
class KeywordRules:
    """Keyword vocabularies shared by the field parsers."""
    total_keywords: List[str] = field(default_factory=list)
    registration_labels: List[str] = field(default_factory=list)
    credit_keywords: List[str] = field(default_factory=list)
    emoney_keywords: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'KeywordRules':
        """
        Build rules from the parsed YAML structure.

        Raises:
            ValueError: if a required section or key is missing
        """
        if not isinstance(data, dict):
            raise ValueError("Keyword rules must be a mapping")

        def section(name: str, key: str) -> List[str]:
            values = (data.get(name) or {}).get(key)
            if values is None:
                raise ValueError(f"Keyword rules missing '{name}.{key}'")
            if not isinstance(values, list):
                raise ValueError(f"Keyword rules '{name}.{key}' must be a list")
            return [str(v) for v in values if str(v)]

        return cls(
            total_keywords=section('amount', 'total_keywords'),
            registration_labels=section('registration', 'labels'),
            credit_keywords=section('payment', 'credit'),
            emoney_keywords=section('payment', 'electronic_money'),
        )

    @classmethod
    def from_yaml(cls, rules_path: Path) -> 'KeywordRules':
        """Load rules from a YAML file."""
        try:
            with open(rules_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
            rules = cls.from_dict(data)
        except Exception as e:
            logger.error(f"Failed to load keyword rules from {rules_path}: {e}")
            raise
        logger.debug(f"Loaded keyword rules from {rules_path}")
        return rules


def load_rules(rules_path: Optional[Path] = None) -> KeywordRules:
    """Load keyword rules, falling back to the packaged defaults."""
    return KeywordRules.from_yaml(Path(rules_path) if rules_path else DEFAULT_RULES_PATH)
