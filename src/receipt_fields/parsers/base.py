"""Base classes for receipt field parsers."""

from abc import ABC, abstractmethod
from typing import Optional, Any, Callable, Dict, List, Sequence, Tuple
from dataclasses import dataclass
import logging

from .normalizer import normalize_lines

logger = logging.getLogger(__name__)


@dataclass
class ParseResult:
    """Result of a parsing operation with confidence and metadata."""
    value: Any
    confidence: float
    source_text: str = ""
    metadata: Dict[str, Any] = None

    def __post_init__(self):
        if self.metadata is None:
            self.metadata = {}


@dataclass
class ReceiptContext:
    """Context information about a receipt for parsing."""
    full_text: str
    lines: List[str] = None
    registration_number: Optional[str] = None

    def __post_init__(self):
        if self.full_text is None:
            self.full_text = ""
        if self.lines is None:
            self.lines = normalize_lines(self.full_text)


Strategy = Callable[[ReceiptContext], Optional[ParseResult]]


def first_success(strategies: Sequence[Tuple[str, Strategy]],
                  context: ReceiptContext) -> Optional[ParseResult]:
    """
    Run strategies in order and return the first non-empty result.

    The winning strategy name is recorded in ``metadata['strategy']``.
    """
    for name, strategy in strategies:
        result = strategy(context)
        if result is not None:
            result.metadata.setdefault('strategy', name)
            return result
    return None


class BaseParser(ABC):
    """Base class for all receipt parsers."""

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def parse(self, context: ReceiptContext) -> Optional[ParseResult]:
        """
        Parse the specific field from receipt context.

        Args:
            context: Receipt context with text and lines

        Returns:
            ParseResult with value and confidence, or None if the field was not found
        """
        pass

    def _log_result(self, result: Optional[ParseResult], context: ReceiptContext):
        """Log parsing result for debugging."""
        if result:
            self.logger.info(f"Parsed: {result.value} via {result.metadata.get('strategy', 'n/a')} "
                             f"(confidence: {result.confidence:.2f})")
        else:
            self.logger.debug(f"Field not found in {len(context.lines)} lines")
