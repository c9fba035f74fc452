"""Line normalization for raw OCR text."""

from typing import List, Optional


def normalize_lines(text: Optional[str]) -> List[str]:
    """
    Split raw OCR text into trimmed, non-empty lines.

    Args:
        text: Raw OCR text (None is treated as empty)

    Returns:
        Lines in their original order
    """
    if not text:
        return []
    return [line.strip() for line in text.splitlines() if line.strip()]


def to_ascii_digits(text: str) -> str:
    """Replace full-width (or any Unicode decimal) digits with ASCII ones."""
    return ''.join(str(int(ch)) if ch.isdecimal() else ch for ch in text)
