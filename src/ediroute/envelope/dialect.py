"""
Dialect classification from the leading interchange marker.
"""

from enum import Enum


class Dialect(Enum):
    """Top-level EDI family."""
    X12 = "X12"
    EDIFACT = "EDIFACT"
    UNKNOWN = "UNKNOWN"

    def __str__(self) -> str:
        return self.value


X12_MARKER = "ISA"
EDIFACT_MARKERS = ("UNB", "UNA")  # UNA (service string advice) may precede UNB


def detect_dialect(text: str) -> Dialect:
    """Classify text by its first three characters only."""
    prefix = text[:3]
    if prefix == X12_MARKER:
        return Dialect.X12
    if prefix in EDIFACT_MARKERS:
        return Dialect.EDIFACT
    return Dialect.UNKNOWN
