"""
Delimiter resolution for X12 and EDIFACT interchanges.

Both dialects let the sender choose separators in the interchange header:

- X12: the ISA segment is fixed width. The character after "ISA" is the
  element separator; the 16th element is the single-character component
  separator, and the character right after it terminates the segment.
- EDIFACT: an optional leading UNA service string advice carries six
  characters: component separator, data element separator, decimal mark,
  release character, reserved, segment terminator.

When the header is absent or unusable the standard delimiters apply.
"""

import logging
from dataclasses import dataclass
from typing import Optional


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class X12Delimiters:
    """Separators used by an X12 interchange."""
    element: str = "*"
    component: str = ">"
    segment: str = "~"


@dataclass(frozen=True)
class EdifactDelimiters:
    """Separators used by an EDIFACT interchange."""
    component: str = ":"
    element: str = "+"
    decimal: str = "."
    release: Optional[str] = "?"
    segment: str = "'"


DEFAULT_X12_DELIMITERS = X12Delimiters()
DEFAULT_EDIFACT_DELIMITERS = EdifactDelimiters()

ISA_ELEMENT_COUNT = 16
UNA_LENGTH = 9


def _usable(*chars: str) -> bool:
    """Delimiters must be single, distinct, non-alphanumeric characters."""
    if any(len(ch) != 1 or ch.isalnum() for ch in chars):
        return False
    return len(set(chars)) == len(chars)


def resolve_x12_delimiters(text: str) -> X12Delimiters:
    """Read separators from a leading ISA segment, defaulting when absent."""
    if not text.startswith("ISA") or len(text) < 4:
        return DEFAULT_X12_DELIMITERS

    element = text[3]
    seen = 0
    for index in range(3, len(text)):
        if text[index] == element:
            seen += 1
            if seen == ISA_ELEMENT_COUNT:
                break
    else:
        logger.debug("ISA segment truncated; using default X12 delimiters")
        return DEFAULT_X12_DELIMITERS

    component = text[index + 1:index + 2]
    segment = text[index + 2:index + 3]
    if not _usable(element, component, segment):
        logger.debug("ISA declares unusable delimiters %r; using defaults",
                     (element, component, segment))
        return DEFAULT_X12_DELIMITERS

    return X12Delimiters(element=element, component=component, segment=segment)


def resolve_edifact_delimiters(text: str) -> EdifactDelimiters:
    """Read separators from a leading UNA segment, defaulting when absent."""
    if not text.startswith("UNA"):
        return DEFAULT_EDIFACT_DELIMITERS
    if len(text) < UNA_LENGTH:
        logger.debug("UNA segment truncated; using default EDIFACT delimiters")
        return DEFAULT_EDIFACT_DELIMITERS

    component, element, decimal, release, _reserved, segment = text[3:UNA_LENGTH]
    if not _usable(component, element, segment):
        logger.debug("UNA declares unusable delimiters %r; using defaults",
                     text[:UNA_LENGTH])
        return DEFAULT_EDIFACT_DELIMITERS

    return EdifactDelimiters(
        component=component,
        element=element,
        decimal=decimal,
        # a space in the release position means no release character
        release=None if release == " " else release,
        segment=segment,
    )
