"""
Envelope header tokenizers.

A deliberately small "sniff" layer: each tokenizer locates the handful of
envelope segments needed for routing and splits them into elements. It does
not understand the message grammar and never walks the whole document.

Patterns for the standard delimiters are compiled at import; patterns for
sender-declared delimiters are compiled once per delimiter set and cached.
"""

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Optional, Tuple

from ediroute.envelope.delimiters import (
    DEFAULT_EDIFACT_DELIMITERS,
    DEFAULT_X12_DELIMITERS,
    EdifactDelimiters,
    X12Delimiters,
    resolve_edifact_delimiters,
    resolve_x12_delimiters,
)


@dataclass(frozen=True)
class HeaderSegment:
    """An envelope segment split into elements (index 0 is the tag)."""
    raw: str
    elements: Tuple[str, ...]
    offset: int = 0

    @property
    def tag(self) -> str:
        return self.elements[0] if self.elements else ""

    def element(self, position: int) -> Optional[str]:
        """Element at a zero-based position, or None when out of range."""
        if 0 <= position < len(self.elements):
            return self.elements[position]
        return None

    def __len__(self) -> int:
        return len(self.elements)


# =============================================================================
# X12
# =============================================================================

@dataclass(frozen=True)
class X12Patterns:
    group_header: re.Pattern
    transaction_header: re.Pattern


@lru_cache(maxsize=32)
def x12_patterns(delimiters: X12Delimiters) -> X12Patterns:
    el = re.escape(delimiters.element)
    seg = re.escape(delimiters.segment)
    # a segment opens at the start of text or right after a terminator,
    # optionally followed by a line break
    start = rf"(?:\A|{seg}\r?\n?)"
    return X12Patterns(
        group_header=re.compile(
            rf"{start}(?P<segment>GS{el}[^{seg}]*){seg}\r?\n?ST(?={el})"
        ),
        transaction_header=re.compile(
            rf"{start}(?P<segment>ST{el}[^{seg}]*){seg}"
        ),
    )


DEFAULT_X12_PATTERNS = x12_patterns(DEFAULT_X12_DELIMITERS)


class X12HeaderTokenizer:
    """
    Locates the GS and ST envelope segments of an X12 interchange.

    Usage:
        tokenizer = X12HeaderTokenizer(text)
        gs = tokenizer.group_header()
        st = tokenizer.transaction_header()
    """

    def __init__(self, text: str, delimiters: Optional[X12Delimiters] = None):
        self.text = text
        self.delimiters = delimiters or resolve_x12_delimiters(text)
        self.patterns = x12_patterns(self.delimiters)

    def split(self, segment_text: str, offset: int = 0) -> HeaderSegment:
        elements = tuple(segment_text.split(self.delimiters.element))
        return HeaderSegment(raw=segment_text, elements=elements, offset=offset)

    def _find(self, pattern: re.Pattern) -> Optional[HeaderSegment]:
        match = pattern.search(self.text)
        if match is None:
            return None
        return self.split(match.group("segment"), match.start("segment"))

    def group_header(self) -> Optional[HeaderSegment]:
        """First GS segment that is immediately followed by an ST segment."""
        return self._find(self.patterns.group_header)

    def transaction_header(self) -> Optional[HeaderSegment]:
        """First ST segment."""
        return self._find(self.patterns.transaction_header)


# =============================================================================
# EDIFACT
# =============================================================================

@dataclass(frozen=True)
class EdifactPatterns:
    message_header: re.Pattern


@lru_cache(maxsize=32)
def edifact_patterns(delimiters: EdifactDelimiters) -> EdifactPatterns:
    el = re.escape(delimiters.element)
    seg = re.escape(delimiters.segment)
    if delimiters.release:
        rel = re.escape(delimiters.release)
        body = rf"(?:{rel}.|[^{rel}{seg}])*"
    else:
        body = rf"[^{seg}]*"
    return EdifactPatterns(
        message_header=re.compile(
            rf"(?:\A|{seg}\s*)(?P<segment>UNH{el}{body}){seg}", re.DOTALL
        ),
    )


DEFAULT_EDIFACT_PATTERNS = edifact_patterns(DEFAULT_EDIFACT_DELIMITERS)


class EdifactHeaderTokenizer:
    """
    Locates the UNH message header of an EDIFACT interchange.

    Component and data element separators are treated as equal split points,
    so "UNH+1+IFTSTA:D:00B:UN" splits into
    ["UNH", "1", "IFTSTA", "D", "00B", "UN"].
    """

    def __init__(self, text: str, delimiters: Optional[EdifactDelimiters] = None):
        self.text = text
        self.delimiters = delimiters or resolve_edifact_delimiters(text)
        self.patterns = edifact_patterns(self.delimiters)

    def split(self, segment_text: str, offset: int = 0) -> HeaderSegment:
        """Split on both separators in textual order, honoring the release character."""
        separators = (self.delimiters.component, self.delimiters.element)
        release = self.delimiters.release
        parts: List[str] = []
        current: List[str] = []
        chars = iter(segment_text)
        for ch in chars:
            if release is not None and ch == release:
                current.append(next(chars, ""))
            elif ch in separators:
                parts.append("".join(current))
                current = []
            else:
                current.append(ch)
        parts.append("".join(current))
        return HeaderSegment(raw=segment_text, elements=tuple(parts), offset=offset)

    def message_header(self) -> Optional[HeaderSegment]:
        """First UNH segment."""
        match = self.patterns.message_header.search(self.text)
        if match is None:
            return None
        return self.split(match.group("segment"), match.start("segment"))
