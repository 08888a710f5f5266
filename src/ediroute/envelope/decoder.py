"""
Byte decoding for interchange files of unknown encoding.

Trading partners send UTF-8, ISO-8859-x, or something in between. Decoding
never fails: strict UTF-8 first, then ISO-8859-16 which maps each byte to a
character.
"""

import logging
from dataclasses import dataclass
from enum import Enum


logger = logging.getLogger(__name__)

FALLBACK_CODEC = "iso8859_16"
REPLACEMENT_CHAR = "\ufffd"
UTF8_BOM = b"\xef\xbb\xbf"


class Encoding(Enum):
    """How the input bytes were turned into text."""
    UTF8 = "utf-8"
    LATIN_EXTENDED = "iso-8859-16"
    FALLBACK_LOSSY = "iso-8859-16 (lossy)"


@dataclass(frozen=True)
class DecodedText:
    """Decoded document text and the encoding that produced it."""
    text: str
    encoding: Encoding

    @property
    def lossy(self) -> bool:
        return self.encoding is Encoding.FALLBACK_LOSSY


def decode_bytes(data: bytes) -> DecodedText:
    """
    Decode raw bytes into text.

    Args:
        data: Raw input bytes

    Returns:
        DecodedText; never raises for any byte sequence
    """
    if data.startswith(UTF8_BOM):
        data = data[len(UTF8_BOM):]

    try:
        return DecodedText(data.decode("utf-8"), Encoding.UTF8)
    except UnicodeDecodeError:
        pass

    text = data.decode(FALLBACK_CODEC, errors="replace")
    if REPLACEMENT_CHAR in text:
        logger.warning(
            "input is neither UTF-8 nor ISO-8859-16; "
            "proceeding with the ISO-8859-16 interpretation"
        )
        return DecodedText(text, Encoding.FALLBACK_LOSSY)

    logger.debug("input is not UTF-8, decoded as ISO-8859-16")
    return DecodedText(text, Encoding.LATIN_EXTENDED)
