"""
ediroute.envelope - Envelope detection

Decodes raw bytes, classifies the EDI dialect, and extracts the routing key
from envelope headers without parsing the document grammar.
"""

from ediroute.envelope.decoder import DecodedText, Encoding, decode_bytes
from ediroute.envelope.dialect import Dialect, detect_dialect
from ediroute.envelope.delimiters import (
    EdifactDelimiters,
    X12Delimiters,
    resolve_edifact_delimiters,
    resolve_x12_delimiters,
)
from ediroute.envelope.tokenizer import (
    EdifactHeaderTokenizer,
    HeaderSegment,
    X12HeaderTokenizer,
)
from ediroute.envelope.headers import (
    RoutingKey,
    extract_edifact_key,
    extract_routing_key,
    extract_x12_key,
)

__all__ = [
    # Decoding
    "DecodedText",
    "Encoding",
    "decode_bytes",
    # Classification
    "Dialect",
    "detect_dialect",
    # Delimiters
    "EdifactDelimiters",
    "X12Delimiters",
    "resolve_edifact_delimiters",
    "resolve_x12_delimiters",
    # Tokenizers
    "EdifactHeaderTokenizer",
    "HeaderSegment",
    "X12HeaderTokenizer",
    # Routing keys
    "RoutingKey",
    "extract_edifact_key",
    "extract_routing_key",
    "extract_x12_key",
]
