"""
Structured document serialization and routing probes.

The structured form is an opaque JSON tree owned by the codecs. This module
only loads/dumps it and reads the routing key from fixed paths:

- a top-level "isa" object marks an X12 interchange;
- the version is functional_group[0].gs["08"];
- the message type is functional_group[0].segments[0].st["01"].

A top-level "unb", "una" or "unh" object marks an EDIFACT interchange.
"""

import json
from typing import Any, Optional, Union

from ediroute.envelope.decoder import decode_bytes
from ediroute.envelope.dialect import Dialect
from ediroute.envelope.headers import RoutingKey
from ediroute.errors import StructuredShapeError


X12_MARKER_FIELD = "isa"
EDIFACT_MARKER_FIELDS = ("unb", "una", "unh")


def load_structured(data: Union[bytes, str]) -> Any:
    """Parse JSON text into a structured value."""
    if isinstance(data, bytes):
        data = decode_bytes(data).text
    try:
        return json.loads(data)
    except json.JSONDecodeError as e:
        raise StructuredShapeError(f"input is not a structured document: {e}") from e


def dump_structured(value: Any, indent: Optional[int] = None) -> str:
    """Serialize a structured value, keeping field order."""
    if indent is None:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return json.dumps(value, indent=indent, ensure_ascii=False)


def probe_dialect(value: Any) -> Dialect:
    """Classify a structured value by its top-level interchange field."""
    if not isinstance(value, dict):
        return Dialect.UNKNOWN
    if X12_MARKER_FIELD in value:
        return Dialect.X12
    if any(name in value for name in EDIFACT_MARKER_FIELDS):
        return Dialect.EDIFACT
    return Dialect.UNKNOWN


def _step(node: Any, name: Union[str, int], path: str) -> Any:
    try:
        return node[name]
    except (KeyError, IndexError, TypeError):
        raise StructuredShapeError(f"structured document has no {path}") from None


def probe_x12_key(value: Any) -> RoutingKey:
    """
    Read the routing key of a structured X12 interchange.

    Raises:
        StructuredShapeError: the value is not X12-shaped or a routing
            field is missing or not a string
    """
    if probe_dialect(value) is not Dialect.X12:
        raise StructuredShapeError("structured document has no interchange header (isa)")

    group = _step(_step(value, "functional_group", "functional_group"), 0, "functional_group[0]")
    version = _step(_step(group, "gs", "functional_group[0].gs"), "08", "functional_group[0].gs.08")
    transaction = _step(
        _step(group, "segments", "functional_group[0].segments"), 0, "functional_group[0].segments[0]"
    )
    message_type = _step(
        _step(transaction, "st", "functional_group[0].segments[0].st"),
        "01",
        "functional_group[0].segments[0].st.01",
    )

    if not isinstance(version, str) or not isinstance(message_type, str):
        raise StructuredShapeError("structured routing fields must be strings")
    return RoutingKey(Dialect.X12, version, message_type)
