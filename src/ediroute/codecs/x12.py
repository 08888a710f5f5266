"""
X12 Transmission Codec

Envelope-aware, grammar-agnostic codec between X12 text and its structured
JSON form. Segments inside a transaction set are kept in document order as
{tag: {position: value}} records; the codec does not know which segments a
given message type allows.

Structured shape:

{
  "isa": {"01": "00", ..., "16": ">"},
  "functional_group": [
    {
      "gs": {"01": "IO", ..., "08": "004010"},
      "segments": [
        {
          "st": {"01": "310", "02": "35353"},
          "body": [{"b3": {"01": "", "02": "MAEU1234567"}}, ...],
          "se": {"01": "11", "02": "35353"}
        }
      ],
      "ge": {"01": "1", "02": "61716"}
    }
  ],
  "iea": {"01": "1", "02": "000011566"}
}

Element keys are 1-based two-digit positions. Empty elements are kept so the
document serializes back with the same element positions.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from ediroute.envelope.delimiters import DEFAULT_X12_DELIMITERS, X12Delimiters, resolve_x12_delimiters
from ediroute.envelope.dialect import Dialect
from ediroute.envelope.headers import RoutingKey
from ediroute.errors import CodecError, EdiRouteError
from ediroute.structured import probe_x12_key


logger = logging.getLogger(__name__)

Elements = Dict[str, str]
RawSegment = Tuple[str, List[str]]


def elements_to_dict(values: List[str]) -> Elements:
    """Map element values to their two-digit 1-based positions."""
    return {f"{index:02d}": value for index, value in enumerate(values, start=1)}


def dict_to_elements(elements: Elements) -> List[str]:
    """Inverse of elements_to_dict; positions are ordered numerically."""
    try:
        ordered = sorted(elements.items(), key=lambda item: int(item[0]))
    except (TypeError, ValueError) as e:
        raise CodecError(f"element positions must be numeric: {sorted(elements)}") from e
    return ["" if value is None else str(value) for _, value in ordered]


class X12TransmissionCodec:
    """
    Parses and serializes one X12 routing key.

    Usage:
        codec = X12TransmissionCodec(RoutingKey(Dialect.X12, "004010", "310"))
        value = codec.parse(text)
        text = codec.serialize(value)
    """

    def __init__(self, key: RoutingKey, delimiters: X12Delimiters = DEFAULT_X12_DELIMITERS):
        if key.dialect is not Dialect.X12:
            raise ValueError(f"X12 codec cannot serve {key.dialect} key {key}")
        self.key = key
        self.delimiters = delimiters

    def __repr__(self):
        return f"X12TransmissionCodec({self.key})"

    # =========================================================================
    # Parsing
    # =========================================================================

    def _segments(self, text: str) -> List[RawSegment]:
        delimiters = resolve_x12_delimiters(text)
        segments = []
        for raw in text.split(delimiters.segment):
            raw = raw.strip("\r\n")
            if not raw.strip():
                continue
            parts = raw.split(delimiters.element)
            segments.append((parts[0].strip().lower(), parts[1:]))
        return segments

    def parse(self, text: str) -> Dict[str, Any]:
        """Parse an X12 interchange into its structured form."""
        segments = self._segments(text)
        if not segments or segments[0][0] != "isa":
            raise CodecError("X12 interchange must start with an ISA segment")

        document: Dict[str, Any] = {"isa": elements_to_dict(segments[0][1])}
        groups: List[Dict[str, Any]] = []
        group: Optional[Dict[str, Any]] = None
        transaction: Optional[Dict[str, Any]] = None
        closed = False

        for index, (tag, values) in enumerate(segments[1:], start=2):
            if closed:
                raise CodecError(f"segment {index} ({tag.upper()}) follows IEA")

            if transaction is not None:
                if tag == "se":
                    transaction["se"] = elements_to_dict(values)
                    group["segments"].append(transaction)
                    transaction = None
                elif tag in ("st", "ge", "iea"):
                    raise CodecError(f"segment {index} ({tag.upper()}) inside an open transaction set")
                else:
                    transaction["body"].append({tag: elements_to_dict(values)})
            elif tag == "gs":
                if group is not None:
                    raise CodecError(f"segment {index} (GS) inside an open functional group")
                group = {"gs": elements_to_dict(values), "segments": []}
            elif tag == "st":
                if group is None:
                    raise CodecError(f"segment {index} (ST) outside a functional group")
                transaction = {"st": elements_to_dict(values), "body": []}
            elif tag == "ge":
                if group is None:
                    raise CodecError(f"segment {index} (GE) without a matching GS")
                group["ge"] = elements_to_dict(values)
                groups.append(group)
                group = None
            elif tag == "iea":
                if group is not None:
                    raise CodecError(f"segment {index} (IEA) inside an open functional group")
                document["iea"] = elements_to_dict(values)
                closed = True
            else:
                raise CodecError(f"segment {index} ({tag.upper()}) outside a transaction set")

        if transaction is not None:
            raise CodecError("transaction set is missing its SE trailer")
        if group is not None:
            raise CodecError("functional group is missing its GE trailer")
        if not closed:
            raise CodecError("interchange is missing its IEA trailer")
        if not groups:
            raise CodecError("interchange carries no functional group")

        document["functional_group"] = groups
        # keep the conventional key order: isa, functional_group, iea
        document = {
            "isa": document["isa"],
            "functional_group": document["functional_group"],
            "iea": document["iea"],
        }
        self._check_key(document)
        logger.debug("parsed %s: %d functional group(s)", self.key, len(groups))
        return document

    def _check_key(self, document: Dict[str, Any]) -> None:
        """Every transaction set must match this codec's routing key."""
        for group in document["functional_group"]:
            version = group["gs"].get("08")
            if version != self.key.version:
                raise CodecError(
                    f"functional group version {version!r} does not match {self.key}"
                )
            for transaction in group["segments"]:
                message_type = transaction["st"].get("01")
                if message_type != self.key.message_type:
                    raise CodecError(
                        f"transaction set {message_type!r} does not match {self.key}"
                    )

    # =========================================================================
    # Serialization
    # =========================================================================

    def _line(self, tag: str, elements: Any) -> str:
        if not isinstance(elements, dict):
            raise CodecError(f"segment {tag.upper()} must be an object of elements")
        values = dict_to_elements(elements)
        reserved = (self.delimiters.element, self.delimiters.segment)
        if not tag or any(mark in tag for mark in reserved):
            raise CodecError(f"invalid segment tag {tag!r}")
        for position, value in enumerate(values, start=1):
            if any(mark in value for mark in reserved):
                raise CodecError(
                    f"segment {tag.upper()} element {position:02d} contains a reserved "
                    f"delimiter: {value!r}"
                )
        return self.delimiters.element.join([tag.upper()] + values)

    @staticmethod
    def _field(container: Dict[str, Any], name: str, where: str) -> Any:
        if not isinstance(container, dict) or name not in container:
            raise CodecError(f"{where} is missing {name!r}")
        return container[name]

    @classmethod
    def _list(cls, container: Dict[str, Any], name: str, where: str) -> List[Any]:
        value = cls._field(container, name, where)
        if not isinstance(value, list):
            raise CodecError(f"{where}.{name} must be a list, got {type(value).__name__}")
        return value

    def serialize(self, value: Any) -> str:
        """
        Render a structured X12 document as segment text.

        Output always uses this codec's element separator and segment
        terminator; a value containing either is rejected.
        """
        try:
            key = probe_x12_key(value)
        except EdiRouteError as e:
            raise CodecError(str(e)) from e
        if key != self.key:
            raise CodecError(f"document routing key {key} does not match {self.key}")

        lines = [self._line("isa", self._field(value, "isa", "interchange"))]
        for group_index, group in enumerate(self._list(value, "functional_group", "interchange")):
            where = f"functional_group[{group_index}]"
            lines.append(self._line("gs", self._field(group, "gs", where)))
            for set_index, transaction in enumerate(self._list(group, "segments", where)):
                set_where = f"{where}.segments[{set_index}]"
                lines.append(self._line("st", self._field(transaction, "st", set_where)))
                body = self._list(transaction, "body", set_where) if "body" in transaction else []
                for segment in body:
                    if not isinstance(segment, dict) or len(segment) != 1:
                        raise CodecError(f"{set_where}.body entries must hold exactly one segment")
                    (tag, elements), = segment.items()
                    lines.append(self._line(tag, elements))
                lines.append(self._line("se", self._field(transaction, "se", set_where)))
            lines.append(self._line("ge", self._field(group, "ge", where)))
        lines.append(self._line("iea", self._field(value, "iea", "interchange")))

        terminator = self.delimiters.segment
        return f"{terminator}\n".join(lines) + terminator
