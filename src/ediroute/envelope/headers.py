"""
Routing key extraction from envelope headers.

The routing key is (dialect, version, message type). It is read from two
header segments for X12 (GS version, ST transaction set identifier) and from
the UNH message identifier for EDIFACT, without parsing the document body.
"""

from dataclasses import dataclass

from ediroute.envelope.dialect import Dialect
from ediroute.envelope.tokenizer import EdifactHeaderTokenizer, X12HeaderTokenizer
from ediroute.errors import DialectUnknownError, HeaderError, HeaderErrorKind


# GS08: version / release / industry identifier code
GS_VERSION_POSITION = 8
# ST01: transaction set identifier code
ST_TYPE_POSITION = 1
# UNH+ref+TYPE:VERSION:RELEASE:AGENCY
UNH_TYPE_POSITION = 2
UNH_VERSION_POSITION = 3
UNH_RELEASE_POSITION = 4


@dataclass(frozen=True)
class RoutingKey:
    """Selects a structural codec. Fields compare exactly, unnormalized."""
    dialect: Dialect
    version: str
    message_type: str

    def __str__(self) -> str:
        return f"{self.version}/{self.message_type}"


def extract_x12_key(text: str) -> RoutingKey:
    """Read GS08 and ST01 from an X12 document."""
    tokenizer = X12HeaderTokenizer(text)

    gs = tokenizer.group_header()
    if gs is None:
        raise HeaderError(HeaderErrorKind.MISSING_GROUP_HEADER)
    version = gs.element(GS_VERSION_POSITION)
    if version is None:
        raise HeaderError(
            HeaderErrorKind.TRUNCATED_HEADER,
            f"GS has {len(gs) - 1} elements, version expected at GS{GS_VERSION_POSITION:02d}",
        )

    st = tokenizer.transaction_header()
    if st is None:
        raise HeaderError(HeaderErrorKind.MISSING_TRANSACTION_HEADER)
    message_type = st.element(ST_TYPE_POSITION)
    if message_type is None:
        raise HeaderError(
            HeaderErrorKind.TRUNCATED_HEADER,
            "ST carries no transaction set identifier",
        )

    return RoutingKey(Dialect.X12, version, message_type)


def extract_edifact_key(text: str) -> RoutingKey:
    """Read message type, version and release from the UNH segment."""
    tokenizer = EdifactHeaderTokenizer(text)

    unh = tokenizer.message_header()
    if unh is None:
        raise HeaderError(HeaderErrorKind.MISSING_MESSAGE_HEADER)

    message_type = unh.element(UNH_TYPE_POSITION)
    version = unh.element(UNH_VERSION_POSITION)
    release = unh.element(UNH_RELEASE_POSITION)
    if message_type is None or version is None or release is None:
        raise HeaderError(
            HeaderErrorKind.TRUNCATED_HEADER,
            f"UNH message identifier incomplete: {unh.raw!r}",
        )

    return RoutingKey(Dialect.EDIFACT, f"{version}{release}", message_type)


_EXTRACTORS = {
    Dialect.X12: extract_x12_key,
    Dialect.EDIFACT: extract_edifact_key,
}


def extract_routing_key(dialect: Dialect, text: str) -> RoutingKey:
    """
    Extract the routing key for an already classified document.

    Raises:
        DialectUnknownError: dialect is UNKNOWN
        HeaderError: a header segment is missing or too short
    """
    extractor = _EXTRACTORS.get(dialect)
    if extractor is None:
        raise DialectUnknownError()
    return extractor(text)
