"""
Error taxonomy for envelope detection and routing.

Every failure the routing pipeline can report derives from EdiRouteError.
Components raise these; the dispatcher catches them and hands them back to
the command layer as data (see ediroute.dispatcher.ConversionResult).

Decode advisories are not errors: they are logged by the decoder and never
change control flow.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ediroute.envelope.dialect import Dialect
    from ediroute.envelope.headers import RoutingKey


class EdiRouteError(Exception):
    """Base class for all routing failures."""


class DialectUnknownError(EdiRouteError):
    """Input does not open with a recognized interchange marker."""

    def __init__(self, message: str = "Cannot convert file, unknown encoding."):
        super().__init__(message)


class HeaderErrorKind(Enum):
    """Which envelope anchor could not be read."""
    MISSING_GROUP_HEADER = "missing functional group header (GS)"
    MISSING_TRANSACTION_HEADER = "missing transaction set header (ST)"
    MISSING_MESSAGE_HEADER = "missing message header (UNH)"
    TRUNCATED_HEADER = "header segment too short"


class HeaderError(EdiRouteError):
    """A routing header segment is absent or lacks the expected element."""

    def __init__(self, kind: HeaderErrorKind, detail: str = ""):
        self.kind = kind
        self.detail = detail
        message = f"cannot read header line: {kind.value}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class UnsupportedKeyError(EdiRouteError):
    """No capability is registered for a routing key."""

    def __init__(self, key: "RoutingKey"):
        self.key = key
        super().__init__(
            f"{key.dialect} type not supported: {key.version}/{key.message_type}"
        )


class NotSupportedError(EdiRouteError):
    """A whole conversion direction is unavailable for a dialect."""

    def __init__(self, direction: str, dialect: "Dialect"):
        self.direction = direction
        self.dialect = dialect
        super().__init__(f"{dialect} not yet supported for {direction}.")


class StructuredShapeError(EdiRouteError):
    """Structured input lacks the fields a routing key is read from."""


class CodecError(EdiRouteError):
    """A capability failed to parse or serialize a document."""
