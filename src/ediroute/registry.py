"""
Capability Registry

The single table of supported routing keys. Both directions (edi2json and
json2edi) consult it, so a key that can be parsed can always be serialized.

Adding a message type means adding one entry to X12_MESSAGE_TYPES.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, Iterator, List, Tuple

from ediroute.codecs.x12 import X12TransmissionCodec
from ediroute.envelope.dialect import Dialect
from ediroute.envelope.headers import RoutingKey
from ediroute.errors import UnsupportedKeyError


@dataclass(frozen=True)
class Capability:
    """Parse/serialize pair registered for one routing key."""
    key: RoutingKey
    parse: Callable[[str], Any]
    serialize: Callable[[Any], str]
    description: str = ""


class CapabilityRegistry:
    """
    Read-only mapping from routing key to capability.

    Usage:
        capability = REGISTRY.lookup(RoutingKey(Dialect.X12, "004010", "310"))
        value = capability.parse(text)
    """

    def __init__(self, capabilities: Iterable[Capability]):
        table: Dict[RoutingKey, Capability] = {}
        for capability in capabilities:
            if capability.key in table:
                raise ValueError(f"duplicate capability for {capability.key.dialect} {capability.key}")
            table[capability.key] = capability
        self._table = MappingProxyType(table)

    def lookup(self, key: RoutingKey) -> Capability:
        """Return the capability for key, or raise UnsupportedKeyError."""
        try:
            return self._table[key]
        except KeyError:
            raise UnsupportedKeyError(key) from None

    def keys(self) -> List[RoutingKey]:
        """All registered keys, ordered by dialect, version, type."""
        return sorted(
            self._table,
            key=lambda k: (k.dialect.value, k.version, k.message_type),
        )

    def __contains__(self, key: object) -> bool:
        return key in self._table

    def __iter__(self) -> Iterator[RoutingKey]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self):
        return f"CapabilityRegistry({len(self)} keys)"


# =========================================================================
# SUPPORTED X12 TRANSACTION SETS
# version -> ((transaction set, description), ...)
# =========================================================================

X12_MESSAGE_TYPES: Dict[str, Tuple[Tuple[str, str], ...]] = {
    "003030": (
        ("998", "Set Cancellation"),
    ),
    "004010": (
        ("204", "Motor Carrier Load Tender"),
        ("309", "Customs Manifest"),
        ("310", "Freight Receipt and Invoice (Ocean)"),
        ("315", "Status Details (Ocean)"),
        ("322", "Terminal Operations and Intermodal Ramp Activity"),
        ("404", "Rail Carrier Shipment Information"),
        ("997", "Functional Acknowledgment"),
        ("998", "Set Cancellation"),
    ),
    "005010": (
        ("834", "Benefit Enrollment and Maintenance"),
        ("835", "Health Care Claim Payment/Advice"),
        ("837", "Health Care Claim"),
    ),
    "005030": (
        ("404", "Rail Carrier Shipment Information"),
    ),
}


def x12_capability(version: str, message_type: str, description: str = "") -> Capability:
    """Bind the generic X12 transmission codec to one routing key."""
    codec = X12TransmissionCodec(RoutingKey(Dialect.X12, version, message_type))
    return Capability(
        key=codec.key,
        parse=codec.parse,
        serialize=codec.serialize,
        description=description,
    )


def build_capabilities() -> List[Capability]:
    return [
        x12_capability(version, message_type, description)
        for version, entries in X12_MESSAGE_TYPES.items()
        for message_type, description in entries
    ]


REGISTRY = CapabilityRegistry(build_capabilities())


def lookup(key: RoutingKey) -> Capability:
    """Look up a key in the process-wide registry."""
    return REGISTRY.lookup(key)
