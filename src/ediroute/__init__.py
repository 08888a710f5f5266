"""
ediroute - EDI envelope detection and routing

Classifies X12 and EDIFACT interchanges, reads their routing key from the
envelope headers, and converts between EDI text and JSON through a registry
of per-message-type codecs.
"""

__version__ = "0.1.0"
__author__ = "ediroute contributors"

from ediroute.dispatcher import ConversionDispatcher, ConversionResult, Stage, dispatch
from ediroute.envelope import Dialect, RoutingKey, decode_bytes, detect_dialect, extract_routing_key
from ediroute.registry import REGISTRY, Capability, CapabilityRegistry
