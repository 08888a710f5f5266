"""
ediroute.codecs - Structural codecs bound to routing keys by the registry.
"""

from ediroute.codecs.x12 import X12TransmissionCodec, dict_to_elements, elements_to_dict

__all__ = [
    "X12TransmissionCodec",
    "dict_to_elements",
    "elements_to_dict",
]
