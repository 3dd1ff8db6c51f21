"""
Theory module for music theory utilities.

Contains:
- Camelot wheel key compatibility table
"""

from .camelot import (
    CAMELOT_WHEEL,
    HARMONIC_DESCRIPTIONS,
    CompatibilityLabel,
    CompatibleKeys,
    camelot_from_audio,
    compatible_keys,
    describe_compatibility,
    get_camelot_from_key,
    parse_camelot,
)

__all__ = [
    "CAMELOT_WHEEL",
    "HARMONIC_DESCRIPTIONS",
    "CompatibilityLabel",
    "CompatibleKeys",
    "camelot_from_audio",
    "compatible_keys",
    "describe_compatibility",
    "get_camelot_from_key",
    "parse_camelot",
]
