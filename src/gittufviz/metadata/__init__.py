"""Metadata envelope decoding."""

from .envelope import (
    Envelope,
    JSONValue,
    MetadataDocument,
    decode_envelope,
    parse_envelope,
)

__all__ = [
    "Envelope",
    "JSONValue",
    "MetadataDocument",
    "decode_envelope",
    "parse_envelope",
]
