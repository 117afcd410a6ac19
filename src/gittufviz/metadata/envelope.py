"""Decoding of signed metadata envelopes.

gittuf stores each metadata file as an envelope whose ``payload`` is the
base64 encoded metadata document and whose ``signatures`` are carried
alongside. Decoding happens in three stages, each with its own failure:

1. the outer envelope JSON (:class:`MalformedEnvelopeError`)
2. the base64 payload (:class:`MalformedPayloadEncodingError`)
3. the inner metadata JSON (:class:`MalformedMetadataDocumentError`)

Signatures are kept but never verified.
"""

from __future__ import annotations

import base64
import binascii
import json
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Union

from ..errors import (
    MalformedEnvelopeError,
    MalformedMetadataDocumentError,
    MalformedPayloadEncodingError,
)

JSONValue = Union[None, bool, int, float, str, List["JSONValue"], Dict[str, "JSONValue"]]
MetadataDocument = Dict[str, JSONValue]

# Standard alphabet, whole quads, at most two pad characters.
_BASE64 = re.compile(r"(?:[A-Za-z0-9+/]{4})*(?:[A-Za-z0-9+/]{2}==|[A-Za-z0-9+/]{3}=)?")


@dataclass(slots=True)
class Envelope:
    payload: bytes
    signatures: Any = None

    def document(self) -> MetadataDocument:
        """Parse the payload as a JSON object."""
        try:
            document = json.loads(self.payload.decode("utf-8"))
        except (UnicodeDecodeError, ValueError, RecursionError) as exc:
            raise MalformedMetadataDocumentError(
                "Envelope payload is not valid JSON", str(exc)
            ) from exc
        if not isinstance(document, dict):
            raise MalformedMetadataDocumentError(
                "Envelope payload must be a JSON object",
                f"got {type(document).__name__}",
            )
        return document


def parse_envelope(raw: bytes | str) -> Envelope:
    """Parse the outer envelope and base64 decode its payload."""
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedEnvelopeError("Envelope is not valid UTF-8", str(exc)) from exc

    try:
        outer = json.loads(raw)
    except (ValueError, RecursionError) as exc:
        raise MalformedEnvelopeError("Envelope is not valid JSON", str(exc)) from exc

    if not isinstance(outer, dict):
        raise MalformedEnvelopeError("Envelope must be a JSON object")
    if "payload" not in outer:
        raise MalformedEnvelopeError("Envelope has no payload field")
    encoded = outer["payload"]
    if not isinstance(encoded, str):
        raise MalformedEnvelopeError(
            "Envelope payload must be a string", f"got {type(encoded).__name__}"
        )

    if not _BASE64.fullmatch(encoded):
        raise MalformedPayloadEncodingError(
            "Envelope payload is not valid base64", "expected padded standard alphabet"
        )
    try:
        payload = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MalformedPayloadEncodingError(
            "Envelope payload is not valid base64", str(exc)
        ) from exc

    return Envelope(payload=payload, signatures=outer.get("signatures"))


def decode_envelope(raw: bytes | str) -> MetadataDocument:
    """Decode envelope bytes straight to the metadata document they carry."""
    return parse_envelope(raw).document()
