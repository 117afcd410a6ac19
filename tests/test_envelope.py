from __future__ import annotations

import base64
import json

import pytest

from gittufviz.errors import (
    DecodeError,
    MalformedEnvelopeError,
    MalformedMetadataDocumentError,
    MalformedPayloadEncodingError,
)
from gittufviz.metadata.envelope import decode_envelope, parse_envelope

from conftest import ROOT_DOCUMENT, make_envelope


def _b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def test_decode_returns_inner_document() -> None:
    document = decode_envelope(make_envelope(ROOT_DOCUMENT).encode("utf-8"))
    assert document == ROOT_DOCUMENT
    assert document["type"] == "root"


def test_decode_preserves_nested_json_values() -> None:
    inner = {
        "type": "targets",
        "version": 3,
        "threshold": 1.5,
        "delegations": {"roles": [{"name": "protect-main", "paths": ["git:refs/heads/main"]}]},
        "terminating": False,
        "expires": None,
    }
    assert decode_envelope(make_envelope(inner)) == inner


def test_signatures_are_kept_but_not_required() -> None:
    signatures = [{"keyid": "abc", "sig": "ZmFrZQ=="}]
    envelope = parse_envelope(make_envelope(ROOT_DOCUMENT, signatures))
    assert envelope.signatures == signatures

    unsigned = json.dumps({"payload": _b64(json.dumps(ROOT_DOCUMENT))})
    assert parse_envelope(unsigned).signatures is None
    assert decode_envelope(unsigned) == ROOT_DOCUMENT


@pytest.mark.parametrize(
    "raw",
    [
        b'{"signatures": []}',
        b"{}",
        b"not json",
        b"[1, 2, 3]",
        b'{"payload": 42}',
        b'{"payload": null}',
        b"\xff\xfe",
    ],
)
def test_envelope_failures(raw) -> None:
    with pytest.raises(MalformedEnvelopeError):
        decode_envelope(raw)


@pytest.mark.parametrize(
    "payload",
    [
        "not base64!!",
        "abc",
        "eyJ0eXBlIjoicm9vdCJ9====",
        "eyJ0eXBlIjoicm9vdCJ9==",
        "eyJ0eXBlIjoicm9vdCJ9\n",
        "é",
    ],
)
def test_payload_encoding_failures(payload) -> None:
    raw = json.dumps({"payload": payload, "signatures": []})
    with pytest.raises(MalformedPayloadEncodingError):
        decode_envelope(raw)


@pytest.mark.parametrize("inner", ["not json", "[1, 2]", '"root"', ""])
def test_metadata_document_failures(inner) -> None:
    raw = json.dumps({"payload": _b64(inner)})
    with pytest.raises(MalformedMetadataDocumentError):
        decode_envelope(raw)


def test_decode_stages_share_a_base_class() -> None:
    for error in (MalformedEnvelopeError, MalformedPayloadEncodingError, MalformedMetadataDocumentError):
        assert issubclass(error, DecodeError)
    assert MalformedEnvelopeError.kind != MalformedPayloadEncodingError.kind
    assert MalformedPayloadEncodingError.kind != MalformedMetadataDocumentError.kind


def test_payload_that_is_not_utf8_is_a_document_failure() -> None:
    raw = json.dumps({"payload": base64.b64encode(b"\xff\x00\xfe").decode("ascii")})
    with pytest.raises(MalformedMetadataDocumentError):
        decode_envelope(raw)


def test_extra_padding_after_full_quad_is_rejected() -> None:
    encoded = _b64('{"type":"root"}')
    assert not encoded.endswith("=")
    assert decode_envelope(json.dumps({"payload": encoded})) == {"type": "root"}

    raw = json.dumps({"payload": encoded + "=="})
    with pytest.raises(MalformedPayloadEncodingError):
        decode_envelope(raw)


def test_deeply_nested_envelope_is_malformed() -> None:
    with pytest.raises(MalformedEnvelopeError):
        decode_envelope("[" * 100000 + "]" * 100000)


def test_deeply_nested_payload_is_malformed_document() -> None:
    raw = json.dumps({"payload": _b64("[" * 100000 + "]" * 100000)})
    with pytest.raises(MalformedMetadataDocumentError):
        decode_envelope(raw)
