"""Typed failures raised by the repository and metadata layers.

Every error carries a stable ``kind`` string and an HTTP-like ``status`` hint
so that an outer surface (MCP tool, CLI, web handler) can choose a response
without inspecting messages. The underlying git or decode exception, when
there is one, is chained with ``raise ... from`` and exposed as ``cause``.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class VisualizerError(Exception):
    """Base class for all gittufviz failures."""

    kind = "internal"
    status = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message

    @property
    def cause(self) -> Optional[BaseException]:
        return self.__cause__

    def to_dict(self) -> Dict[str, Any]:
        return {"error": str(self), "kind": self.kind, "status": self.status}


class InvalidInputError(VisualizerError):
    """A URL, path, commit or file argument is missing or malformed."""

    kind = "invalid_input"
    status = 400


class NotFoundError(VisualizerError):
    """Base for repository, reference, commit and path lookups that miss."""

    kind = "not_found"
    status = 404


class RepositoryNotFoundError(NotFoundError):
    kind = "repository_not_found"
    status = 400


class ReferenceNotFoundError(NotFoundError):
    kind = "reference_not_found"


class CommitNotFoundError(NotFoundError):
    kind = "commit_not_found"


class PathNotFoundError(NotFoundError):
    kind = "path_not_found"


# Fragments of git's stderr that point at the request rather than the network.
_CLIENT_FAULT_MARKERS = (
    "does not exist",
    "not found",
    "authentication failed",
    "could not read username",
    "not a git repository",
    "invalid url",
)


class AcquisitionError(VisualizerError):
    """Cloning or fetching a remote repository failed."""

    kind = "acquisition_failed"

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message, details)
        text = (details or "").lower()
        self.status = 400 if any(m in text for m in _CLIENT_FAULT_MARKERS) else 502


class ReferenceFetchError(AcquisitionError):
    """The clone succeeded but fetching a required reference did not."""

    kind = "reference_fetch_failed"


class DecodeError(VisualizerError):
    """Base for the three metadata decoding stages."""

    kind = "decode_failed"
    status = 422


class MalformedEnvelopeError(DecodeError):
    kind = "malformed_envelope"


class MalformedPayloadEncodingError(DecodeError):
    kind = "malformed_payload_encoding"


class MalformedMetadataDocumentError(DecodeError):
    kind = "malformed_metadata_document"


class InternalIOError(VisualizerError):
    """Unexpected filesystem failure unrelated to user input."""

    kind = "internal_io"
    status = 500
