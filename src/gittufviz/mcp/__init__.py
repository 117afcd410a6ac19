"""MCP contracts and helpers."""

from .contracts import (
    CommitsLocalRequest,
    CommitsRequest,
    ErrorResponse,
    MetadataLocalRequest,
    MetadataRequest,
)

__all__ = [
    "CommitsLocalRequest",
    "CommitsRequest",
    "ErrorResponse",
    "MetadataLocalRequest",
    "MetadataRequest",
]
