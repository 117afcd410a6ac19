"""Dataclasses describing the tool request/response payloads."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..errors import InvalidInputError, VisualizerError


def _required(args: Mapping[str, Any], name: str) -> str:
    value = args.get(name)
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(f"'{name}' is required")
    return value.strip()


@dataclass(slots=True)
class CommitsRequest:
    url: str

    @classmethod
    def from_args(cls, args: Mapping[str, Any]) -> "CommitsRequest":
        return cls(url=_required(args, "url"))


@dataclass(slots=True)
class MetadataRequest:
    url: str
    commit: str
    file: str

    @classmethod
    def from_args(cls, args: Mapping[str, Any]) -> "MetadataRequest":
        return cls(
            url=_required(args, "url"),
            commit=_required(args, "commit"),
            file=_required(args, "file"),
        )


@dataclass(slots=True)
class CommitsLocalRequest:
    path: str

    @classmethod
    def from_args(cls, args: Mapping[str, Any]) -> "CommitsLocalRequest":
        return cls(path=_required(args, "path"))


@dataclass(slots=True)
class MetadataLocalRequest:
    path: str
    commit: str
    file: str

    @classmethod
    def from_args(cls, args: Mapping[str, Any]) -> "MetadataLocalRequest":
        return cls(
            path=_required(args, "path"),
            commit=_required(args, "commit"),
            file=_required(args, "file"),
        )


@dataclass(slots=True)
class ErrorResponse:
    error: str
    kind: str
    status: int

    @classmethod
    def from_exception(cls, exc: VisualizerError) -> "ErrorResponse":
        return cls(error=str(exc), kind=exc.kind, status=exc.status)
