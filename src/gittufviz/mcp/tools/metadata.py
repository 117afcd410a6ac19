"""Metadata retrieval tools for MCP server."""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import TYPE_CHECKING, Any, Dict

from ...errors import VisualizerError
from ..contracts import ErrorResponse, MetadataLocalRequest, MetadataRequest

if TYPE_CHECKING:
    from ...service import PolicyService
    from ..server import VisualizerServer

_METADATA_PROPERTIES = {
    "commit": {"type": "string", "description": "Commit SHA or symbolic name"},
    "file": {"type": "string", "description": "Metadata file name, e.g. root.json"},
}


def get_metadata(service: PolicyService, args: Dict[str, Any]) -> str:
    """Fetch and decode a metadata file from a remote repository.

    Parameters
    ----------
    service:
        Policy service
    args:
        Tool arguments containing 'url', 'commit' and 'file'

    Returns
    -------
    JSON string with the decoded metadata document, or an error object
    """
    try:
        request = MetadataRequest.from_args(args)
        document = service.get_metadata(request.url, request.commit, request.file)
    except VisualizerError as exc:
        return json.dumps(asdict(ErrorResponse.from_exception(exc)), indent=2)

    return json.dumps(document, indent=2)


def get_metadata_local(service: PolicyService, args: Dict[str, Any]) -> str:
    """Fetch and decode a metadata file from a local repository."""
    try:
        request = MetadataLocalRequest.from_args(args)
        document = service.get_local_metadata(request.path, request.commit, request.file)
    except VisualizerError as exc:
        return json.dumps(asdict(ErrorResponse.from_exception(exc)), indent=2)

    return json.dumps(document, indent=2)


def register_tools(server: VisualizerServer) -> None:
    server.register_tool(
        name="get_metadata",
        description="Decode a gittuf metadata file at a commit of a remote repository",
        input_schema={
            "type": "object",
            "properties": {
                "url": {"type": "string", "description": "Repository URL"},
                **_METADATA_PROPERTIES,
            },
            "required": ["url", "commit", "file"],
        },
        handler=get_metadata,
    )

    server.register_tool(
        name="get_metadata_local",
        description="Decode a gittuf metadata file at a commit of a local repository",
        input_schema={
            "type": "object",
            "properties": {
                "path": {"type": "string", "description": "Repository path"},
                **_METADATA_PROPERTIES,
            },
            "required": ["path", "commit", "file"],
        },
        handler=get_metadata_local,
    )
