"""Commit listing tools for MCP server."""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import TYPE_CHECKING, Any, Dict

from ...errors import VisualizerError
from ..contracts import CommitsLocalRequest, CommitsRequest, ErrorResponse

if TYPE_CHECKING:
    from ...service import PolicyService
    from ..server import VisualizerServer


def list_commits(service: PolicyService, args: Dict[str, Any]) -> str:
    """List commits on the policy ref of a remote repository.

    Parameters
    ----------
    service:
        Policy service
    args:
        Tool arguments containing 'url'

    Returns
    -------
    JSON string with the commit array, or an error object
    """
    try:
        request = CommitsRequest.from_args(args)
        commits = service.list_commits(request.url)
    except VisualizerError as exc:
        return json.dumps(asdict(ErrorResponse.from_exception(exc)), indent=2)

    return json.dumps([commit.to_dict() for commit in commits], indent=2)


def list_commits_local(service: PolicyService, args: Dict[str, Any]) -> str:
    """List commits reachable from HEAD of a local repository."""
    try:
        request = CommitsLocalRequest.from_args(args)
        commits = service.list_local_commits(request.path)
    except VisualizerError as exc:
        return json.dumps(asdict(ErrorResponse.from_exception(exc)), indent=2)

    return json.dumps([commit.to_dict() for commit in commits], indent=2)


def register_tools(server: VisualizerServer) -> None:
    """Register commit listing tools with the MCP server.

    Parameters
    ----------
    server:
        MCP server instance
    """
    server.register_tool(
        name="list_commits",
        description="List commits on the gittuf policy ref of a remote repository",
        input_schema={
            "type": "object",
            "properties": {
                "url": {"type": "string", "description": "Repository URL"},
            },
            "required": ["url"],
        },
        handler=list_commits,
    )

    server.register_tool(
        name="list_commits_local",
        description="List commits reachable from HEAD of a local repository",
        input_schema={
            "type": "object",
            "properties": {
                "path": {"type": "string", "description": "Repository path"},
            },
            "required": ["path"],
        },
        handler=list_commits_local,
    )
