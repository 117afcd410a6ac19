"""Command line access to gittuf policy history and metadata."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Iterable

from .config import VisualizerConfig
from .errors import VisualizerError
from .logs import configure_logging
from .service import PolicyService


def _resolve_config(args: argparse.Namespace) -> VisualizerConfig:
    config = VisualizerConfig.load(args.config)
    if args.timeout is not None:
        config.clone_timeout = args.timeout
    if args.log_level is not None:
        config.log_level = args.log_level
    return config


def _emit(payload: Any) -> None:
    print(json.dumps(payload, indent=2))


def _commits(service: PolicyService, args: argparse.Namespace) -> None:
    _emit([commit.to_dict() for commit in service.list_commits(args.url)])


def _metadata(service: PolicyService, args: argparse.Namespace) -> None:
    _emit(service.get_metadata(args.url, args.commit, args.file))


def _commits_local(service: PolicyService, args: argparse.Namespace) -> None:
    _emit([commit.to_dict() for commit in service.list_local_commits(args.path)])


def _metadata_local(service: PolicyService, args: argparse.Namespace) -> None:
    _emit(service.get_local_metadata(args.path, args.commit, args.file))


def _serve_mcp(service: PolicyService, args: argparse.Namespace) -> None:
    """Start the MCP server."""
    from .mcp.server import create_server

    print("Starting gittufviz MCP server on stdio. Use Ctrl+C to stop.", file=sys.stderr)
    server = create_server(service.config)
    try:
        asyncio.run(server.run())
    except KeyboardInterrupt:
        print("\nShutting down server...", file=sys.stderr)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to a JSON configuration file (defaults to ~/.gittufviz/config.json)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Seconds allowed for each clone or fetch",
    )
    parser.add_argument(
        "--log-level",
        help="Logging level written to stderr (e.g. DEBUG, INFO, WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    commits_parser = subparsers.add_parser(
        "commits", help="List commits on the policy ref of a remote repository"
    )
    commits_parser.add_argument("url", help="Repository URL")
    commits_parser.set_defaults(func=_commits)

    metadata_parser = subparsers.add_parser(
        "metadata", help="Decode a metadata file from a remote repository"
    )
    metadata_parser.add_argument("url", help="Repository URL")
    metadata_parser.add_argument("--commit", required=True, help="Commit SHA or name")
    metadata_parser.add_argument("--file", required=True, help="Metadata file, e.g. root.json")
    metadata_parser.set_defaults(func=_metadata)

    local_parser = subparsers.add_parser(
        "commits-local", help="List commits reachable from HEAD of a local repository"
    )
    local_parser.add_argument("path", help="Repository path")
    local_parser.set_defaults(func=_commits_local)

    metadata_local_parser = subparsers.add_parser(
        "metadata-local", help="Decode a metadata file from a local repository"
    )
    metadata_local_parser.add_argument("path", help="Repository path")
    metadata_local_parser.add_argument("--commit", required=True, help="Commit SHA or name")
    metadata_local_parser.add_argument("--file", required=True, help="Metadata file, e.g. root.json")
    metadata_local_parser.set_defaults(func=_metadata_local)

    serve_parser = subparsers.add_parser("serve", help="Start the MCP server")
    serve_parser.set_defaults(func=_serve_mcp)

    return parser


def main(argv: Iterable[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        config = _resolve_config(args)
        configure_logging(config.log_level)
        args.func(PolicyService(config), args)
    except VisualizerError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
