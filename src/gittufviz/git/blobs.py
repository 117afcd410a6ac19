"""Reading file contents out of historical commit trees."""

from __future__ import annotations

from typing import List

from git import Blob, Commit, Tree
from git.exc import BadName, BadObject

from ..errors import CommitNotFoundError, InvalidInputError, PathNotFoundError
from .acquire import RepositoryHandle


def resolve_commit(handle: RepositoryHandle, commit_id: str) -> Commit:
    """Look up a commit by hash or symbolic name (``HEAD``, a branch...)."""
    if not commit_id or not commit_id.strip():
        raise InvalidInputError("Commit identifier is required")
    try:
        return handle.repo.commit(commit_id.strip())
    except (BadName, BadObject, ValueError) as exc:
        raise CommitNotFoundError(f"Commit not found: {commit_id}") from exc


def split_path(relative_path: str) -> List[str]:
    """Split a tree path on ``/`` whatever the host separator is.

    Empty segments from leading, trailing or doubled slashes are dropped.
    """
    segments = [part for part in (relative_path or "").split("/") if part]
    if not segments:
        raise InvalidInputError("File path is required")
    return segments


def resolve_blob(handle: RepositoryHandle, commit_id: str, relative_path: str) -> bytes:
    """Return the full contents of ``relative_path`` as of ``commit_id``.

    Parameters
    ----------
    handle:
        Open repository
    commit_id:
        Commit hash or symbolic name
    relative_path:
        ``/``-separated path from the root of the commit's tree

    Raises
    ------
    CommitNotFoundError:
        If the commit does not exist
    PathNotFoundError:
        If a segment is missing, or the path names a directory or submodule
        instead of a file
    """
    segments = split_path(relative_path)
    commit = resolve_commit(handle, commit_id)

    entry = commit.tree
    walked: List[str] = []
    for segment in segments:
        if not isinstance(entry, Tree):
            raise PathNotFoundError(
                f"Path not found at {commit.hexsha[:8]}: {relative_path}",
                f"{'/'.join(walked)} is not a directory",
            )
        try:
            entry = entry[segment]
        except KeyError as exc:
            raise PathNotFoundError(
                f"Path not found at {commit.hexsha[:8]}: {relative_path}"
            ) from exc
        walked.append(segment)

    if not isinstance(entry, Blob):
        raise PathNotFoundError(
            f"Path not found at {commit.hexsha[:8]}: {relative_path}",
            "not a file",
        )

    return entry.data_stream.read()
