"""Commit history walking from a named reference."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Set

from git import Commit
from git.exc import BadName, BadObject

from ..errors import InvalidInputError, ReferenceNotFoundError
from .acquire import RepositoryHandle


@dataclass(frozen=True, slots=True)
class CommitRecord:
    """Metadata about a single commit."""

    hash: str
    author_name: str
    author_email: str
    timestamp: datetime
    message: str

    @classmethod
    def from_commit(cls, commit: Commit) -> "CommitRecord":
        return cls(
            hash=commit.hexsha,
            author_name=commit.author.name or "",
            author_email=commit.author.email or "",
            timestamp=datetime.fromtimestamp(commit.authored_date, tz=timezone.utc),
            message=commit.message,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hash": self.hash,
            "author_name": self.author_name,
            "author_email": self.author_email,
            "timestamp": self.timestamp.isoformat(),
            "message": self.message,
        }


def resolve_reference(handle: RepositoryHandle, ref_name: str) -> Commit:
    """Resolve a reference, symbolic name or hash to the commit it names.

    Raises
    ------
    InvalidInputError:
        If ``ref_name`` is empty.
    ReferenceNotFoundError:
        If nothing in the repository answers to ``ref_name``.
    """
    if not ref_name or not ref_name.strip():
        raise InvalidInputError("Reference name is required")
    try:
        return handle.repo.commit(ref_name)
    except (BadName, BadObject, ValueError) as exc:
        raise ReferenceNotFoundError(f"Reference not found: {ref_name}") from exc


def iter_commits(handle: RepositoryHandle, ref_name: str) -> Iterator[CommitRecord]:
    """Yield every commit reachable from ``ref_name`` exactly once.

    The walk is depth-first pre-order starting at the referenced commit,
    taking first parents before later ones. Only ``ref_name`` seeds the walk;
    other branches contribute nothing unless reachable from it.
    """
    stack: List[Commit] = [resolve_reference(handle, ref_name)]
    seen: Set[str] = set()

    while stack:
        commit = stack.pop()
        if commit.hexsha in seen:
            continue
        seen.add(commit.hexsha)
        yield CommitRecord.from_commit(commit)
        # Reversed so the first parent is popped next.
        stack.extend(p for p in reversed(commit.parents) if p.hexsha not in seen)


def walk_commits(handle: RepositoryHandle, ref_name: str) -> List[CommitRecord]:
    """Return the commit history reachable from ``ref_name``.

    Parameters
    ----------
    handle:
        Repository returned by one of the acquisition functions
    ref_name:
        Reference to start from, e.g. ``refs/gittuf/policy`` or ``HEAD``

    Returns
    -------
    List of CommitRecord objects, tip first
    """
    return list(iter_commits(handle, ref_name))
