"""Git integration: acquiring repositories, walking history, reading blobs."""

from .acquire import RepositoryHandle, acquire_local, acquire_remote
from .blobs import resolve_blob, resolve_commit, split_path
from .history import CommitRecord, iter_commits, resolve_reference, walk_commits

__all__ = [
    "CommitRecord",
    "RepositoryHandle",
    "acquire_local",
    "acquire_remote",
    "iter_commits",
    "resolve_blob",
    "resolve_commit",
    "resolve_reference",
    "split_path",
    "walk_commits",
]
