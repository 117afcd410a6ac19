"""Top-level read operations behind every front end."""

from __future__ import annotations

import logging
from typing import List

from .config import VisualizerConfig
from .errors import InvalidInputError
from .git.acquire import RepositoryHandle, acquire_local, acquire_remote
from .git.blobs import resolve_blob
from .git.history import CommitRecord, walk_commits
from .metadata.envelope import MetadataDocument, decode_envelope

logger = logging.getLogger(__name__)


class PolicyService:
    """Lists policy history and decodes policy metadata.

    Every call acquires its own repository handle and releases it before
    returning, whether the call succeeds or not. Nothing is cached between
    calls.
    """

    def __init__(self, config: VisualizerConfig | None = None):
        self.config = config or VisualizerConfig()

    def list_commits(self, url: str) -> List[CommitRecord]:
        """Commits reachable from the policy ref of a remote repository."""
        with acquire_remote(url, self.config) as handle:
            return walk_commits(handle, self.config.policy_ref)

    def get_metadata(self, url: str, commit: str, file_name: str) -> MetadataDocument:
        """Decoded metadata file ``file_name`` at ``commit`` of a remote repository."""
        blob_path = self._blob_path(commit, file_name)
        with acquire_remote(url, self.config) as handle:
            return self._decode(handle, commit, blob_path)

    def list_local_commits(self, path: str) -> List[CommitRecord]:
        """Commits reachable from ``HEAD`` (or the configured local ref)."""
        with acquire_local(path) as handle:
            return walk_commits(handle, self.config.local_ref)

    def get_local_metadata(self, path: str, commit: str, file_name: str) -> MetadataDocument:
        blob_path = self._blob_path(commit, file_name)
        with acquire_local(path) as handle:
            return self._decode(handle, commit, blob_path)

    def _blob_path(self, commit: str, file_name: str) -> str:
        # Validate before touching the network.
        if not commit or not commit.strip():
            raise InvalidInputError("Commit identifier is required")
        if not file_name or not file_name.strip("/ "):
            raise InvalidInputError("File name is required")
        return self.config.metadata_path(file_name.strip())

    def _decode(self, handle: RepositoryHandle, commit: str, blob_path: str) -> MetadataDocument:
        raw = resolve_blob(handle, commit, blob_path)
        logger.debug("Read %d bytes from %s at %s", len(raw), blob_path, commit)
        return decode_envelope(raw)
