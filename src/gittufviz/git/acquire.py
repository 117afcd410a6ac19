"""Acquisition of local repositories and temporary clones of remote ones."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from git import Git, Repo
from git.exc import (
    GitCommandError,
    InvalidGitRepositoryError,
    NoSuchPathError,
    UnsafeProtocolError,
)

from ..config import DEFAULT_CONFIG, VisualizerConfig
from ..errors import (
    AcquisitionError,
    InternalIOError,
    InvalidInputError,
    ReferenceFetchError,
    RepositoryNotFoundError,
)

logger = logging.getLogger(__name__)

# Never block on a credential prompt; missing credentials must fail fast.
_GIT_ENV = {"GIT_TERMINAL_PROMPT": "0"}
_MISSING_REMOTE_REF = "couldn't find remote ref"


class RepositoryHandle:
    """An open repository plus the working copy it lives in.

    Handles created by :func:`acquire_remote` own a temporary clone which is
    deleted on :meth:`release`. Handles created by :func:`acquire_local` only
    close the repository and leave the directory alone.
    """

    def __init__(self, repo: Repo, path: Path, temporary: bool = False):
        self.repo = repo
        self.path = path
        self.temporary = temporary
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        """Close the repository and remove the working copy if it is ours."""
        if self._released:
            return
        self.repo.close()
        if self.temporary:
            logger.debug("Removing temporary clone %s", self.path)
            _remove_tree(self.path)
        self._released = True

    def __enter__(self) -> "RepositoryHandle":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        if exc_type is None:
            self.release()
            return
        # Already unwinding; a cleanup failure must not replace that error.
        try:
            self.release()
        except InternalIOError as exc:
            logger.error("%s", exc)

    def __repr__(self) -> str:
        kind = "temporary" if self.temporary else "local"
        return f"RepositoryHandle({kind}, {str(self.path)!r})"


def acquire_local(path: str | os.PathLike | None) -> RepositoryHandle:
    """Open an existing repository in place.

    Parameters
    ----------
    path:
        Working tree or bare repository directory. Parent directories are not
        searched.

    Raises
    ------
    InvalidInputError:
        If ``path`` is empty.
    RepositoryNotFoundError:
        If ``path`` does not exist or holds no repository.
    InternalIOError:
        If the directory exists but cannot be read.
    """
    if path is None or not str(path).strip():
        raise InvalidInputError("Repository path is required")

    repo_path = Path(path).expanduser()
    try:
        repo = Repo(repo_path)
    except (InvalidGitRepositoryError, NoSuchPathError) as exc:
        raise RepositoryNotFoundError(f"Not a git repository: {repo_path}") from exc
    except OSError as exc:
        raise InternalIOError(f"Cannot open repository {repo_path}", str(exc)) from exc

    logger.debug("Opened local repository %s", repo_path)
    return RepositoryHandle(repo, repo_path.resolve(), temporary=False)


def acquire_remote(url: str | None, config: VisualizerConfig | None = None) -> RepositoryHandle:
    """Clone ``url`` into a fresh temporary directory and fetch the policy ref.

    Each call gets its own directory, so concurrent clones of the same URL
    never share disk state. The directory is removed again if anything fails,
    including interruption, before the exception propagates. A remote that has
    no policy ref is accepted; walking that ref later reports it missing.

    Raises
    ------
    InvalidInputError:
        If ``url`` is empty or uses a protocol git must not be driven with.
    AcquisitionError:
        If the clone fails (network, authentication, unknown repository,
        timeout).
    ReferenceFetchError:
        If the clone succeeded but fetching the policy ref failed for a reason
        other than the ref being absent.
    InternalIOError:
        If the temporary directory cannot be created.
    """
    active = config or DEFAULT_CONFIG
    url = (url or "").strip()
    if not url:
        raise InvalidInputError("Repository URL is required")
    try:
        Git.check_unsafe_protocols(url)
    except UnsafeProtocolError as exc:
        raise InvalidInputError(f"Unsupported repository URL: {url}", str(exc)) from exc

    workdir = _make_workdir(active)
    repo: Optional[Repo] = None
    try:
        repo = _clone(url, workdir, active)
        _fetch_ref(repo, url, active.policy_ref, active)
    except BaseException:
        if repo is not None:
            repo.close()
        _discard(workdir)
        raise

    return RepositoryHandle(repo, workdir, temporary=True)


def _make_workdir(config: VisualizerConfig) -> Path:
    parent = str(config.temp_dir) if config.temp_dir else None
    try:
        return Path(tempfile.mkdtemp(prefix=config.temp_prefix, dir=parent))
    except OSError as exc:
        raise InternalIOError("Cannot create temporary directory", str(exc)) from exc


def _clone(url: str, workdir: Path, config: VisualizerConfig) -> Repo:
    logger.info("Cloning %s into %s", url, workdir)
    try:
        Git().clone(
            "--",
            url,
            str(workdir),
            env=_GIT_ENV,
            kill_after_timeout=config.clone_timeout,
        )
    except GitCommandError as exc:
        raise AcquisitionError(f"Failed to clone {url}", _stderr(exc)) from exc
    return Repo(workdir)


def _fetch_ref(repo: Repo, url: str, ref_name: str, config: VisualizerConfig) -> bool:
    """Fetch ``ref_name`` from origin into the same local name.

    Returns ``False`` when the remote simply does not have the ref.
    """
    refspec = f"+{ref_name}:{ref_name}"
    try:
        repo.git.fetch(
            "origin",
            refspec,
            env=_GIT_ENV,
            kill_after_timeout=config.clone_timeout,
        )
    except GitCommandError as exc:
        stderr = _stderr(exc)
        if _MISSING_REMOTE_REF in stderr.lower():
            logger.warning("Remote %s has no %s", url, ref_name)
            return False
        raise ReferenceFetchError(f"Failed to fetch {ref_name} from {url}", stderr) from exc

    logger.debug("Fetched %s from %s", ref_name, url)
    return True


def _stderr(exc: GitCommandError) -> str:
    text = str(exc.stderr or "").strip()
    if text.startswith("stderr:"):
        text = text[len("stderr:"):].strip()
    return text.strip("'") or str(exc)


def _remove_tree(path: Path) -> None:
    try:
        shutil.rmtree(path)
    except FileNotFoundError:
        pass
    except OSError as exc:
        raise InternalIOError(f"Cannot remove working copy {path}", str(exc)) from exc


def _discard(path: Path) -> None:
    """Best-effort removal on an error path; the original error wins."""
    try:
        _remove_tree(path)
    except InternalIOError as exc:
        logger.error("%s", exc)
