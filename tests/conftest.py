"""Shared fixtures: throwaway git repositories shaped like gittuf policy repos."""

from __future__ import annotations

import base64
import json
import logging
from dataclasses import dataclass
from pathlib import Path

import pytest
from git import Actor, Repo

from gittufviz.config import POLICY_REF, VisualizerConfig

ROOT_DOCUMENT = {"type": "root", "expires": "2030-01-01T00:00:00Z"}


def make_envelope(document, signatures=None) -> str:
    payload = base64.b64encode(json.dumps(document).encode("utf-8")).decode("ascii")
    return json.dumps({"payload": payload, "signatures": signatures if signatures is not None else []})


@dataclass
class PolicyRepo:
    path: Path
    repo: Repo
    initial_commit: str
    policy_commit: str


def _commit_files(repo: Repo, files: dict, message: str, actor: Actor) -> str:
    root = Path(repo.working_tree_dir)
    for relative, content in files.items():
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    repo.index.add(list(files))
    return repo.index.commit(message, author=actor, committer=actor).hexsha


@pytest.fixture
def policy_repo(tmp_path) -> PolicyRepo:
    """Two commits on the default branch; the second also sits on the policy ref."""
    path = tmp_path / "policy-repo"
    repo = Repo.init(path)
    initial = _commit_files(
        repo,
        {"README.md": "# Test Repo"},
        "Initial commit",
        Actor("Test User", "test@example.com"),
    )
    policy = _commit_files(
        repo,
        {"metadata/root.json": make_envelope(ROOT_DOCUMENT)},
        "Add root.json",
        Actor("Gittuf Admin", "admin@gittuf.com"),
    )
    repo.git.update_ref(POLICY_REF, policy)
    yield PolicyRepo(path=path, repo=repo, initial_commit=initial, policy_commit=policy)
    repo.close()


@pytest.fixture
def plain_repo(tmp_path) -> PolicyRepo:
    """A repository with history but without any policy ref."""
    path = tmp_path / "plain-repo"
    repo = Repo.init(path)
    actor = Actor("Test User", "test@example.com")
    initial = _commit_files(repo, {"README.md": "# Plain"}, "Initial commit", actor)
    second = _commit_files(repo, {"notes.txt": "notes"}, "Add notes", actor)
    yield PolicyRepo(path=path, repo=repo, initial_commit=initial, policy_commit=second)
    repo.close()


@pytest.fixture
def clone_root(tmp_path) -> Path:
    root = tmp_path / "clones"
    root.mkdir()
    return root


@pytest.fixture
def config(clone_root) -> VisualizerConfig:
    return VisualizerConfig(base_dir=clone_root.parent / "home", temp_dir=clone_root)


@pytest.fixture(autouse=True)
def _restore_package_logger():
    logger = logging.getLogger("gittufviz")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate
