from __future__ import annotations

import pytest
from git import Actor

from gittufviz.errors import (
    AcquisitionError,
    InvalidInputError,
    MalformedEnvelopeError,
    PathNotFoundError,
    ReferenceNotFoundError,
    RepositoryNotFoundError,
)
from gittufviz.service import PolicyService


@pytest.fixture
def service(config) -> PolicyService:
    return PolicyService(config)


def test_list_commits_walks_policy_ref(policy_repo, service, clone_root) -> None:
    commits = service.list_commits(str(policy_repo.path))

    assert commits[0].hash == policy_repo.policy_commit
    assert [c.message for c in commits] == ["Add root.json", "Initial commit"]
    assert list(clone_root.iterdir()) == []


def test_list_commits_without_policy_ref(plain_repo, service, clone_root) -> None:
    with pytest.raises(ReferenceNotFoundError):
        service.list_commits(str(plain_repo.path))
    assert list(clone_root.iterdir()) == []


def test_get_metadata_from_remote(policy_repo, service, clone_root) -> None:
    metadata = service.get_metadata(str(policy_repo.path), policy_repo.policy_commit, "root.json")

    assert metadata["type"] == "root"
    assert metadata["expires"] == "2030-01-01T00:00:00Z"
    assert list(clone_root.iterdir()) == []


def test_list_local_commits_walks_head(policy_repo, service) -> None:
    commits = service.list_local_commits(str(policy_repo.path))
    assert [c.hash for c in commits] == [policy_repo.policy_commit, policy_repo.initial_commit]


def test_get_local_metadata(policy_repo, service) -> None:
    metadata = service.get_local_metadata(str(policy_repo.path), policy_repo.policy_commit, "root.json")
    assert metadata["type"] == "root"


def test_get_local_metadata_by_symbolic_commit(policy_repo, service) -> None:
    assert service.get_local_metadata(str(policy_repo.path), "HEAD", "root.json")["type"] == "root"


def test_missing_metadata_file(policy_repo, service, clone_root) -> None:
    with pytest.raises(PathNotFoundError):
        service.get_metadata(str(policy_repo.path), policy_repo.policy_commit, "missing.json")
    assert list(clone_root.iterdir()) == []


def test_metadata_file_that_is_not_an_envelope(policy_repo, service) -> None:
    (policy_repo.path / "metadata" / "plain.json").write_text('{"type": "root"}', encoding="utf-8")
    policy_repo.repo.index.add(["metadata/plain.json"])
    actor = Actor("Test User", "test@example.com")
    policy_repo.repo.index.commit("Add plain json", author=actor, committer=actor)

    with pytest.raises(MalformedEnvelopeError):
        service.get_local_metadata(str(policy_repo.path), "HEAD", "plain.json")


def test_invalid_url(service, clone_root) -> None:
    with pytest.raises(AcquisitionError):
        service.list_commits("invalid-url")
    assert list(clone_root.iterdir()) == []


def test_invalid_local_path(service) -> None:
    with pytest.raises(RepositoryNotFoundError):
        service.list_local_commits("invalid-path")
    with pytest.raises(RepositoryNotFoundError):
        service.get_local_metadata("invalid-path", "HEAD", "root.json")


@pytest.mark.parametrize("commit, file_name", [("", "root.json"), ("HEAD", ""), ("HEAD", "/")])
def test_blank_arguments_fail_before_cloning(commit, file_name, service, clone_root) -> None:
    with pytest.raises(InvalidInputError):
        service.get_metadata("invalid-url", commit, file_name)
    assert list(clone_root.iterdir()) == []


def test_cleanup_failure_keeps_the_lookup_error(policy_repo, service, monkeypatch) -> None:
    from gittufviz.errors import InternalIOError
    from gittufviz.git import acquire

    def failing_remove(path) -> None:
        raise InternalIOError(f"Cannot remove working copy {path}", "device busy")

    monkeypatch.setattr(acquire, "_remove_tree", failing_remove)

    with pytest.raises(PathNotFoundError):
        service.get_metadata(str(policy_repo.path), policy_repo.policy_commit, "missing.json")
