from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List

import pytest

from templ.adapters.git_client import GitClient
from templ.adapters.git_repository import (
    GitHubRepository,
    LocalGitRepository,
    new_git_repository,
)
from templ.domain.errors import FetchFailedError, InvalidOriginError
from templ.domain.origin import OriginKind
from templ.ports.source_repo import FetchOutcome


class RecordingGit(GitClient):
    """Git double that materialises clones as plain directories."""

    def __init__(self, *, fail_clone: bool = False) -> None:
        super().__init__()
        self.calls: List[tuple[str, str]] = []
        self._fail_clone = fail_clone
        self._work_trees: set[Path] = set()

    def clone(self, source: str, destination: Path) -> None:
        self.calls.append(("clone", source))
        destination.mkdir(parents=True)
        (destination / "partial.tmpl").write_text("half written\n", encoding="utf-8")
        if self._fail_clone:
            raise FetchFailedError("git clone failed: network unreachable")
        self._work_trees.add(destination.name)

    def pull(self, work_tree: Path) -> None:
        self.calls.append(("pull", str(work_tree)))

    def is_work_tree(self, path: Path) -> bool:
        return path.is_dir() and path.name in self._work_trees


@pytest.mark.parametrize("factory", [LocalGitRepository, GitHubRepository, new_git_repository])
def test_empty_origin_is_rejected(factory: Callable[..., object], tmp_path: Path) -> None:
    with pytest.raises(InvalidOriginError):
        factory("", tmp_path)


def test_local_destination(tmp_path: Path) -> None:
    repository = LocalGitRepository("../testing-files/local-git-repo", tmp_path)
    assert repository.templ_destination() == tmp_path / "local" / "local-git-repo"
    assert repository.kind is OriginKind.LOCAL


def test_github_destination(tmp_path: Path) -> None:
    repository = GitHubRepository("https://github.com/PlayTechnique/templ_templates.git", tmp_path)
    assert repository.templ_destination() == tmp_path / "github" / "PlayTechnique" / "templ_templates"
    assert repository.kind is OriginKind.GITHUB


def test_malformed_github_origin_fails_at_construction(tmp_path: Path) -> None:
    with pytest.raises(InvalidOriginError):
        GitHubRepository("https://github.com/only-owner", tmp_path)


def test_factory_dispatches_on_origin(tmp_path: Path) -> None:
    assert isinstance(new_git_repository("git@github.com:acme/snippets.git", tmp_path), GitHubRepository)
    assert isinstance(new_git_repository(str(tmp_path / "snippets"), tmp_path), LocalGitRepository)


def test_fetch_clones_then_pulls(tmp_path: Path) -> None:
    git = RecordingGit()
    store = tmp_path / "store"
    repository = GitHubRepository("https://github.com/acme/snippets.git", store, git)

    assert repository.fetch() is FetchOutcome.CLONED
    destination = repository.templ_destination()
    assert (destination / "partial.tmpl").exists()

    assert repository.fetch() is FetchOutcome.UPDATED
    assert [call[0] for call in git.calls] == ["clone", "pull"]
    assert (destination / "partial.tmpl").exists()
    assert [p.name for p in destination.parent.iterdir()] == ["snippets"]


def test_failed_clone_leaves_no_destination(tmp_path: Path) -> None:
    store = tmp_path / "store"
    repository = GitHubRepository("https://github.com/acme/snippets.git", store, RecordingGit(fail_clone=True))
    with pytest.raises(FetchFailedError):
        repository.fetch()
    destination = repository.templ_destination()
    assert not destination.exists()
    assert list(destination.parent.iterdir()) == []


def test_fetch_refuses_to_overwrite_non_repository(tmp_path: Path) -> None:
    store = tmp_path / "store"
    repository = LocalGitRepository(str(tmp_path / "snippets"), store, RecordingGit())
    destination = repository.templ_destination()
    destination.mkdir(parents=True)
    (destination / "keep.tmpl").write_text("mine\n", encoding="utf-8")
    with pytest.raises(FetchFailedError):
        repository.fetch()
    assert (destination / "keep.tmpl").read_text(encoding="utf-8") == "mine\n"


def test_update_requires_prior_fetch(tmp_path: Path) -> None:
    repository = GitHubRepository("https://github.com/acme/snippets.git", tmp_path, RecordingGit())
    with pytest.raises(FetchFailedError):
        repository.update()


@pytest.mark.git
def test_local_fetch_with_git(
    tmp_path: Path,
    make_git_repo: Callable[..., Path],
    commit_files: Callable[[Path, Dict[str, str]], None],
) -> None:
    origin = make_git_repo("local-git-repo")
    store = tmp_path / "store"
    repository = LocalGitRepository(str(origin), store)

    assert repository.fetch() is FetchOutcome.CLONED
    destination = store / "local" / "local-git-repo"
    assert (destination / "hello.tmpl").read_text(encoding="utf-8") == "Hello {{ NAME }}\n"

    commit_files(origin, {"later.tmpl": "later\n"})
    assert repository.fetch() is FetchOutcome.UPDATED
    assert (destination / "hello.tmpl").exists()
    assert (destination / "later.tmpl").exists()


@pytest.mark.git
def test_update_pulls_new_commits(
    tmp_path: Path,
    make_git_repo: Callable[..., Path],
    commit_files: Callable[[Path, Dict[str, str]], None],
) -> None:
    origin = make_git_repo("snippets")
    repository = LocalGitRepository(str(origin), tmp_path / "store")
    repository.fetch()
    commit_files(origin, {"nested/new.tmpl": "new\n"})
    repository.update()
    assert (repository.templ_destination() / "nested" / "new.tmpl").exists()


@pytest.mark.git
def test_fetch_of_missing_local_origin_fails(tmp_path: Path) -> None:
    repository = LocalGitRepository(str(tmp_path / "nowhere"), tmp_path / "store")
    with pytest.raises(FetchFailedError):
        repository.fetch()
    assert not repository.templ_destination().exists()
