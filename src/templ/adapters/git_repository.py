"""Git-backed template collections (local repositories and GitHub)."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path

from templ.adapters.git_client import GitClient
from templ.domain.errors import FetchFailedError
from templ.domain.origin import Origin, OriginKind, classify_origin, resolve_destination
from templ.ports.source_repo import FetchOutcome, SourceRepository

logger = logging.getLogger(__name__)

STAGING_PREFIX = ".templ-fetch-"


class GitCheckout:
    """Clone/pull logic shared by every git-backed repository variant."""

    def __init__(self, git: GitClient, source: str) -> None:
        self._git = git
        self._source = source

    def fetch(self, destination: Path) -> FetchOutcome:
        if destination.exists():
            if not self._git.is_work_tree(destination):
                raise FetchFailedError(
                    f"{destination} exists and is not a git repository; refusing to overwrite it"
                )
            logger.info("%s already fetched, pulling instead", destination)
            self._git.pull(destination)
            return FetchOutcome.UPDATED

        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            staging = Path(tempfile.mkdtemp(prefix=STAGING_PREFIX, dir=destination.parent))
        except OSError as exc:
            raise FetchFailedError(f"cannot prepare {destination.parent}: {exc}") from exc
        try:
            checkout = staging / destination.name
            logger.info("cloning %s into %s", self._source, destination)
            self._git.clone(self._source, checkout)
            os.replace(checkout, destination)
        except OSError as exc:
            raise FetchFailedError(f"cannot move clone into {destination}: {exc}") from exc
        finally:
            shutil.rmtree(staging, ignore_errors=True)
        return FetchOutcome.CLONED

    def update(self, destination: Path) -> None:
        if not self._git.is_work_tree(destination):
            raise FetchFailedError(f"{destination} has not been fetched yet")
        logger.info("pulling %s", destination)
        self._git.pull(destination)


class _GitSourceRepository(SourceRepository):
    KIND: OriginKind

    def __init__(self, origin: str, store_root: Path, git: GitClient | None = None) -> None:
        self._store_root = Path(store_root)
        self._origin = Origin.parse(origin, self.KIND)
        # Raises InvalidOriginError before any I/O when no destination can be derived.
        self.templ_destination()
        self._checkout = GitCheckout(git or GitClient(), self._origin.clone_source)

    @property
    def origin(self) -> Origin:
        return self._origin

    def templ_destination(self) -> Path:
        return resolve_destination(self._store_root, self._origin)

    def fetch(self) -> FetchOutcome:
        return self._checkout.fetch(self.templ_destination())

    def update(self) -> None:
        self._checkout.update(self.templ_destination())

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._origin.value!r})"


class LocalGitRepository(_GitSourceRepository):
    """Collection cloned from a git repository on the local filesystem."""

    KIND = OriginKind.LOCAL


class GitHubRepository(_GitSourceRepository):
    """Collection cloned from ``github.com/<owner>/<repo>``."""

    KIND = OriginKind.GITHUB


def new_git_repository(origin: str, store_root: Path, git: GitClient | None = None) -> SourceRepository:
    if classify_origin(origin) is OriginKind.GITHUB:
        return GitHubRepository(origin, store_root, git)
    return LocalGitRepository(origin, store_root, git)


__all__ = [
    "GitCheckout",
    "GitHubRepository",
    "LocalGitRepository",
    "new_git_repository",
]
