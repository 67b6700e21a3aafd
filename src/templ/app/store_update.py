"""Store-wide update of every fetched template collection."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List

from templ.adapters.git_client import GitClient
from templ.adapters.git_repository import GitHubRepository, LocalGitRepository
from templ.app.store_index import is_hidden
from templ.domain.errors import InvalidOriginError, TemplError, UpdateFailedError
from templ.domain.origin import OriginKind
from templ.ports.source_repo import SourceRepository

logger = logging.getLogger(__name__)

RepositoryFactory = Callable[[str, Path, GitClient], SourceRepository]

_FACTORIES: Dict[OriginKind, RepositoryFactory] = {
    OriginKind.LOCAL: LocalGitRepository,
    OriginKind.GITHUB: GitHubRepository,
}


@dataclass(frozen=True)
class CollectionUpdate:
    path: Path
    kind: OriginKind
    origin: str | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class UpdateReport:
    results: List[CollectionUpdate] = field(default_factory=list)

    @property
    def succeeded(self) -> List[CollectionUpdate]:
        return [result for result in self.results if result.ok]

    @property
    def failed(self) -> List[CollectionUpdate]:
        return [result for result in self.results if not result.ok]

    def raise_for_failures(self) -> None:
        failures = self.failed
        if failures:
            raise UpdateFailedError([(result.path, result.error) for result in failures])


class StoreUpdater:
    """Pull every collection in the store, one at a time, collecting failures."""

    def __init__(self, store_root: Path, git: GitClient | None = None) -> None:
        self._store_root = Path(store_root)
        self._git = git or GitClient()

    def discover(self) -> List[tuple[OriginKind, Path]]:
        found: List[tuple[OriginKind, Path]] = []
        local_dir = self._store_root / OriginKind.LOCAL.store_dir
        for path in _subdirectories(local_dir):
            found.append((OriginKind.LOCAL, path))
        github_dir = self._store_root / OriginKind.GITHUB.store_dir
        for owner in _subdirectories(github_dir):
            for path in _subdirectories(owner):
                found.append((OriginKind.GITHUB, path))

        collections: List[tuple[OriginKind, Path]] = []
        for kind, path in found:
            if self._git.is_work_tree(path):
                collections.append((kind, path))
            else:
                logger.warning("skipping %s: not a git repository", path)
        return collections

    def update_all(self) -> UpdateReport:
        report = UpdateReport()
        for kind, path in self.discover():
            report.results.append(self._update_one(kind, path))
        return report

    def _update_one(self, kind: OriginKind, path: Path) -> CollectionUpdate:
        origin: str | None = None
        try:
            origin = self._git.remote_url(path)
            repository = _FACTORIES[kind](origin, self._store_root, self._git)
            expected = repository.templ_destination()
            if expected != path:
                raise InvalidOriginError(f"{path} tracks {origin}, which belongs at {expected}")
            repository.update()
        except TemplError as exc:
            logger.warning("update of %s failed: %s", path, exc)
            return CollectionUpdate(path=path, kind=kind, origin=origin, error=exc)
        return CollectionUpdate(path=path, kind=kind, origin=origin)


def _subdirectories(directory: Path) -> List[Path]:
    if not directory.is_dir():
        return []
    return sorted(
        entry for entry in directory.iterdir() if entry.is_dir() and not is_hidden(entry.name)
    )


__all__ = ["CollectionUpdate", "StoreUpdater", "UpdateReport"]
