"""Port definitions for template collection sources."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path

from templ.domain.origin import Origin, OriginKind


class FetchOutcome(str, Enum):
    CLONED = "cloned"
    UPDATED = "updated"


class SourceRepository(ABC):
    @property
    @abstractmethod
    def origin(self) -> Origin:
        """Origin the collection is fetched from."""

    @property
    def kind(self) -> OriginKind:
        return self.origin.kind

    @abstractmethod
    def templ_destination(self) -> Path:
        """Directory inside the store that holds this collection."""

    @abstractmethod
    def fetch(self) -> FetchOutcome:
        """Clone the collection, or fast-forward it when already present."""

    @abstractmethod
    def update(self) -> None:
        """Fast-forward an already fetched collection."""
