"""Error taxonomy shared by every templ component."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence


class TemplError(RuntimeError):
    """Base class for expected, user-facing failures."""


class InvalidOriginError(TemplError):
    """Raised when an origin is empty or cannot be mapped to a store destination."""


class FetchFailedError(TemplError):
    """Raised when cloning or pulling a collection fails."""


class UpdateFailedError(TemplError):
    """Raised when one or more collections failed a store-wide update."""

    def __init__(self, failures: Sequence[tuple[Path, Exception]]) -> None:
        self.failures = list(failures)
        details = "; ".join(f"{path}: {error}" for path, error in self.failures)
        super().__init__(f"{len(self.failures)} collection(s) failed to update: {details}")


class ListFailedError(TemplError):
    """Raised when a directory in the store cannot be read."""


class TemplateNotFoundError(TemplError):
    pass


class VariablesFileNotFoundError(TemplError):
    pass


class AmbiguousTemplateError(TemplError):
    """Raised when a name matches more than one file in the store."""

    def __init__(self, name: str, candidates: Sequence[str]) -> None:
        self.name = name
        self.candidates = sorted(candidates)
        listing = ", ".join(self.candidates)
        super().__init__(f"'{name}' is ambiguous; candidates: {listing}")


class RenderError(TemplError):
    pass


class VariablesFormatError(TemplError):
    """Raised when variable definitions are not a flat key/value mapping."""


__all__ = [
    "AmbiguousTemplateError",
    "FetchFailedError",
    "InvalidOriginError",
    "ListFailedError",
    "RenderError",
    "TemplError",
    "TemplateNotFoundError",
    "UpdateFailedError",
    "VariablesFileNotFoundError",
    "VariablesFormatError",
]
