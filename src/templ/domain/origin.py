"""Origins of template collections and where they live inside the store.

Everything here is pure: destinations are computed from the origin string and
the store root without touching the filesystem, so they can be recomputed at
any time and always agree with each other.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from urllib.parse import unquote, urlsplit

from templ.domain.errors import InvalidOriginError

LOCAL_DIR = "local"
GITHUB_DIR = "github"
GITHUB_HOSTS = frozenset({"github.com", "www.github.com"})

_SCP_LIKE = re.compile(r"^(?P<user>[^@/\s]+)@(?P<host>[^:/\s]+):(?P<path>.+)$")


class OriginKind(str, Enum):
    LOCAL = "local"
    GITHUB = "github"

    @property
    def store_dir(self) -> str:
        return LOCAL_DIR if self is OriginKind.LOCAL else GITHUB_DIR


def _require_value(value: str | None) -> str:
    if value is None or not value.strip():
        raise InvalidOriginError("origin must not be empty")
    return value.strip()


def classify_origin(value: str) -> OriginKind:
    """Tell a remote URL apart from a filesystem path."""

    value = _require_value(value)
    if value.startswith("file://"):
        return OriginKind.LOCAL
    if "://" in value and urlsplit(value).scheme:
        return OriginKind.GITHUB
    if _SCP_LIKE.match(value):
        return OriginKind.GITHUB
    return OriginKind.LOCAL


def local_source_path(value: str) -> str:
    """Absolute filesystem path of a local origin (``file://`` URLs included)."""

    value = _require_value(value)
    if value.startswith("file://"):
        value = unquote(urlsplit(value).path)
        if not value:
            raise InvalidOriginError("file:// origin has no path")
    return os.path.abspath(os.path.expanduser(value))


def github_slug(value: str) -> tuple[str, str]:
    """Return ``(owner, repo)`` for a GitHub URL, without a ``.git`` suffix."""

    value = _require_value(value)
    match = _SCP_LIKE.match(value)
    if match and "://" not in value:
        host = match.group("host")
        path = match.group("path")
    else:
        try:
            parsed = urlsplit(value)
        except ValueError as exc:
            raise InvalidOriginError(f"cannot parse origin URL {value!r}: {exc}") from exc
        host = parsed.hostname or ""
        path = parsed.path
    if host.lower() not in GITHUB_HOSTS:
        raise InvalidOriginError(f"unsupported remote host {host!r} in {value!r}; only github.com is supported")

    path = path.strip("/")
    if path.endswith(".git"):
        path = path[: -len(".git")]
    segments = path.split("/")
    if len(segments) != 2 or any(segment in {"", ".", ".."} for segment in segments):
        raise InvalidOriginError(f"expected <owner>/<repo> in origin URL {value!r}")
    owner, repo = segments
    return owner, repo


def local_destination(store_root: Path, value: str) -> Path:
    name = os.path.basename(local_source_path(value))
    if not name:
        raise InvalidOriginError(f"origin {value!r} has no directory name to store it under")
    return Path(store_root) / LOCAL_DIR / name


def github_destination(store_root: Path, value: str) -> Path:
    owner, repo = github_slug(value)
    return Path(store_root) / GITHUB_DIR / owner / repo


@dataclass(frozen=True)
class Origin:
    value: str
    kind: OriginKind

    @classmethod
    def parse(cls, value: str, kind: OriginKind | None = None) -> "Origin":
        value = _require_value(value)
        return cls(value=value, kind=kind or classify_origin(value))

    @property
    def clone_source(self) -> str:
        if self.kind is OriginKind.LOCAL:
            return local_source_path(self.value)
        return self.value


def resolve_destination(store_root: Path, origin: Origin) -> Path:
    if origin.kind is OriginKind.LOCAL:
        return local_destination(store_root, origin.value)
    return github_destination(store_root, origin.value)


__all__ = [
    "GITHUB_DIR",
    "LOCAL_DIR",
    "Origin",
    "OriginKind",
    "classify_origin",
    "github_destination",
    "github_slug",
    "local_destination",
    "local_source_path",
    "resolve_destination",
]
