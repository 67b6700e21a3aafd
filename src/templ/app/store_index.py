"""Recursive listing of template files, skipping hidden directories."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, List

from templ.domain.errors import ListFailedError
from templ.settings import RuntimeSettings

logger = logging.getLogger(__name__)

HIDDEN_PREFIX = "."


def is_hidden(name: str) -> bool:
    return name.startswith(HIDDEN_PREFIX)


def list_templates(start_dirs: Iterable[str | Path]) -> List[str]:
    """List regular files below each start directory, relative to that directory.

    Hidden entries below a start directory are skipped without being opened,
    but a start directory is scanned even when its own name is hidden. Missing
    start directories contribute nothing. Symlinked directories are not
    followed; symlinks to files are reported like files.
    """

    found: List[str] = []
    for start in start_dirs:
        root = Path(start).expanduser()
        if not root.is_dir():
            logger.debug("skipping %s: not a directory", root)
            continue
        _walk(root, "", found)
    return found


def list_store(settings: RuntimeSettings) -> List[str]:
    return list_templates([settings.template_dir])


def _walk(directory: Path, prefix: str, found: List[str]) -> None:
    try:
        with os.scandir(directory) as iterator:
            entries = list(iterator)
    except OSError as exc:
        raise ListFailedError(f"cannot read directory {directory}: {exc}") from exc

    for entry in entries:
        if is_hidden(entry.name):
            continue
        relative = f"{prefix}{entry.name}"
        try:
            if entry.is_dir(follow_symlinks=False):
                _walk(Path(entry.path), f"{relative}/", found)
            elif entry.is_file():
                found.append(relative)
        except OSError as exc:
            raise ListFailedError(f"cannot inspect {entry.path}: {exc}") from exc


__all__ = ["is_hidden", "list_store", "list_templates"]
