"""Thin wrapper around the ``git`` executable."""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Sequence

from templ.domain.errors import FetchFailedError

logger = logging.getLogger(__name__)


class GitClient:
    def __init__(self, executable: str = "git") -> None:
        self._executable = executable

    def clone(self, source: str, destination: Path) -> None:
        self._run(["clone", "--quiet", "--", source, str(destination)])

    def pull(self, work_tree: Path) -> None:
        self._run(["pull", "--ff-only", "--quiet"], cwd=work_tree)

    def remote_url(self, work_tree: Path, remote: str = "origin") -> str:
        return self._run(["remote", "get-url", remote], cwd=work_tree).strip()

    def is_work_tree(self, path: Path) -> bool:
        if not path.is_dir():
            return False
        try:
            output = self._run(["rev-parse", "--show-toplevel"], cwd=path)
        except FetchFailedError:
            return False
        return Path(output.strip()).resolve() == path.resolve()

    def _run(self, args: Sequence[str], *, cwd: Path | None = None) -> str:
        command = [self._executable, *args]
        logger.debug("running %s (cwd=%s)", " ".join(command), cwd)
        try:
            result = subprocess.run(
                command,
                cwd=cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=True,
                text=True,
            )
        except FileNotFoundError as exc:
            if cwd is not None and exc.filename is not None and Path(os.fsdecode(exc.filename)) == Path(cwd):
                raise FetchFailedError(f"working directory does not exist: {cwd}") from exc
            raise FetchFailedError(f"git executable not found: {self._executable}") from exc
        except subprocess.CalledProcessError as exc:
            detail = (exc.stderr or exc.stdout or "").strip() or f"exit code {exc.returncode}"
            raise FetchFailedError(f"git {args[0]} failed: {detail}") from exc
        return result.stdout
