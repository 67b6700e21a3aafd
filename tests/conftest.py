from __future__ import annotations

import os
import shutil
import subprocess
import sys
from pathlib import Path
from typing import Callable, Dict

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
SANDBOX_HOME = ROOT / ".test_place" / "templ-home"
os.environ.setdefault("TEMPL_HOME", str(SANDBOX_HOME))
os.environ.setdefault("TEMPL_TELEMETRY", "0")
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from templ import __version__  # noqa: E402
from templ.settings import RuntimeSettings  # noqa: E402


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if shutil.which("git") is not None:
        return
    skip_git = pytest.mark.skip(reason="git executable not available")
    for item in items:
        if item.get_closest_marker("git") is not None:
            item.add_marker(skip_git)


_GIT_IDENTITY = [
    "-c",
    "user.name=templ tests",
    "-c",
    "user.email=tests@templ.invalid",
    "-c",
    "commit.gpgsign=false",
]


def run_git(cwd: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *_GIT_IDENTITY, *args],
        cwd=cwd,
        check=True,
        capture_output=True,
        text=True,
    )
    return result.stdout


def _write_files(root: Path, files: Dict[str, str]) -> None:
    for relative, content in files.items():
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")


@pytest.fixture()
def runtime_settings(tmp_path: Path) -> RuntimeSettings:
    runtime = tmp_path / "runtime"
    home = runtime / "home"
    template_dir = runtime / "templates"
    log_dir = runtime / "logs"
    for directory in (home, template_dir, log_dir):
        directory.mkdir(parents=True, exist_ok=True)
    return RuntimeSettings(home_dir=home, template_dir=template_dir, log_dir=log_dir, cli_version=__version__)


@pytest.fixture()
def make_git_repo(tmp_path: Path) -> Callable[..., Path]:
    """Create a committed git repository under ``tmp_path/origins``."""

    def _make(name: str = "team-templates", files: Dict[str, str] | None = None) -> Path:
        root = tmp_path / "origins" / name
        root.mkdir(parents=True)
        _write_files(root, files or {"hello.tmpl": "Hello {{ NAME }}\n"})
        run_git(root, "init", "--quiet")
        run_git(root, "add", ".")
        run_git(root, "commit", "--quiet", "-m", "initial templates")
        return root

    return _make


@pytest.fixture()
def commit_files() -> Callable[[Path, Dict[str, str]], None]:
    def _commit(repo: Path, files: Dict[str, str]) -> None:
        _write_files(repo, files)
        run_git(repo, "add", ".")
        run_git(repo, "commit", "--quiet", "-m", "more templates")

    return _commit


@pytest.fixture()
def git() -> Callable[..., str]:
    return run_git
