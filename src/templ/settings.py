"""Runtime settings for the templ CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from templ import __version__

HOME_ENV = "TEMPL_HOME"
STORE_ENV = "TEMPL_DIR"


@dataclass(frozen=True)
class RuntimeSettings:
    home_dir: Path
    template_dir: Path
    log_dir: Path
    cli_version: str = __version__

    @property
    def telemetry_file(self) -> Path:
        return self.log_dir / "telemetry.jsonl"


def _default_home_dir() -> Path:
    return Path.home() / ".templ"


def _env_path(name: str) -> Path | None:
    value = os.environ.get(name, "").strip()
    if not value:
        return None
    return Path(value).expanduser()


def load_settings() -> RuntimeSettings:
    base = _env_path(HOME_ENV) or _default_home_dir()
    template_dir = _env_path(STORE_ENV) or base / "templates"
    log_dir = base / "logs"
    return RuntimeSettings(
        home_dir=base,
        template_dir=template_dir,
        log_dir=log_dir,
    )


def ensure_store(settings: RuntimeSettings) -> Path:
    """Create the template store if needed and return its absolute path."""

    store = settings.template_dir.expanduser().absolute()
    store.mkdir(mode=0o700, parents=True, exist_ok=True)
    return store


SETTINGS = load_settings()
