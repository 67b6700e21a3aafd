"""Resolve ``name`` / ``name=variables`` arguments to files on disk."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence

from templ.app.store_index import list_templates
from templ.domain.errors import (
    AmbiguousTemplateError,
    TemplateNotFoundError,
    VariablesFileNotFoundError,
)

SEPARATOR = "="


@dataclass(frozen=True)
class TemplateInvocation:
    template_arg: str
    variables_arg: str | None = None


@dataclass(frozen=True)
class ResolvedInvocation:
    template_path: Path
    variables_path: Path | None = None


def parse_invocation(argument: str) -> TemplateInvocation:
    """Split ``name=variables`` on the first ``=``; an empty right side means none."""

    name, separator, variables = argument.partition(SEPARATOR)
    name = name.strip()
    if not name:
        raise TemplateNotFoundError(f"no template name in argument {argument!r}")
    if not separator or not variables.strip():
        return TemplateInvocation(template_arg=name)
    return TemplateInvocation(template_arg=name, variables_arg=variables.strip())


def match_entries(name: str, entries: Sequence[str]) -> List[str]:
    """Entries naming ``name``: by path suffix when it has a ``/``, else by basename."""

    name = name.strip("/")
    if "/" in name:
        suffix = f"/{name}"
        return [entry for entry in entries if entry == name or entry.endswith(suffix)]
    return [entry for entry in entries if entry.rsplit("/", 1)[-1] == name]


class TemplateLocator:
    """Find templates in the store and variables files on disk or in the store."""

    def __init__(self, store_root: Path, *, cwd: Path | None = None) -> None:
        self._store_root = Path(store_root).expanduser().absolute()
        self._cwd = Path(cwd) if cwd is not None else None

    def locate(self, arguments: Sequence[str]) -> List[ResolvedInvocation]:
        invocations = [parse_invocation(argument) for argument in arguments]
        if not invocations:
            return []
        entries = list_templates([self._store_root])
        return [self._resolve(invocation, entries) for invocation in invocations]

    def resolve(self, argument: str) -> ResolvedInvocation:
        return self.locate([argument])[0]

    def _resolve(self, invocation: TemplateInvocation, entries: Sequence[str]) -> ResolvedInvocation:
        template_path = self._from_store(invocation.template_arg, entries)
        if template_path is None:
            raise TemplateNotFoundError(
                f"template '{invocation.template_arg}' not found in {self._store_root}"
            )
        variables_path = None
        if invocation.variables_arg is not None:
            variables_path = self._variables_path(invocation.variables_arg, entries)
        return ResolvedInvocation(template_path=template_path, variables_path=variables_path)

    def _variables_path(self, name: str, entries: Sequence[str]) -> Path:
        candidate = Path(name).expanduser()
        if not candidate.is_absolute():
            candidate = (self._cwd or Path(os.getcwd())) / candidate
        if candidate.is_file():
            return candidate.absolute()
        in_store = self._from_store(name, entries)
        if in_store is None:
            raise VariablesFileNotFoundError(
                f"variables file '{name}' not found on disk or in {self._store_root}"
            )
        return in_store

    def _from_store(self, name: str, entries: Sequence[str]) -> Path | None:
        matches = match_entries(name, entries)
        if len(matches) > 1:
            raise AmbiguousTemplateError(name, matches)
        if not matches:
            return None
        return self._store_root / matches[0]


__all__ = [
    "ResolvedInvocation",
    "TemplateInvocation",
    "TemplateLocator",
    "match_entries",
    "parse_invocation",
]
