"""Jinja2-based rendering of resolved templates."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Sequence

import yaml
from jinja2 import StrictUndefined, TemplateError, TemplateSyntaxError, UndefinedError, meta
from jinja2.sandbox import SandboxedEnvironment

from templ.app.locator import ResolvedInvocation
from templ.domain.errors import RenderError, VariablesFormatError


class TemplateRenderer:
    def __init__(self) -> None:
        self._env = SandboxedEnvironment(undefined=StrictUndefined, keep_trailing_newline=True)
        self._env.globals = {}

    def render(self, content: str, variables: Mapping[str, str]) -> str:
        try:
            # Passed positionally: a "self" key would collide with render()'s own parameter.
            return self._env.from_string(content).render(dict(variables))
        except TemplateSyntaxError as exc:
            raise RenderError(f"template syntax error at line {exc.lineno}: {exc.message}") from exc
        except UndefinedError as exc:
            raise RenderError(f"undefined variable: {exc.message}") from exc
        except (TemplateError, TypeError, ValueError, ArithmeticError) as exc:
            raise RenderError(f"cannot render template: {exc}") from exc

    def variables(self, content: str) -> List[str]:
        try:
            ast = self._env.parse(content)
        except TemplateSyntaxError as exc:
            raise RenderError(f"template syntax error at line {exc.lineno}: {exc.message}") from exc
        return sorted(meta.find_undeclared_variables(ast))

    def file_variables(self, path: Path) -> List[str]:
        return self.variables(_read_text(path))

    def render_files(self, invocations: Iterable[ResolvedInvocation]) -> List[str]:
        """Render each invocation; without a variables file the text passes through."""

        rendered: List[str] = []
        for invocation in invocations:
            content = _read_text(invocation.template_path)
            if invocation.variables_path is None:
                rendered.append(content)
                continue
            variables = load_variables(invocation.variables_path)
            rendered.append(self.render(content, variables))
        return rendered


def load_variables(path: Path) -> Dict[str, str]:
    try:
        payload: Any = yaml.safe_load(_read_text(path))
    except yaml.YAMLError as exc:
        raise VariablesFormatError(f"{path}: invalid YAML: {exc}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise VariablesFormatError(f"{path}: expected a mapping of key: value pairs")
    variables: Dict[str, str] = {}
    for key, value in payload.items():
        if isinstance(value, (dict, list)):
            raise VariablesFormatError(f"{path}: value for '{key}' must be a scalar")
        variables[str(key)] = "" if value is None else str(value)
    return variables


def parse_assignments(items: Sequence[str]) -> Dict[str, str]:
    variables: Dict[str, str] = {}
    for item in items:
        key, separator, value = item.partition("=")
        key = key.strip()
        if not separator or not key:
            raise VariablesFormatError(f"expected KEY=VALUE, got {item!r}")
        variables[key] = value
    return variables


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RenderError(f"cannot read {path}: {exc}") from exc
