#!/usr/bin/env python3
"""Entry point for the templ CLI."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from textwrap import dedent
from typing import TextIO

from templ import __version__
from templ.adapters.git_repository import new_git_repository
from templ.app.locator import TemplateLocator
from templ.app.renderer import TemplateRenderer, parse_assignments
from templ.app.store_index import list_templates
from templ.app.store_update import StoreUpdater
from templ.domain.errors import TemplError
from templ.settings import SETTINGS, ensure_store
from templ.utils.telemetry import clear as telemetry_clear
from templ.utils.telemetry import iter_events as telemetry_iter
from templ.utils.telemetry import record_event, summarize as telemetry_summarize

logger = logging.getLogger("templ")

HELP_OVERVIEW = dedent(
    """
    Render text templates kept in git repositories.

    Usage forms:
      templ NAME                  print the template NAME (like cat)
      templ NAME=vars.yaml        render NAME with the key: value pairs in vars.yaml
      templ -v NAME               list the variables NAME references
      templ NAME | templ FOO=BAR  render piped template text with inline variables

    Template collections:
      templ -f https://github.com/OWNER/REPO.git   clone into <store>/github/OWNER/REPO
      templ -f ~/src/my-templates                  clone into <store>/local/my-templates
      templ -u                                     git pull --ff-only every collection
      templ -l                                     list every template in the store
      templ --telemetry report                     summarise the local telemetry log

    Environment:
      TEMPL_DIR        template store (default: ~/.templ/templates)
      TEMPL_HOME       state and logs (default: ~/.templ)
      TEMPL_TELEMETRY  set to 0 to disable local telemetry
    """
)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _read_piped_input(stream: TextIO | None) -> str:
    if stream is None:
        return ""
    try:
        if stream.isatty():
            return ""
        return stream.read()
    except (OSError, ValueError) as exc:
        # Closed or captured stdin carries no template.
        logger.debug("stdin not readable: %s", exc)
        return ""


def _emit(text: str) -> None:
    sys.stdout.write(text if text.endswith("\n") else f"{text}\n")


def _pipeline_cmd(args: argparse.Namespace, content: str) -> int:
    renderer = TemplateRenderer()
    if args.variables:
        for name in renderer.variables(content):
            print(name)
        return 0
    variables = parse_assignments(args.templates)
    _emit(renderer.render(content, variables))
    record_event(SETTINGS, "render", {"source": "stdin", "variables": len(variables)})
    return 0


def _list_cmd(store: Path) -> int:
    entries = sorted(list_templates([store]))
    for entry in entries:
        print(entry)
    record_event(SETTINGS, "list", {"count": len(entries)})
    return 0


def _fetch_cmd(origin: str, store: Path) -> int:
    started = time.monotonic()
    repository = new_git_repository(origin, store)
    outcome = repository.fetch()
    print(f"{outcome.value} {origin} into {repository.templ_destination()}")
    record_event(
        SETTINGS,
        "fetch",
        {"kind": repository.kind.value, "outcome": outcome.value},
        duration_ms=(time.monotonic() - started) * 1000,
    )
    return 0


def _update_cmd(store: Path) -> int:
    report = StoreUpdater(store).update_all()
    for result in report.results:
        if result.ok:
            print(f"updated {result.path}")
        else:
            print(f"templ: failed to update {result.path}: {result.error}", file=sys.stderr)
    failed = len(report.failed)
    record_event(
        SETTINGS,
        "update",
        {"succeeded": len(report.succeeded), "failed": failed},
        status="error" if failed else "ok",
    )
    return 1 if failed else 0


def _telemetry_cmd(action: str) -> int:
    if action == "report":
        summary = telemetry_summarize(telemetry_iter(SETTINGS))
        print(json.dumps(summary, indent=2, ensure_ascii=False))
        return 0
    telemetry_clear(SETTINGS)
    print("Telemetry log cleared")
    return 0


def _variables_cmd(args: argparse.Namespace, store: Path) -> int:
    renderer = TemplateRenderer()
    for invocation in TemplateLocator(store).locate(args.templates):
        names = renderer.file_variables(invocation.template_path)
        if not names:
            print(f"No variables detected in {invocation.template_path}")
            continue
        for name in names:
            print(name)
    return 0


def _render_cmd(args: argparse.Namespace, store: Path) -> int:
    invocations = TemplateLocator(store).locate(args.templates)
    for text in TemplateRenderer().render_files(invocations):
        _emit(text)
    record_event(SETTINGS, "render", {"source": "store", "count": len(invocations)})
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="templ",
        description=HELP_OVERVIEW,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"templ {__version__}")
    parser.add_argument("-l", "--list", action="store_true", help="list available templates")
    parser.add_argument("-u", "--update", action="store_true", help="git pull every template repository in the store")
    parser.add_argument(
        "-f",
        "--fetch",
        metavar="ORIGIN",
        help="clone a git repository (GitHub URL or local path) into the store",
    )
    parser.add_argument(
        "-v",
        "--variables",
        action="store_true",
        help="only print the variables referenced by the given templates, then exit",
    )
    parser.add_argument(
        "--telemetry",
        choices=("report", "clear"),
        help="print aggregated local telemetry stats, or remove the telemetry log",
    )
    parser.add_argument("--verbose", action="store_true", help="log debug output to stderr")
    parser.add_argument(
        "templates",
        nargs="*",
        metavar="NAME[=VARIABLES]",
        help="template names, optionally paired with a YAML variables file",
    )
    return parser


def main(argv: list[str] | None = None, *, stdin: TextIO | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        store = ensure_store(SETTINGS)
    except OSError as exc:
        print(f"templ: cannot create template store {SETTINGS.template_dir}: {exc}", file=sys.stderr)
        return 1

    piped = _read_piped_input(sys.stdin if stdin is None else stdin)
    try:
        if piped:
            return _pipeline_cmd(args, piped)

        acted = False
        exit_code = 0
        if args.list:
            exit_code |= _list_cmd(store)
            acted = True
        if args.fetch is not None:
            exit_code |= _fetch_cmd(args.fetch, store)
            acted = True
        if args.update:
            exit_code |= _update_cmd(store)
            acted = True
        if args.telemetry is not None:
            exit_code |= _telemetry_cmd(args.telemetry)
            acted = True

        if not args.templates:
            # A bare -v has nothing to inspect and succeeds quietly.
            if acted or args.variables:
                return exit_code
            parser.print_usage(sys.stderr)
            return 2
        if args.variables:
            return exit_code | _variables_cmd(args, store)
        return exit_code | _render_cmd(args, store)
    except TemplError as exc:
        print(f"templ: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
