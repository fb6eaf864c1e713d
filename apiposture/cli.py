"""Typer CLI — scan a project and report its authorization posture."""

from __future__ import annotations

import logging
from contextlib import nullcontext
from enum import Enum
from pathlib import Path
from typing import Annotated, Optional, TypeVar

import typer
from rich.console import Console
from rich.logging import RichHandler

from apiposture import __version__

app = typer.Typer(
    name="apiposture",
    help="Static authorization posture analysis for Express, NestJS, Fastify and Koa APIs.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console()
err_console = Console(stderr=True)

E = TypeVar("E", bound=Enum)


class OutputFormat(str, Enum):
    terminal = "terminal"
    json = "json"
    markdown = "markdown"


def version_callback(value: bool) -> None:
    if value:
        console.print(f"apiposture v{__version__}")
        raise typer.Exit()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _parse_list(raw: str | None, parse, option: str) -> set:  # noqa: ANN001
    """Comma-separated option value -> set of parsed items; BadParameter on unknown items."""
    if not raw:
        return set()
    items = set()
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        value = parse(part)
        if value is None:
            raise typer.BadParameter(f"Unknown value: {part}", param_hint=option)
        items.add(value)
    return items


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", help="Show version and exit.", callback=version_callback),
    ] = None,
) -> None:
    """ApiPosture — find unauthenticated and over-permissive API endpoints."""


@app.command()
def scan(
    path: Annotated[Path, typer.Argument(help="Project directory to scan.")] = Path("."),
    output: Annotated[
        OutputFormat, typer.Option("--output", "-o", help="Output format.")
    ] = OutputFormat.terminal,
    output_file: Annotated[
        Optional[Path], typer.Option("--output-file", "-f", help="Write the report to a file.")
    ] = None,
    config: Annotated[
        Optional[Path], typer.Option("--config", "-c", help="Path to a config file.")
    ] = None,
    severity: Annotated[
        Optional[str], typer.Option("--severity", help="Minimum severity to report.")
    ] = None,
    fail_on: Annotated[
        Optional[str],
        typer.Option("--fail-on", help="Exit with code 1 if a finding at this severity or above remains."),
    ] = None,
    sort_by: Annotated[
        Optional[str],
        typer.Option("--sort-by", help="Sort by: severity, route, method, classification."),
    ] = None,
    sort_dir: Annotated[str, typer.Option("--sort-dir", help="Sort direction: asc, desc.")] = "asc",
    classification: Annotated[
        Optional[str], typer.Option("--classification", help="Filter by classification (comma-separated).")
    ] = None,
    method: Annotated[
        Optional[str], typer.Option("--method", help="Filter by HTTP method (comma-separated).")
    ] = None,
    route_contains: Annotated[
        Optional[str], typer.Option("--route-contains", help="Filter routes containing a string.")
    ] = None,
    api_style: Annotated[
        Optional[str],
        typer.Option("--api-style", help="Frameworks to scan: express, nestjs, fastify, koa."),
    ] = None,
    rule: Annotated[
        Optional[str], typer.Option("--rule", help="Filter by rule ID (comma-separated).")
    ] = None,
    no_color: Annotated[bool, typer.Option("--no-color", help="Disable colors.")] = False,
    no_icons: Annotated[bool, typer.Option("--no-icons", help="Disable icons.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging.")] = False,
) -> None:
    """Scan a project for API authorization issues."""
    from apiposture.config import ConfigError, load_config
    from apiposture.core.analyzer import ProjectAnalyzer
    from apiposture.core.filters import ResultFilter, SortDirection, SortField
    from apiposture.models.types import FrameworkType, HttpMethod, SecurityClassification, Severity
    from apiposture.reporting import get_reporter

    _setup_logging(verbose)

    min_severity = _parse_one(severity, Severity.parse, "--severity")
    fail_severity = _parse_one(fail_on, Severity.parse, "--fail-on")
    frameworks = _parse_list(api_style, FrameworkType.parse, "--api-style")
    result_filter = ResultFilter(
        min_severity=min_severity,
        classifications=_parse_list(classification, SecurityClassification.parse, "--classification"),
        methods=_parse_list(method, HttpMethod.parse, "--method"),
        route_contains=route_contains,
        frameworks=frameworks,
        rule_ids={r.strip().upper() for r in rule.split(",") if r.strip()} if rule else set(),
        sort_by=_parse_one(sort_by, _enum_parser(SortField), "--sort-by"),
        sort_dir=_parse_one(sort_dir, _enum_parser(SortDirection), "--sort-dir") or SortDirection.ASC,
    )

    try:
        cfg = load_config(config, search_from=path)
        analyzer = ProjectAnalyzer(cfg, frameworks=list(frameworks))
        interactive = output is OutputFormat.terminal and output_file is None
        with console.status("Scanning project...") if interactive else nullcontext():
            result = analyzer.analyze(path)
    except (FileNotFoundError, ConfigError) as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    result = result_filter.apply(result)
    reporter = get_reporter(
        output.value,
        no_color=no_color or cfg.output.no_color or output_file is not None,
        no_icons=no_icons or cfg.output.no_icons,
    )

    if output_file is not None:
        output_file.write_text(reporter.render(result), encoding="utf-8")
        console.print(f"Output written to: {output_file}")
    elif output is OutputFormat.terminal:
        reporter.print(result, Console(no_color=no_color or cfg.output.no_color))
    else:
        typer.echo(reporter.render(result))

    if fail_severity is not None:
        highest = result.highest_severity()
        if highest is not None and highest.rank >= fail_severity.rank:
            raise typer.Exit(1)


def _parse_one(raw: str | None, parse, option: str):  # noqa: ANN001, ANN202
    if raw is None:
        return None
    value = parse(raw)
    if value is None:
        raise typer.BadParameter(f"Unknown value: {raw}", param_hint=option)
    return value


def _enum_parser(enum_cls: type[E]):  # noqa: ANN202
    def parse(value: str) -> E | None:
        try:
            return enum_cls(value.strip().lower())
        except ValueError:
            return None

    return parse

