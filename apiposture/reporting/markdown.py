"""Markdown report rendered from a Jinja2 template."""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from apiposture.models.scan import ScanResult
from apiposture.models.types import Severity

TEMPLATE_DIR = Path(__file__).parent / "templates"


def _cell(value: object) -> str:
    """Escape a value for a Markdown table cell."""
    return str(value).replace("|", "\\|").replace("\n", " ")


class MarkdownReporter:
    name = "markdown"

    def __init__(self, template: str = "report.md.j2") -> None:
        self.env = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self.env.filters["cell"] = _cell
        self.template = template

    def render(self, result: ScanResult) -> str:
        summary = result.summary()
        severities = sorted(Severity, key=lambda s: -s.rank)
        return self.env.get_template(self.template).render(
            result=result,
            summary=summary,
            severities=severities,
            findings=sorted(result.active_findings, key=lambda f: -f.severity.rank),
            suppressed=result.suppressed_findings,
        )
