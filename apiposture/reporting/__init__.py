"""Scan result reporters: terminal, JSON and Markdown."""

from __future__ import annotations

from apiposture.reporting.json_report import JsonReporter
from apiposture.reporting.markdown import MarkdownReporter
from apiposture.reporting.terminal import TerminalReporter

REPORTERS = {
    "terminal": TerminalReporter,
    "json": JsonReporter,
    "markdown": MarkdownReporter,
}


def get_reporter(name: str, no_color: bool = False, no_icons: bool = False):  # noqa: ANN201
    """Reporter instance by output format name; ValueError for unknown names."""
    key = name.lower()
    if key not in REPORTERS:
        raise ValueError(f"Unknown output format: {name} (choose from {', '.join(REPORTERS)})")
    if key == "terminal":
        return TerminalReporter(no_color=no_color, no_icons=no_icons)
    return REPORTERS[key]()


__all__ = ["JsonReporter", "MarkdownReporter", "REPORTERS", "TerminalReporter", "get_reporter"]
