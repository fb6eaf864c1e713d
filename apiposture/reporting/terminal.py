"""Terminal report — rich tables and panels."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from apiposture.models.finding import Finding
from apiposture.models.scan import ScanResult
from apiposture.models.types import SecurityClassification, Severity

SEVERITY_STYLES: dict[Severity, str] = {
    Severity.CRITICAL: "bold red",
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "blue",
    Severity.INFO: "dim",
}

SEVERITY_ICONS: dict[Severity, str] = {
    Severity.CRITICAL: "✖",
    Severity.HIGH: "▲",
    Severity.MEDIUM: "●",
    Severity.LOW: "○",
    Severity.INFO: "i",
}

CLASSIFICATION_STYLES: dict[SecurityClassification, str] = {
    SecurityClassification.PUBLIC: "red",
    SecurityClassification.AUTHENTICATED: "green",
    SecurityClassification.ROLE_RESTRICTED: "cyan",
    SecurityClassification.POLICY_RESTRICTED: "magenta",
}


class TerminalReporter:
    name = "terminal"

    def __init__(self, no_color: bool = False, no_icons: bool = False, width: int = 120) -> None:
        self.no_color = no_color
        self.no_icons = no_icons
        self.width = width

    def print(self, result: ScanResult, console: Console) -> None:
        summary = result.summary()
        console.print(Panel(
            f"[bold]Project:[/bold] {escape(str(result.project_path))}\n"
            f"[bold]Files scanned:[/bold] {result.files_scanned}\n"
            f"[bold]Endpoints found:[/bold] {summary.total_endpoints}\n"
            f"[bold]Scan duration:[/bold] {result.scan_duration_ms}ms",
            title="ApiPosture Security Scan",
            border_style="green",
        ))

        if result.endpoints:
            console.print(self._endpoint_table(result))

        if summary.total_findings == 0:
            console.print("[green]No security findings detected![/green]")
        else:
            console.print(self._summary_line(result))
            for finding in sorted(result.active_findings, key=lambda f: -f.severity.rank):
                console.print(self._finding_panel(finding))

        if summary.suppressed_findings:
            console.print(f"[dim]({summary.suppressed_findings} findings suppressed)[/dim]")

        if result.global_auth.has_global_guard:
            guard = escape(result.global_auth.global_guard_name or "unknown")
            console.print(f"[dim]Global guard registered: {guard}[/dim]")

    def render(self, result: ScanResult) -> str:
        console = Console(no_color=self.no_color, width=self.width, force_terminal=False)
        with console.capture() as capture:
            self.print(result, console)
        return capture.get()

    def _endpoint_table(self, result: ScanResult) -> Table:
        table = Table(title="Endpoints", show_lines=False)
        table.add_column("Method", style="bold")
        table.add_column("Route")
        table.add_column("Framework")
        table.add_column("Handler")
        table.add_column("Classification")
        table.add_column("Location", style="dim")
        for e in result.endpoints:
            cls = e.authorization.classification
            table.add_row(
                e.method.value,
                escape(e.route),
                e.framework.value,
                escape(f"{e.controller_name}.{e.handler_name}" if e.controller_name else e.handler_name),
                Text(cls.value, style=CLASSIFICATION_STYLES[cls]),
                escape(e.location.format()),
            )
        return table

    def _summary_line(self, result: ScanResult) -> Text:
        line = Text("Findings: ", style="bold")
        counts = result.summary().findings_by_severity
        for severity in sorted(Severity, key=lambda s: -s.rank):
            if counts.get(severity):
                line.append(f"{self._icon(severity)}{severity.value}: {counts[severity]}  ",
                            style=SEVERITY_STYLES[severity])
        return line

    def _finding_panel(self, finding: Finding) -> Panel:
        body = (
            f"[bold]Endpoint:[/bold] {escape(finding.endpoint.display())}\n"
            f"[bold]Location:[/bold] {escape(finding.location.format())}\n"
            f"[bold]Message:[/bold] {escape(finding.message)}\n"
            f"[dim]Recommendation:[/dim] {escape(finding.recommendation)}"
        )
        style = SEVERITY_STYLES[finding.severity]
        return Panel(
            body,
            title=f"{self._icon(finding.severity)}{finding.rule_id}: {finding.rule_name}",
            subtitle=finding.severity.value.upper(),
            border_style=style,
        )

    def _icon(self, severity: Severity) -> str:
        return "" if self.no_icons else f"{SEVERITY_ICONS[severity]} "
