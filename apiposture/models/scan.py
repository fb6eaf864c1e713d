"""Scan result container and summary helpers."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from apiposture.models.endpoint import Endpoint
from apiposture.models.finding import Finding
from apiposture.models.types import Severity


class GlobalAuthConfig(BaseModel):
    """Project-wide guard and prefix registration (NestJS bootstrap/module code)."""

    has_global_guard: bool = False
    global_guard_name: str | None = None
    has_global_prefix: bool = False
    global_prefix: str | None = None


class ScanSummary(BaseModel):
    total_endpoints: int = 0
    total_findings: int = 0
    findings_by_severity: dict[Severity, int] = Field(default_factory=dict)
    suppressed_findings: int = 0


class ScanResult(BaseModel):
    """Everything one scan produced."""

    project_path: str
    scan_date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    endpoints: list[Endpoint] = Field(default_factory=list)
    findings: list[Finding] = Field(default_factory=list)
    files_scanned: int = 0
    scan_duration_ms: int = 0
    global_auth: GlobalAuthConfig = Field(default_factory=GlobalAuthConfig)

    @property
    def active_findings(self) -> list[Finding]:
        return [f for f in self.findings if not f.suppressed]

    @property
    def suppressed_findings(self) -> list[Finding]:
        return [f for f in self.findings if f.suppressed]

    def summary(self) -> ScanSummary:
        active = self.active_findings
        by_severity = {
            severity: sum(1 for f in active if f.severity == severity) for severity in Severity
        }
        return ScanSummary(
            total_endpoints=len(self.endpoints),
            total_findings=len(active),
            findings_by_severity=by_severity,
            suppressed_findings=len(self.suppressed_findings),
        )

    def highest_severity(self) -> Severity | None:
        active = self.active_findings
        if not active:
            return None
        return max((f.severity for f in active), key=lambda s: s.rank)
