"""Post-scan filtering and sorting of endpoints and findings."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from apiposture.models.endpoint import Endpoint
from apiposture.models.finding import Finding
from apiposture.models.scan import ScanResult
from apiposture.models.types import FrameworkType, HttpMethod, SecurityClassification, Severity


class SortField(str, Enum):
    SEVERITY = "severity"
    ROUTE = "route"
    METHOD = "method"
    CLASSIFICATION = "classification"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass
class ResultFilter:
    """Narrows a ScanResult. Empty collections mean "no filter"."""

    min_severity: Severity | None = None
    classifications: set[SecurityClassification] = field(default_factory=set)
    methods: set[HttpMethod] = field(default_factory=set)
    route_contains: str | None = None
    frameworks: set[FrameworkType] = field(default_factory=set)
    rule_ids: set[str] = field(default_factory=set)
    sort_by: SortField | None = None
    sort_dir: SortDirection = SortDirection.ASC

    def apply(self, result: ScanResult) -> ScanResult:
        endpoints = [e for e in result.endpoints if self._keep_endpoint(e)]
        findings = [f for f in result.findings if self._keep_finding(f)]
        if self.sort_by is not None:
            endpoints = self._sort_endpoints(endpoints)
            findings = self._sort_findings(findings)
        return result.model_copy(update={"endpoints": endpoints, "findings": findings})

    def _keep_endpoint(self, endpoint: Endpoint) -> bool:
        if self.classifications and endpoint.authorization.classification not in self.classifications:
            return False
        if self.methods and endpoint.method not in self.methods:
            return False
        if self.route_contains and self.route_contains.lower() not in endpoint.route.lower():
            return False
        if self.frameworks and endpoint.framework not in self.frameworks:
            return False
        return True

    def _keep_finding(self, finding: Finding) -> bool:
        if self.min_severity is not None and finding.severity.rank < self.min_severity.rank:
            return False
        if self.rule_ids and finding.rule_id not in self.rule_ids:
            return False
        return self._keep_endpoint(finding.endpoint)

    def _sort_endpoints(self, endpoints: Iterable[Endpoint]) -> list[Endpoint]:
        # Endpoints carry no severity; severity ordering leaves them as discovered
        keys = {
            SortField.ROUTE: lambda e: e.route,
            SortField.METHOD: lambda e: e.method.value,
            SortField.CLASSIFICATION: lambda e: e.authorization.classification.value,
        }
        key = keys.get(self.sort_by)
        if key is None:
            return list(endpoints)
        return sorted(endpoints, key=key, reverse=self.sort_dir is SortDirection.DESC)

    def _sort_findings(self, findings: Iterable[Finding]) -> list[Finding]:
        keys = {
            SortField.SEVERITY: lambda f: f.severity.rank,
            SortField.ROUTE: lambda f: f.endpoint.route,
            SortField.METHOD: lambda f: f.endpoint.method.value,
            SortField.CLASSIFICATION: lambda f: f.endpoint.authorization.classification.value,
        }
        return sorted(findings, key=keys[self.sort_by], reverse=self.sort_dir is SortDirection.DESC)
