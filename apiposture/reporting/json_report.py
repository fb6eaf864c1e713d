"""JSON report — machine-readable scan output."""

from __future__ import annotations

from typing import Any

import orjson

from apiposture.models.endpoint import Endpoint, SourceLocation
from apiposture.models.finding import Finding
from apiposture.models.scan import ScanResult


def _location(loc: SourceLocation) -> dict[str, Any]:
    return {"file": loc.file_path, "line": loc.line, "column": loc.column}


def _endpoint(e: Endpoint) -> dict[str, Any]:
    auth = e.authorization
    return {
        "route": e.route,
        "method": e.method.value,
        "handler": e.handler_name,
        "controller": e.controller_name,
        "framework": e.framework.value,
        "location": _location(e.location),
        "authorization": {
            "classification": auth.classification.value,
            "isAuthenticated": auth.is_authenticated,
            "isExplicitlyPublic": auth.is_explicitly_public,
            "roles": auth.roles,
            "policies": auth.policies,
            "middlewareChain": auth.middleware_chain,
            "guards": auth.guard_names,
        },
    }


def _finding(f: Finding) -> dict[str, Any]:
    return {
        "ruleId": f.rule_id,
        "ruleName": f.rule_name,
        "severity": f.severity.value,
        "message": f.message,
        "endpoint": {"route": f.endpoint.route, "method": f.endpoint.method.value},
        "location": _location(f.location),
        "recommendation": f.recommendation,
    }


def _suppressed(f: Finding) -> dict[str, Any]:
    return {
        "ruleId": f.rule_id,
        "ruleName": f.rule_name,
        "severity": f.severity.value,
        "endpoint": {"route": f.endpoint.route, "method": f.endpoint.method.value},
        "suppressionReason": f.suppression_reason,
    }


class JsonReporter:
    name = "json"

    def build(self, result: ScanResult) -> dict[str, Any]:
        summary = result.summary()
        return {
            "scanInfo": {
                "projectPath": result.project_path,
                "scanDate": result.scan_date.isoformat(),
                "filesScanned": result.files_scanned,
                "scanDurationMs": result.scan_duration_ms,
            },
            "summary": {
                "totalEndpoints": summary.total_endpoints,
                "totalFindings": summary.total_findings,
                "findingsBySeverity": {s.value: n for s, n in summary.findings_by_severity.items()},
                "suppressedFindings": summary.suppressed_findings,
            },
            "globalAuth": {
                "hasGlobalGuard": result.global_auth.has_global_guard,
                "globalGuardName": result.global_auth.global_guard_name,
                "hasGlobalPrefix": result.global_auth.has_global_prefix,
                "globalPrefix": result.global_auth.global_prefix,
            },
            "endpoints": [_endpoint(e) for e in result.endpoints],
            "findings": [_finding(f) for f in result.active_findings],
            "suppressedFindings": [_suppressed(f) for f in result.suppressed_findings],
        }

    def render(self, result: ScanResult) -> str:
        return orjson.dumps(self.build(result), option=orjson.OPT_INDENT_2).decode()
