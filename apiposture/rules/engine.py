"""Rule engine: the fixed AP001-AP008 catalogue filtered by config."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from apiposture.models.config import RuleConfig
from apiposture.models.endpoint import Endpoint
from apiposture.models.finding import Finding
from apiposture.models.types import Severity
from apiposture.rules.base import SecurityRule
from apiposture.rules.consistency import ControllerActionConflict, MissingAuthOnWrites
from apiposture.rules.exposure import AllowAnonymousOnWrite, PublicWithoutExplicitIntent
from apiposture.rules.privilege import ExcessiveRoleAccess, WeakRoleNaming
from apiposture.rules.surface import SensitiveRouteKeywords, UnprotectedEndpoint

logger = logging.getLogger(__name__)


def default_rules() -> list[SecurityRule]:
    return [
        PublicWithoutExplicitIntent(),
        AllowAnonymousOnWrite(),
        ControllerActionConflict(),
        MissingAuthOnWrites(),
        ExcessiveRoleAccess(),
        WeakRoleNaming(),
        SensitiveRouteKeywords(),
        UnprotectedEndpoint(),
    ]


class RuleEngine:
    """Runs every enabled rule against every endpoint, in catalogue order."""

    def __init__(self, rules_config: Mapping[str, RuleConfig] | None = None) -> None:
        rules_config = rules_config or {}
        known = {rule.id for rule in default_rules()}
        for rule_id in rules_config:
            if rule_id not in known:
                logger.warning("Unknown rule in config: %s", rule_id)

        self._rules: list[SecurityRule] = []
        self._severity_overrides: dict[str, Severity] = {}
        for rule in default_rules():
            cfg = rules_config.get(rule.id)
            if cfg is not None and not cfg.enabled:
                logger.debug("Rule %s disabled by config", rule.id)
                continue
            if cfg is not None and cfg.severity is not None:
                self._severity_overrides[rule.id] = cfg.severity
            self._rules.append(rule)

    @property
    def rules(self) -> list[SecurityRule]:
        return list(self._rules)

    def get_rule(self, rule_id: str) -> SecurityRule | None:
        return next((r for r in self._rules if r.id == rule_id), None)

    def evaluate(self, endpoints: Iterable[Endpoint]) -> list[Finding]:
        findings: list[Finding] = []
        for endpoint in endpoints:
            for rule in self._rules:
                for finding in rule.evaluate(endpoint):
                    override = self._severity_overrides.get(rule.id)
                    if override is not None:
                        finding = finding.model_copy(update={"severity": override})
                    findings.append(finding)
        return findings
