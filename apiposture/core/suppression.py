"""Suppression matching — mark findings that config says to ignore."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from apiposture.models.config import SuppressionConfig
from apiposture.models.endpoint import Endpoint
from apiposture.models.finding import Finding

logger = logging.getLogger(__name__)


def route_pattern_regex(pattern: str) -> re.Pattern[str] | None:
    """Compile a route glob: ``**`` spans segments, ``*`` stays within one.

    Everything else is literal. Returns None if the result does not compile.
    """
    parts = []
    for chunk in pattern.split("**"):
        parts.append("[^/]+".join(re.escape(piece) for piece in chunk.split("*")))
    try:
        return re.compile("^" + ".*".join(parts) + "$")
    except re.error as e:
        logger.warning("Ignoring invalid route pattern %r: %s", pattern, e)
        return None


class SuppressionMatcher:
    """First matching suppression wins; all of its set filters must match."""

    def __init__(self, suppressions: Iterable[SuppressionConfig] = ()) -> None:
        self.suppressions = list(suppressions)
        self._patterns: dict[str, re.Pattern[str] | None] = {}

    def apply(self, findings: Iterable[Finding]) -> list[Finding]:
        result: list[Finding] = []
        for finding in findings:
            match = self.find_for_endpoint(finding.endpoint, finding.rule_id)
            result.append(finding.suppress(match.reason) if match else finding)
        suppressed = sum(1 for f in result if f.suppressed)
        if suppressed:
            logger.info("Suppressed %d of %d findings", suppressed, len(result))
        return result

    def find_for_endpoint(self, endpoint: Endpoint, rule_id: str) -> SuppressionConfig | None:
        for suppression in self.suppressions:
            if self._matches(suppression, endpoint, rule_id):
                return suppression
        return None

    def _matches(self, s: SuppressionConfig, endpoint: Endpoint, rule_id: str) -> bool:
        if s.rule_id and s.rule_id != rule_id:
            return False
        if s.method and s.method.upper() != endpoint.method.value:
            return False
        if s.route and s.route != endpoint.route:
            return False
        if s.route_pattern:
            regex = self._compiled(s.route_pattern)
            if regex is None or not regex.match(endpoint.route):
                return False
        return True

    def _compiled(self, pattern: str) -> re.Pattern[str] | None:
        if pattern not in self._patterns:
            self._patterns[pattern] = route_pattern_regex(pattern)
        return self._patterns[pattern]
