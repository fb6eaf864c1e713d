"""Security rule contract."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping

from apiposture.models.endpoint import Endpoint
from apiposture.models.finding import Finding
from apiposture.models.types import FrameworkType, Severity


class SecurityRule(ABC):
    """A pure check of one endpoint; emits zero or one finding."""

    id: str
    name: str
    description: str
    severity: Severity

    @abstractmethod
    def evaluate(self, endpoint: Endpoint) -> list[Finding]: ...

    def finding(self, endpoint: Endpoint, message: str, recommendation: str) -> Finding:
        return Finding(
            rule_id=self.id,
            rule_name=self.name,
            severity=self.severity,
            message=message,
            endpoint=endpoint,
            location=endpoint.location,
            recommendation=recommendation,
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.id}>"


def framework_recommendation(
    endpoint: Endpoint,
    by_framework: Mapping[FrameworkType, str],
    default: str,
) -> str:
    return by_framework.get(endpoint.framework, default)
