"""Exposure rules: endpoints that are public, intentionally or not."""

from __future__ import annotations

from apiposture.models.endpoint import Endpoint
from apiposture.models.finding import Finding
from apiposture.models.types import FrameworkType, SecurityClassification, Severity, is_write_method
from apiposture.rules.base import SecurityRule, framework_recommendation

_AP001_RECOMMENDATIONS = {
    FrameworkType.EXPRESS: (
        "Add authentication middleware (e.g., passport.authenticate) or "
        "mark as explicitly public with allowAnonymous middleware if intentional."
    ),
    FrameworkType.NESTJS: (
        "Add @UseGuards(AuthGuard) to require authentication, or "
        "add @Public() decorator if public access is intentional."
    ),
    FrameworkType.FASTIFY: (
        "Add preHandler hook for authentication or mark as explicitly public if intentional."
    ),
    FrameworkType.KOA: (
        "Add authentication middleware or mark as explicitly public if intentional."
    ),
}


class PublicWithoutExplicitIntent(SecurityRule):
    """AP001: reachable without auth and nobody said that was on purpose."""

    id = "AP001"
    name = "Public without explicit intent"
    description = "Endpoint is publicly accessible without explicit @Public or allowAnonymous marker"
    severity = Severity.HIGH

    def evaluate(self, endpoint: Endpoint) -> list[Finding]:
        auth = endpoint.authorization
        if (
            auth.classification is SecurityClassification.PUBLIC
            and not auth.is_explicitly_public
            and not auth.is_authenticated
            and not auth.guard_names
        ):
            return [self.finding(
                endpoint,
                f"{endpoint.display()} is publicly accessible without explicit intent",
                framework_recommendation(
                    endpoint,
                    _AP001_RECOMMENDATIONS,
                    "Add authentication or mark as explicitly public if intentional.",
                ),
            )]
        return []


class AllowAnonymousOnWrite(SecurityRule):
    """AP002: a write operation deliberately opened to anonymous callers."""

    id = "AP002"
    name = "AllowAnonymous on write operation"
    description = "Write operation (POST/PUT/DELETE/PATCH) is explicitly marked as public"
    severity = Severity.HIGH

    def evaluate(self, endpoint: Endpoint) -> list[Finding]:
        if not (is_write_method(endpoint.method) and endpoint.authorization.is_explicitly_public):
            return []
        return [self.finding(
            endpoint,
            f"{endpoint.display()} is a write operation explicitly marked as public",
            f"Write operations like {endpoint.method.value} typically require authentication. "
            "If public access is truly needed (e.g., user registration, contact form), "
            "consider adding rate limiting and input validation. "
            "Otherwise, remove the public marker and add authentication.",
        )]
