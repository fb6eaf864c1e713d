"""Attack-surface rules: sensitive public routes and bare endpoints."""

from __future__ import annotations

from apiposture.models.endpoint import Endpoint
from apiposture.models.finding import Finding
from apiposture.models.types import FrameworkType, SecurityClassification, Severity
from apiposture.rules.base import SecurityRule, framework_recommendation

SENSITIVE_KEYWORDS: tuple[str, ...] = (
    "admin", "debug", "internal", "export", "import", "backup", "config",
    "settings", "system", "management", "dashboard", "metrics", "logs", "audit",
    "secret", "private", "hidden", "test", "dev", "staging",
)


class SensitiveRouteKeywords(SecurityRule):
    """AP007: a public route whose path hints at sensitive functionality.

    Substring match, so /api/devices trips on "dev".
    """

    id = "AP007"
    name = "Sensitive route keywords"
    description = "Public route contains sensitive keywords"
    severity = Severity.MEDIUM

    def evaluate(self, endpoint: Endpoint) -> list[Finding]:
        if endpoint.authorization.classification is not SecurityClassification.PUBLIC:
            return []
        route = endpoint.route.lower()
        found = [k for k in SENSITIVE_KEYWORDS if k in route]
        if not found:
            return []
        return [self.finding(
            endpoint,
            f"{endpoint.display()} is public but contains sensitive keywords: {', '.join(found)}",
            f'Routes containing "{found[0]}" typically indicate sensitive functionality '
            "that should require authentication. Add authentication middleware or guards, "
            "or rename the route if it is truly meant to be public.",
        )]


_AP008_RECOMMENDATIONS = {
    FrameworkType.EXPRESS: (
        "This endpoint has no middleware. Consider adding: "
        "(1) Authentication middleware, (2) Rate limiting, (3) Input validation, "
        '(4) Request logging. Example: app.get("/path", auth, validate, handler)'
    ),
    FrameworkType.NESTJS: (
        "This endpoint has no guards or interceptors. Consider adding: "
        "(1) @UseGuards() for authentication, (2) @UseInterceptors() for logging, "
        "(3) @UsePipes() for validation."
    ),
    FrameworkType.FASTIFY: (
        "This endpoint has no hooks. Consider adding preHandler hooks for "
        "authentication, validation, and logging."
    ),
    FrameworkType.KOA: (
        "This endpoint has no middleware chain. Consider adding middleware for "
        "authentication, validation, and error handling."
    ),
}


class UnprotectedEndpoint(SecurityRule):
    """AP008: public with no middleware or guards at all."""

    id = "AP008"
    name = "Unprotected endpoint"
    description = "Endpoint has no middleware chain for protection"
    severity = Severity.HIGH

    def evaluate(self, endpoint: Endpoint) -> list[Finding]:
        auth = endpoint.authorization
        if (
            auth.classification is SecurityClassification.PUBLIC
            and not auth.middleware_chain
            and not auth.guard_names
            and not auth.is_explicitly_public
        ):
            return [self.finding(
                endpoint,
                f"{endpoint.display()} has no middleware chain",
                framework_recommendation(
                    endpoint,
                    _AP008_RECOMMENDATIONS,
                    "Add middleware for authentication, validation, and security.",
                ),
            )]
        return []
