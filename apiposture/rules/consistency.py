"""Consistency rules: contradictory or missing authorization on one endpoint."""

from __future__ import annotations

from apiposture.models.endpoint import Endpoint
from apiposture.models.finding import Finding
from apiposture.models.types import FrameworkType, SecurityClassification, Severity, is_write_method
from apiposture.rules.base import SecurityRule, framework_recommendation


class ControllerActionConflict(SecurityRule):
    """AP003: method-level @Public() under class-level guards (NestJS only)."""

    id = "AP003"
    name = "Controller/action authorization conflict"
    description = "Method-level public marker overrides class-level authentication guards"
    severity = Severity.MEDIUM

    def evaluate(self, endpoint: Endpoint) -> list[Finding]:
        if endpoint.framework is not FrameworkType.NESTJS:
            return []
        auth = endpoint.authorization
        if not (auth.is_authenticated and auth.is_explicitly_public):
            return []
        return [self.finding(
            endpoint,
            f"{endpoint.display()} has @Public overriding class-level guards",
            "This endpoint has @Public decorator that overrides class-level @UseGuards. "
            "Ensure this is intentional. If the endpoint should be public, consider "
            "documenting why. If not, remove the @Public decorator.",
        )]


_AP004_RECOMMENDATIONS = {
    FrameworkType.EXPRESS: (
        "CRITICAL: Add authentication middleware immediately. "
        'Example: router.post("/path", passport.authenticate("jwt"), handler)'
    ),
    FrameworkType.NESTJS: (
        "CRITICAL: Add @UseGuards(AuthGuard) decorator immediately. "
        "If this endpoint must be public, add @Public() to make intent explicit."
    ),
    FrameworkType.FASTIFY: (
        "CRITICAL: Add authentication via preHandler hook. "
        "Example: { preHandler: [fastify.authenticate] }"
    ),
    FrameworkType.KOA: "CRITICAL: Add authentication middleware before the route handler.",
}


class MissingAuthOnWrites(SecurityRule):
    """AP004: an unauthenticated write that was never declared public."""

    id = "AP004"
    name = "Missing authentication on write operations"
    description = "Write operation has no authentication and no explicit public marker"
    severity = Severity.CRITICAL

    def evaluate(self, endpoint: Endpoint) -> list[Finding]:
        auth = endpoint.authorization
        if (
            is_write_method(endpoint.method)
            and auth.classification is SecurityClassification.PUBLIC
            and not auth.is_authenticated
            and not auth.is_explicitly_public
        ):
            return [self.finding(
                endpoint,
                f"{endpoint.display()} is an unprotected write operation",
                framework_recommendation(
                    endpoint,
                    _AP004_RECOMMENDATIONS,
                    "CRITICAL: Add authentication to this write endpoint immediately.",
                ),
            )]
        return []
