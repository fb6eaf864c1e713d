"""Rule findings."""

from __future__ import annotations

from pydantic import BaseModel

from apiposture.models.endpoint import Endpoint, SourceLocation
from apiposture.models.types import Severity


class Finding(BaseModel):
    """One rule's verdict against one endpoint."""

    rule_id: str
    rule_name: str
    severity: Severity
    message: str
    endpoint: Endpoint
    location: SourceLocation
    recommendation: str = ""
    suppressed: bool = False
    suppression_reason: str | None = None

    def suppress(self, reason: str) -> Finding:
        return self.model_copy(update={"suppressed": True, "suppression_reason": reason})
