"""Shared Pydantic models used across all apiposture modules."""

from apiposture.models.config import (
    ApiPostureConfig,
    OutputConfig,
    RuleConfig,
    ScanConfig,
    SuppressionConfig,
)
from apiposture.models.endpoint import (
    AuthorizationDraft,
    AuthorizationInfo,
    Endpoint,
    SourceLocation,
    determine_classification,
)
from apiposture.models.finding import Finding
from apiposture.models.scan import GlobalAuthConfig, ScanResult, ScanSummary
from apiposture.models.types import (
    WRITE_METHODS,
    FrameworkType,
    HttpMethod,
    SecurityClassification,
    Severity,
    is_write_method,
)

__all__ = [
    "ApiPostureConfig",
    "AuthorizationDraft",
    "AuthorizationInfo",
    "Endpoint",
    "Finding",
    "FrameworkType",
    "GlobalAuthConfig",
    "HttpMethod",
    "OutputConfig",
    "RuleConfig",
    "ScanConfig",
    "ScanResult",
    "ScanSummary",
    "SecurityClassification",
    "Severity",
    "SourceLocation",
    "SuppressionConfig",
    "WRITE_METHODS",
    "determine_classification",
    "is_write_method",
]
