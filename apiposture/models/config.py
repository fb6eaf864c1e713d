"""Configuration models for rules, suppressions, output and scanning.

Config files are written in camelCase (``ruleId``, ``routePattern``); the
models accept either spelling.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from apiposture.models.types import Severity


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RuleConfig(_CamelModel):
    """Per-rule toggle and optional severity override."""

    enabled: bool = True
    severity: Severity | None = None


class SuppressionConfig(_CamelModel):
    """An exemption; present filters are AND-ed together."""

    rule_id: str | None = None
    route: str | None = None
    route_pattern: str | None = None
    method: str | None = None
    reason: str


class OutputConfig(_CamelModel):
    format: str = "terminal"  # "terminal" | "json" | "markdown"
    no_color: bool = False
    no_icons: bool = False


class ScanConfig(_CamelModel):
    exclude_patterns: list[str] = Field(default_factory=list)
    include_patterns: list[str] = Field(default_factory=list)


class ApiPostureConfig(_CamelModel):
    """Everything a config file may contain."""

    rules: dict[str, RuleConfig] = Field(default_factory=dict)
    suppressions: list[SuppressionConfig] = Field(default_factory=list)
    output: OutputConfig = Field(default_factory=OutputConfig)
    scan: ScanConfig = Field(default_factory=ScanConfig)
