"""Project-wide guard and route-prefix registration (NestJS bootstrap and modules).

The summary is informational; it is not merged into per-endpoint authorization.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from apiposture.analysis.source import SourceUnit
from apiposture.models.scan import GlobalAuthConfig

logger = logging.getLogger(__name__)

GLOBAL_GUARD_TOKEN = "APP_GUARD"


class GlobalAuthAnalyzer:
    """Finds useGlobalGuards(), setGlobalPrefix() and {provide: APP_GUARD, useClass} providers."""

    def analyze(self, units: Iterable[SourceUnit]) -> GlobalAuthConfig:
        config = GlobalAuthConfig()
        for unit in units:
            self._analyze_unit(unit, config)
        if config.has_global_guard:
            logger.info("Global guard registered: %s", config.global_guard_name or "<unknown>")
        return config

    def _analyze_unit(self, unit: SourceUnit, config: GlobalAuthConfig) -> None:
        for node in unit.walk():
            if node.type == "call_expression":
                self._check_call(unit, node, config)
            elif node.type == "object":
                self._check_provider(unit, node, config)

    def _check_call(self, unit: SourceUnit, call, config: GlobalAuthConfig) -> None:  # noqa: ANN001
        callee = call.child_by_field_name("function")
        if callee is None or callee.type != "member_expression":
            return
        prop = callee.child_by_field_name("property")
        if prop is None:
            return
        method = unit.text(prop)
        args = unit.call_arguments(call)

        if method == "useGlobalGuards":
            config.has_global_guard = True
            if args and args[0].type == "new_expression":
                ctor = args[0].child_by_field_name("constructor")
                if ctor is not None and ctor.type == "identifier":
                    config.global_guard_name = unit.text(ctor)
        elif method == "setGlobalPrefix":
            config.has_global_prefix = True
            if args:
                prefix = unit.string_value(args[0])
                if prefix is not None:
                    config.global_prefix = prefix

    def _check_provider(self, unit: SourceUnit, obj, config: GlobalAuthConfig) -> None:  # noqa: ANN001
        provides_app_guard = False
        guard_name: str | None = None
        for key, value in unit.object_properties(obj):
            if key == "provide" and value.type == "identifier":
                provides_app_guard = unit.text(value) == GLOBAL_GUARD_TOKEN
            elif key == "useClass" and value.type == "identifier":
                guard_name = unit.text(value)
        if provides_app_guard and guard_name:
            config.has_global_guard = True
            config.global_guard_name = guard_name
