"""Express: app/router method calls, resolved against app.use() router mounts."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from apiposture.analysis.source import SourceUnit
from apiposture.authorization.express import ExpressAuthExtractor
from apiposture.discovery.base import (
    HTTP_VERBS,
    EndpointDiscoverer,
    handler_name,
    member_call,
    normalize_route,
)
from apiposture.discovery.registry import RouteGroupRegistry
from apiposture.models.endpoint import Endpoint
from apiposture.models.types import FrameworkType, HttpMethod

logger = logging.getLogger(__name__)

EXPRESS_IDENTIFIERS = frozenset({"app", "router", "express"})


class ExpressDiscoverer(EndpointDiscoverer):
    """``app.get('/path', ...middleware, handler)`` and friends.

    Two passes: ``collect_mounts`` records every ``app.use('/prefix', router)``,
    then route calls are resolved against those prefixes. ``discover_all`` runs
    the first pass over every unit before any routes are read.
    """

    name = "express"
    framework = FrameworkType.EXPRESS

    def __init__(self, registry: RouteGroupRegistry | None = None) -> None:
        self.registry = registry or RouteGroupRegistry()
        self.auth = ExpressAuthExtractor()

    def reset(self) -> None:
        self.registry.clear()

    def discover_all(self, units: Iterable[SourceUnit]) -> list[Endpoint]:
        units = list(units)
        for unit in units:
            self.collect_mounts(unit)
        endpoints: list[Endpoint] = []
        for unit in units:
            endpoints.extend(self._discover_routes(unit))
        return endpoints

    def discover(self, unit: SourceUnit) -> list[Endpoint]:
        self.collect_mounts(unit)
        return self._discover_routes(unit)

    # ── pass 1 ──

    def collect_mounts(self, unit: SourceUnit) -> None:
        for call in unit.find("call_expression"):
            parts = member_call(unit, call)
            if parts is None or parts[1] != "use":
                continue
            args = unit.call_arguments(call)
            if len(args) < 2 or args[1].type != "identifier":
                continue
            prefix = unit.string_value(args[0])
            if prefix is None:
                continue
            self.registry.register_router_mount(unit.file_path, parts[0], prefix, unit.text(args[1]))
            logger.debug("Mount %s -> %s in %s", prefix, unit.text(args[1]), unit.file_path)

    # ── pass 2 ──

    def _discover_routes(self, unit: SourceUnit) -> list[Endpoint]:
        endpoints: list[Endpoint] = []
        for call in unit.find("call_expression"):
            endpoint = self._endpoint_from_call(unit, call)
            if endpoint is not None:
                endpoints.append(endpoint)
        return endpoints

    def _is_app_or_router(self, name: str) -> bool:
        lowered = name.lower()
        if name in EXPRESS_IDENTIFIERS or "app" in lowered or "router" in lowered:
            return True
        # Routers mounted under another name, e.g. app.use("/users", users)
        return name in self.registry.known_identifiers()

    def _endpoint_from_call(self, unit: SourceUnit, call) -> Endpoint | None:  # noqa: ANN001
        parts = member_call(unit, call)
        if parts is None:
            return None
        caller, verb = parts
        if verb.lower() not in HTTP_VERBS or not self._is_app_or_router(caller):
            return None

        args = unit.call_arguments(call)
        # app.get("env") reads a setting; a route needs at least path + handler
        if len(args) < 2:
            return None
        path = unit.template_value(args[0])
        if path is None:
            return None

        middlewares: list[str] = []
        for arg in args[1:-1]:
            name = self._middleware_name(unit, arg)
            if name:
                middlewares.append(name)

        prefix = self.registry.get_router_prefix(unit.file_path, caller)
        inherited = self.registry.get_all_middlewares(unit.file_path, caller)

        return Endpoint(
            route=normalize_route(prefix + path),
            method=HttpMethod.parse(verb),
            handler_name=handler_name(unit, args[-1]),
            framework=self.framework,
            location=unit.location(call),
            authorization=self.auth.extract(middlewares, inherited),
        )

    def _middleware_name(self, unit: SourceUnit, node) -> str | None:  # noqa: ANN001
        if node.type in ("identifier", "member_expression"):
            return unit.text(node)
        if node.type == "call_expression":
            return self._call_name(unit, node)
        if node.type == "array":
            names = [self._middleware_name(unit, e) for e in unit.array_elements(node)]
            return ",".join(n for n in names if n) or None
        return None

    def _call_name(self, unit: SourceUnit, call) -> str | None:  # noqa: ANN001
        """``requireRole('admin')`` keeps its literal arguments so roles can be read back."""
        callee = call.child_by_field_name("function")
        if callee is None or callee.type not in ("identifier", "member_expression"):
            return None
        literals: list[str] = []
        for arg in unit.call_arguments(call):
            value = unit.string_value(arg)
            if value is not None:
                literals.append(f"'{value}'")
            elif arg.type == "array":
                items = [unit.string_value(e) for e in unit.array_elements(arg)]
                quoted = [f"'{v}'" for v in items if v is not None]
                if quoted:
                    literals.append("[" + ", ".join(quoted) + "]")
        name = unit.text(callee)
        return f"{name}({', '.join(literals)})" if literals else name
