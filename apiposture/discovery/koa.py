"""Koa (@koa/router): router.<verb>(path, ...middleware, handler)."""

from __future__ import annotations

import logging

from apiposture.analysis.source import SourceUnit
from apiposture.authorization.hooks import koa_middleware_extractor
from apiposture.discovery.base import (
    HTTP_VERBS,
    EndpointDiscoverer,
    member_call,
    normalize_route,
    reference_name,
)
from apiposture.models.endpoint import Endpoint
from apiposture.models.types import FrameworkType, HttpMethod

logger = logging.getLogger(__name__)

KOA_IDENTIFIERS = frozenset({"router", "koaRouter", "apiRouter"})


class KoaDiscoverer(EndpointDiscoverer):
    name = "koa"
    framework = FrameworkType.KOA

    def __init__(self) -> None:
        self.middleware = koa_middleware_extractor()

    def discover(self, unit: SourceUnit) -> list[Endpoint]:
        prefixes = self._router_prefixes(unit)
        endpoints: list[Endpoint] = []
        for call in unit.find("call_expression"):
            parts = member_call(unit, call)
            if parts is None:
                continue
            caller, verb = parts
            if verb.lower() not in HTTP_VERBS or not self._is_router(caller):
                continue

            args = unit.call_arguments(call)
            if len(args) < 2:
                continue
            path = unit.string_value(args[0])
            if path is None:
                continue

            names = [reference_name(unit, a) for a in args[1:-1]]
            endpoints.append(Endpoint(
                route=normalize_route(prefixes.get(caller, "") + path),
                method=HttpMethod.parse(verb),
                handler_name=reference_name(unit, args[-1]) or "anonymous",
                framework=self.framework,
                location=unit.location(call),
                authorization=self.middleware.extract([n for n in names if n]),
            ))
        return endpoints

    @staticmethod
    def _is_router(name: str) -> bool:
        lowered = name.lower()
        return name in KOA_IDENTIFIERS or "router" in lowered or "koa" in lowered

    def _router_prefixes(self, unit: SourceUnit) -> dict[str, str]:
        """``const router = new Router({ prefix: '/api' })`` -> {"router": "/api"}."""
        prefixes: dict[str, str] = {}
        for decl in unit.find("variable_declarator"):
            name = decl.child_by_field_name("name")
            value = decl.child_by_field_name("value")
            if name is None or value is None or name.type != "identifier":
                continue
            if value.type != "new_expression":
                continue
            ctor_args = value.child_by_field_name("arguments")
            if ctor_args is None:
                continue
            for arg in ctor_args.named_children:
                for key, prop in unit.object_properties(arg):
                    prefix = unit.string_value(prop) if key == "prefix" else None
                    if prefix is not None:
                        prefixes[unit.text(name)] = prefix
        if prefixes:
            logger.debug("Koa router prefixes in %s: %s", unit.file_path, prefixes)
        return prefixes
