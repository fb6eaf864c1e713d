"""Fastify: shorthand route methods and route({...}) option objects."""

from __future__ import annotations

import logging

from apiposture.analysis.source import FUNCTION_NODES, SourceUnit
from apiposture.authorization.hooks import fastify_hook_extractor
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

FASTIFY_IDENTIFIERS = frozenset({"fastify", "server", "app", "instance"})

# Hooks that run before the handler and can reject the request
AUTH_HOOKS = ("preHandler", "onRequest")


class FastifyDiscoverer(EndpointDiscoverer):
    name = "fastify"
    framework = FrameworkType.FASTIFY

    def __init__(self) -> None:
        self.hooks = fastify_hook_extractor()

    def discover(self, unit: SourceUnit) -> list[Endpoint]:
        endpoints: list[Endpoint] = []
        for call in unit.find("call_expression"):
            parts = member_call(unit, call)
            if parts is None or not self._is_instance(parts[0]):
                continue
            method = parts[1]
            if method == "route":
                endpoint = self._from_route_object(unit, call)
            elif method.lower() in HTTP_VERBS:
                endpoint = self._from_shorthand(unit, call, method)
            else:
                continue
            if endpoint is not None:
                endpoints.append(endpoint)
        return endpoints

    @staticmethod
    def _is_instance(name: str) -> bool:
        lowered = name.lower()
        return lowered in FASTIFY_IDENTIFIERS or "fastify" in lowered

    def _from_shorthand(self, unit: SourceUnit, call, verb: str) -> Endpoint | None:  # noqa: ANN001
        """``fastify.get(path, [options], [handler])``."""
        args = unit.call_arguments(call)
        if not args:
            return None
        path = unit.string_value(args[0])
        if path is None:
            return None

        hooks: list[str] = []
        handler = "anonymous"
        rest = args[1:]
        if rest and rest[0].type == "object":
            options = dict(unit.object_properties(rest[0]))
            hooks = self._hook_names(unit, options)
            if "handler" in options:
                handler = self._handler_name(unit, options["handler"], handler)
            rest = rest[1:]
        if rest:
            handler = self._handler_name(unit, rest[0], handler)

        return self._endpoint(unit, call, path, HttpMethod.parse(verb), handler, hooks)

    def _from_route_object(self, unit: SourceUnit, call) -> Endpoint | None:  # noqa: ANN001
        """``fastify.route({ method, url, handler, preHandler })``."""
        args = unit.call_arguments(call)
        if not args or args[0].type != "object":
            return None
        options = dict(unit.object_properties(args[0]))

        method_value = unit.string_value(options.get("method"))
        url = unit.string_value(options.get("url"))
        if method_value is None or url is None:
            logger.debug("Skipping route() without literal method/url in %s", unit.file_path)
            return None
        method = HttpMethod.parse(method_value)
        if method is None:
            return None

        handler = "handler"
        if "handler" in options:
            handler = self._handler_name(unit, options["handler"], handler)
        return self._endpoint(unit, call, url, method, handler, self._hook_names(unit, options))

    def _endpoint(
        self,
        unit: SourceUnit,
        call,  # noqa: ANN001
        path: str,
        method: HttpMethod,
        handler: str,
        hooks: list[str],
    ) -> Endpoint:
        return Endpoint(
            route=normalize_route(path),
            method=method,
            handler_name=handler,
            framework=self.framework,
            location=unit.location(call),
            authorization=self.hooks.extract(hooks),
        )

    @staticmethod
    def _handler_name(unit: SourceUnit, node, default: str) -> str:  # noqa: ANN001
        if node.type in FUNCTION_NODES:
            return default
        return reference_name(unit, node) or default

    @staticmethod
    def _hook_names(unit: SourceUnit, options: dict) -> list[str]:
        names: list[str] = []
        for key in AUTH_HOOKS:
            value = options.get(key)
            if value is None:
                continue
            values = unit.array_elements(value) if value.type == "array" else [value]
            for node in values:
                name = reference_name(unit, node)
                if name:
                    names.append(name)
        return names
