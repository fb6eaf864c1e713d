"""NestJS: @Controller classes and their HTTP-verb-decorated methods."""

from __future__ import annotations

import logging

from apiposture.analysis.source import SourceUnit
from apiposture.authorization.nestjs import DecoratorSpec, NestJSAuthExtractor
from apiposture.discovery.base import EndpointDiscoverer, normalize_route
from apiposture.models.endpoint import Endpoint
from apiposture.models.types import FrameworkType, HttpMethod

logger = logging.getLogger(__name__)

CONTROLLER_DECORATOR = "Controller"

VERB_DECORATORS: dict[str, HttpMethod] = {
    "Get": HttpMethod.GET,
    "Post": HttpMethod.POST,
    "Put": HttpMethod.PUT,
    "Delete": HttpMethod.DELETE,
    "Patch": HttpMethod.PATCH,
    "Options": HttpMethod.OPTIONS,
    "Head": HttpMethod.HEAD,
    "All": HttpMethod.ALL,
}

CLASS_NODES = ("class_declaration", "abstract_class_declaration")


class NestJSDiscoverer(EndpointDiscoverer):
    name = "nestjs"
    framework = FrameworkType.NESTJS

    def __init__(self) -> None:
        self.auth = NestJSAuthExtractor()

    def discover(self, unit: SourceUnit) -> list[Endpoint]:
        endpoints: list[Endpoint] = []
        for cls in unit.find(*CLASS_NODES):
            endpoints.extend(self._discover_controller(unit, cls))
        return endpoints

    def _discover_controller(self, unit: SourceUnit, cls) -> list[Endpoint]:  # noqa: ANN001
        specs = self._decorator_specs(unit, cls)
        controller = next((s for s in specs if s.name == CONTROLLER_DECORATOR), None)
        if controller is None:
            return []

        prefix = controller.strings[0] if controller.strings else ""
        name_node = cls.child_by_field_name("name")
        class_name = unit.text(name_node) if name_node is not None else "UnknownController"
        context = self.auth.class_context(specs)

        body = cls.child_by_field_name("body")
        if body is None:
            return []

        endpoints: list[Endpoint] = []
        for method in body.named_children:
            if method.type != "method_definition":
                continue
            method_specs = self._decorator_specs(unit, method)
            verb = next((s for s in method_specs if s.name in VERB_DECORATORS), None)
            if verb is None:
                continue
            path = verb.strings[0] if verb.strings else ""
            method_name = method.child_by_field_name("name")
            endpoints.append(Endpoint(
                route=normalize_route(f"{prefix}/{path}"),
                method=VERB_DECORATORS[verb.name],
                handler_name=unit.text(method_name) if method_name is not None else "anonymous",
                controller_name=class_name,
                framework=self.framework,
                location=unit.location(method),
                authorization=self.auth.extract(method_specs, context),
            ))

        logger.debug("%s: %d routes under '%s'", class_name, len(endpoints), prefix)
        return endpoints

    def _decorator_specs(self, unit: SourceUnit, decl) -> list[DecoratorSpec]:  # noqa: ANN001
        specs: list[DecoratorSpec] = []
        for dec in unit.decorators(decl):
            name = unit.decorator_name(dec)
            if name is None:
                continue
            spec = DecoratorSpec(name=name)
            for arg in unit.decorator_arguments(dec):
                self._read_argument(unit, arg, spec)
            specs.append(spec)
        return specs

    def _read_argument(self, unit: SourceUnit, arg, spec: DecoratorSpec) -> None:  # noqa: ANN001
        value = unit.string_value(arg)
        if value is not None:
            spec.strings.append(value)
            return
        if arg.type == "array":
            for element in unit.array_elements(arg):
                item = unit.string_value(element)
                if item is not None:
                    spec.strings.append(item)
            return
        if arg.type == "object":
            # @Controller({ path: 'users' })
            for key, value_node in unit.object_properties(arg):
                if key == "path":
                    path = unit.string_value(value_node)
                    if path is not None:
                        spec.strings.append(path)
            return
        guard = _guard_name(unit, arg)
        if guard:
            spec.guards.append(guard)


def _guard_name(unit: SourceUnit, node) -> str | None:  # noqa: ANN001
    """``JwtAuthGuard``, ``AuthGuard('jwt')`` -> ``AuthGuard``, ``new RolesGuard()`` -> ``RolesGuard``."""
    if node.type == "identifier":
        return unit.text(node)
    if node.type == "call_expression":
        callee = node.child_by_field_name("function")
        if callee is not None and callee.type == "identifier":
            return unit.text(callee)
    if node.type == "new_expression":
        ctor = node.child_by_field_name("constructor")
        if ctor is not None and ctor.type == "identifier":
            return unit.text(ctor)
    return None
