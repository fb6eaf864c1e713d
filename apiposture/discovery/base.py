"""Discoverer contract and helpers shared by the framework discoverers."""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Iterable

from apiposture.analysis.source import FUNCTION_NODES, SourceUnit
from apiposture.models.endpoint import Endpoint
from apiposture.models.types import FrameworkType

logger = logging.getLogger(__name__)

HTTP_VERBS = frozenset({"get", "post", "put", "delete", "patch", "options", "head", "all"})

_SLASHES = re.compile(r"/+")


def normalize_route(path: str) -> str:
    """Leading slash, no repeated slashes, no trailing slash except for the root."""
    if not path.startswith("/"):
        path = "/" + path
    path = _SLASHES.sub("/", path)
    if len(path) > 1 and path.endswith("/"):
        path = path[:-1]
    return path


class EndpointDiscoverer(ABC):
    """Finds one framework's endpoints in a parsed source unit."""

    name: str = ""
    framework: FrameworkType

    @abstractmethod
    def discover(self, unit: SourceUnit) -> list[Endpoint]:
        """Fresh traversal of ``unit``; unrecognized shapes are skipped, never raised."""

    def discover_all(self, units: Iterable[SourceUnit]) -> list[Endpoint]:
        endpoints: list[Endpoint] = []
        for unit in units:
            found = self.discover(unit)
            if found:
                logger.debug("%s: %d endpoints in %s", self.name, len(found), unit.file_path)
            endpoints.extend(found)
        return endpoints

    def reset(self) -> None:
        """Drop any per-run state."""


def member_call(unit: SourceUnit, call) -> tuple[str, str] | None:  # noqa: ANN001
    """(caller identifier, method name) for ``caller.method(...)``."""
    return unit.member_parts(call.child_by_field_name("function"))


def reference_name(unit: SourceUnit, node) -> str | None:  # noqa: ANN001
    """Printable name of a middleware/hook reference: ``auth``, ``fastify.verify``, ``guard()``."""
    if node.type in ("identifier", "member_expression"):
        return unit.text(node)
    if node.type == "call_expression":
        callee = node.child_by_field_name("function")
        if callee is not None and callee.type in ("identifier", "member_expression"):
            return unit.text(callee)
    return None


def handler_name(unit: SourceUnit, node) -> str:  # noqa: ANN001
    if node.type in ("identifier", "member_expression"):
        return unit.text(node)
    if node.type in FUNCTION_NODES:
        return "anonymous"
    return "unknown"
