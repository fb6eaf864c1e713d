"""Endpoint discovery for Express, NestJS, Fastify and Koa."""

from __future__ import annotations

from collections.abc import Iterable

from apiposture.discovery.base import EndpointDiscoverer, normalize_route
from apiposture.discovery.express import ExpressDiscoverer
from apiposture.discovery.fastify import FastifyDiscoverer
from apiposture.discovery.koa import KoaDiscoverer
from apiposture.discovery.nestjs import NestJSDiscoverer
from apiposture.discovery.registry import RouteGroupRegistry
from apiposture.models.types import FrameworkType

_DISCOVERERS: dict[FrameworkType, type[EndpointDiscoverer]] = {
    FrameworkType.EXPRESS: ExpressDiscoverer,
    FrameworkType.NESTJS: NestJSDiscoverer,
    FrameworkType.FASTIFY: FastifyDiscoverer,
    FrameworkType.KOA: KoaDiscoverer,
}


def create_discoverers(frameworks: Iterable[FrameworkType] | None = None) -> list[EndpointDiscoverer]:
    """Fresh discoverers in fixed order (express, nestjs, fastify, koa); None means all."""
    wanted = set(frameworks) if frameworks is not None else set(_DISCOVERERS)
    return [cls() for fw, cls in _DISCOVERERS.items() if fw in wanted]


__all__ = [
    "EndpointDiscoverer",
    "ExpressDiscoverer",
    "FastifyDiscoverer",
    "KoaDiscoverer",
    "NestJSDiscoverer",
    "RouteGroupRegistry",
    "create_discoverers",
    "normalize_route",
]
