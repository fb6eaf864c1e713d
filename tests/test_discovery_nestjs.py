"""Tests for NestJS controller discovery."""

import re

from apiposture.analysis import parse_source
from apiposture.discovery import NestJSDiscoverer
from apiposture.models import FrameworkType, HttpMethod, SecurityClassification

ROUTE_RE = re.compile(r"^/([^/]+(/[^/]+)*)?$")

ORDERS_CONTROLLER = """
import { Controller, Get, Post, Delete, UseGuards } from '@nestjs/common';

@Controller('orders')
@UseGuards(JwtAuthGuard)
export class OrdersController {
  @Get()
  findAll() {
    return [];
  }

  @Public()
  @Get('catalog')
  catalog() {
    return [];
  }

  @Post(':id/cancel')
  @Roles('Admin', 'Support')
  cancel() {}

  @Delete(':id')
  @Policies(['CanDeleteOrders'])
  remove() {}

  helper() {}
}
"""

PUBLIC_CONTROLLER = """
@Controller()
export class HealthController {
  @Get('health')
  check() {}

  @Post('/webhooks/')
  @UseGuards(AuthGuard('jwt'), ThrottlerGuard)
  hook() {}
}

export class NotAController {
  @Get('ignored')
  nope() {}
}
"""


class TestNestJSDiscovery:
    def _discover(self, source: str):  # noqa: ANN202
        endpoints = NestJSDiscoverer().discover(parse_source("orders.controller.ts", source))
        return {(e.method, e.route): e for e in endpoints}

    def test_routes_and_names(self) -> None:
        endpoints = self._discover(ORDERS_CONTROLLER)
        assert set(endpoints) == {
            (HttpMethod.GET, "/orders"),
            (HttpMethod.GET, "/orders/catalog"),
            (HttpMethod.POST, "/orders/:id/cancel"),
            (HttpMethod.DELETE, "/orders/:id"),
        }
        catalog = endpoints[(HttpMethod.GET, "/orders/catalog")]
        assert catalog.handler_name == "catalog"
        assert catalog.controller_name == "OrdersController"
        assert catalog.framework is FrameworkType.NESTJS

    def test_class_guard_applies_to_methods(self) -> None:
        auth = self._discover(ORDERS_CONTROLLER)[(HttpMethod.GET, "/orders")].authorization
        assert auth.is_authenticated
        assert auth.guard_names == ("JwtAuthGuard",)
        assert auth.classification is SecurityClassification.AUTHENTICATED

    def test_public_method_keeps_class_authentication(self) -> None:
        auth = self._discover(ORDERS_CONTROLLER)[(HttpMethod.GET, "/orders/catalog")].authorization
        assert auth.is_explicitly_public
        assert auth.is_authenticated

    def test_roles_and_policies(self) -> None:
        endpoints = self._discover(ORDERS_CONTROLLER)
        cancel = endpoints[(HttpMethod.POST, "/orders/:id/cancel")].authorization
        assert cancel.roles == ("Admin", "Support")
        assert cancel.classification is SecurityClassification.ROLE_RESTRICTED
        remove = endpoints[(HttpMethod.DELETE, "/orders/:id")].authorization
        assert remove.policies == ("CanDeleteOrders",)
        assert remove.classification is SecurityClassification.POLICY_RESTRICTED

    def test_controller_without_prefix_and_method_guards(self) -> None:
        endpoints = self._discover(PUBLIC_CONTROLLER)
        assert set(endpoints) == {(HttpMethod.GET, "/health"), (HttpMethod.POST, "/webhooks")}

        health = endpoints[(HttpMethod.GET, "/health")].authorization
        assert health.classification is SecurityClassification.PUBLIC
        assert health.guard_names == ()

        hook = endpoints[(HttpMethod.POST, "/webhooks")].authorization
        assert hook.guard_names == ("AuthGuard", "ThrottlerGuard")
        assert hook.is_authenticated

    def test_non_auth_guard_recorded_but_not_authenticating(self) -> None:
        source = """
@Controller('files')
export class FilesController {
  @Get()
  @UseGuards(ThrottlerGuard)
  list() {}
}
"""
        auth = self._discover(source)[(HttpMethod.GET, "/files")].authorization
        assert auth.guard_names == ("ThrottlerGuard",)
        assert not auth.is_authenticated

    def test_class_roles(self) -> None:
        source = """
@Controller('admin')
@Roles('ops')
export class AdminController {
  @Get('stats')
  stats() {}
}
"""
        auth = self._discover(source)[(HttpMethod.GET, "/admin/stats")].authorization
        assert auth.roles == ("ops",)
        assert auth.is_authenticated

    def test_route_shapes(self) -> None:
        source = """
@Controller()
export class RootController {
  @Get()
  index() {}

  @Get('')
  empty() {}
}

@Controller('/api/v1/')
export class VersionedController {
  @Get()
  list() {}

  @Post('/items/')
  create() {}

  @Put('//items//:id//')
  update() {}
}
"""
        endpoints = NestJSDiscoverer().discover(parse_source("app.controller.ts", source))
        assert sorted((e.method.value, e.route) for e in endpoints) == [
            ("GET", "/"),
            ("GET", "/"),
            ("GET", "/api/v1"),
            ("POST", "/api/v1/items"),
            ("PUT", "/api/v1/items/:id"),
        ]
        for e in endpoints:
            assert ROUTE_RE.match(e.route), e.route
