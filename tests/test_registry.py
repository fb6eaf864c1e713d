"""Tests for the route group / mount registry."""

from apiposture.discovery import RouteGroupRegistry, normalize_route


class TestRouteGroupRegistry:
    def test_router_prefix_lookup_spans_files(self) -> None:
        registry = RouteGroupRegistry()
        registry.register_router_mount("app.ts", "app", "/api/users", "usersRouter")
        assert registry.get_router_prefix("routes/users.ts", "usersRouter") == "/api/users"
        assert registry.get_router_prefix("app.ts", "unknown") == ""

    def test_first_mount_wins(self) -> None:
        registry = RouteGroupRegistry()
        registry.register_router_mount("a.ts", "app", "/v1", "router")
        registry.register_router_mount("b.ts", "app", "/v2", "router")
        assert registry.get_router_prefix("c.ts", "router") == "/v1"

    def test_latest_group_wins(self) -> None:
        registry = RouteGroupRegistry()
        registry.register_group("a.ts", "router", "/x", ["auth"])
        registry.register_group("a.ts", "router", "/y", ["jwt", "audit"])
        assert registry.get_group("a.ts", "router").prefix == "/y"
        assert registry.get_all_middlewares("a.ts", "router") == ["jwt", "audit"]
        assert registry.get_all_middlewares("b.ts", "router") == []
        assert registry.get_group("b.ts", "router") is None

    def test_clear(self) -> None:
        registry = RouteGroupRegistry()
        registry.register_router_mount("a.ts", "app", "/v1", "router")
        registry.register_group("a.ts", "router", "", ["auth"])
        registry.clear()
        assert registry.get_router_prefix("a.ts", "router") == ""
        assert registry.get_group("a.ts", "router") is None
        assert registry.known_identifiers() == set()


class TestNormalizeRoute:
    def test_normalization(self) -> None:
        assert normalize_route("") == "/"
        assert normalize_route("/") == "/"
        assert normalize_route("users") == "/users"
        assert normalize_route("/api//users/") == "/api/users"
        assert normalize_route("//a///b//") == "/a/b"
