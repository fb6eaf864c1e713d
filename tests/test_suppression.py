"""Tests for suppression matching."""

from apiposture.core import SuppressionMatcher, route_pattern_regex
from apiposture.models import (
    AuthorizationInfo,
    Endpoint,
    FrameworkType,
    HttpMethod,
    SourceLocation,
    SuppressionConfig,
)
from apiposture.rules import RuleEngine


def _endpoint(route: str, method: HttpMethod = HttpMethod.GET) -> Endpoint:
    return Endpoint(
        route=route,
        method=method,
        framework=FrameworkType.EXPRESS,
        location=SourceLocation(file_path="app.ts"),
        authorization=AuthorizationInfo(),
    )


def _findings():  # noqa: ANN202
    return RuleEngine().evaluate([
        _endpoint("/api/products"),
        _endpoint("/api/orders", HttpMethod.POST),
        _endpoint("/api/public/docs/index"),
    ])


class TestSuppressionMatcher:
    def test_exact_route(self) -> None:
        matcher = SuppressionMatcher([SuppressionConfig(route="/api/products", reason="Public catalog")])
        result = matcher.apply(_findings())
        suppressed = [f for f in result if f.suppressed]
        assert {f.endpoint.route for f in suppressed} == {"/api/products"}
        assert all(f.suppression_reason == "Public catalog" for f in suppressed)
        assert len(result) == len(_findings())

    def test_rule_and_method_filters(self) -> None:
        matcher = SuppressionMatcher([
            SuppressionConfig(rule_id="AP004", method="post", reason="Reviewed"),
        ])
        suppressed = [f for f in matcher.apply(_findings()) if f.suppressed]
        assert [(f.rule_id, f.endpoint.route) for f in suppressed] == [("AP004", "/api/orders")]

    def test_first_match_wins(self) -> None:
        matcher = SuppressionMatcher([
            SuppressionConfig(route="/api/orders", reason="first"),
            SuppressionConfig(rule_id="AP004", reason="second"),
        ])
        reasons = {f.suppression_reason for f in matcher.apply(_findings()) if f.rule_id == "AP004"}
        assert reasons == {"first"}

    def test_route_pattern(self) -> None:
        matcher = SuppressionMatcher([SuppressionConfig(route_pattern="/api/public/**", reason="docs")])
        suppressed = {f.endpoint.route for f in matcher.apply(_findings()) if f.suppressed}
        assert suppressed == {"/api/public/docs/index"}

    def test_find_for_endpoint(self) -> None:
        suppression = SuppressionConfig(rule_id="AP008", route_pattern="/api/*", reason="ok")
        matcher = SuppressionMatcher([suppression])
        assert matcher.find_for_endpoint(_endpoint("/api/products"), "AP008") is suppression
        assert matcher.find_for_endpoint(_endpoint("/api/products"), "AP001") is None
        assert matcher.find_for_endpoint(_endpoint("/api/a/b"), "AP008") is None

    def test_no_suppressions(self) -> None:
        findings = _findings()
        assert SuppressionMatcher().apply(findings) == findings


class TestRoutePattern:
    def test_single_star_stays_in_segment(self) -> None:
        regex = route_pattern_regex("/api/*/status")
        assert regex.match("/api/orders/status")
        assert not regex.match("/api/orders/1/status")

    def test_double_star_spans_segments(self) -> None:
        regex = route_pattern_regex("/api/**")
        assert regex.match("/api/a/b/c")
        assert not regex.match("/other/api/a")

    def test_regex_specials_are_literal(self) -> None:
        regex = route_pattern_regex("/v1.0/(legacy)/*")
        assert regex.match("/v1.0/(legacy)/x")
        assert not regex.match("/v1x0/(legacy)/x")
        assert not regex.match("/v1.0/legacy/x")

    def test_anchored(self) -> None:
        regex = route_pattern_regex("/health")
        assert regex.match("/health")
        assert not regex.match("/health/live")
        assert not regex.match("/api/health")
