"""Tests for authorization extraction and name classification."""

from apiposture.analysis import parse_source
from apiposture.authorization import (
    ClassAuthContext,
    DecoratorSpec,
    ExpressAuthExtractor,
    GlobalAuthAnalyzer,
    NameCategory,
    NestJSAuthExtractor,
    extract_roles,
    fastify_hook_extractor,
    koa_middleware_extractor,
)
from apiposture.authorization.patterns import EXPRESS_MIDDLEWARE_TABLE
from apiposture.models import SecurityClassification


class TestNameClassification:
    def test_precedence(self) -> None:
        table = EXPRESS_MIDDLEWARE_TABLE
        assert table.classify("allowAnonymous") is NameCategory.PUBLIC
        assert table.classify("requireAuth") is NameCategory.AUTHENTICATION
        assert table.classify("passport.authenticate('jwt')") is NameCategory.AUTHENTICATION
        assert table.classify("requireRole('admin')") is NameCategory.ROLE
        assert table.classify("sessionGuard") is NameCategory.KEYWORD
        assert table.classify("bodyParser.json") is None

    def test_match_uses_last_segment(self) -> None:
        assert EXPRESS_MIDDLEWARE_TABLE.classify("acl.permit") is NameCategory.ROLE
        assert EXPRESS_MIDDLEWARE_TABLE.classify("middleware.public") is NameCategory.PUBLIC


class TestExtractRoles:
    def test_literal_arguments(self) -> None:
        assert extract_roles("requireRole('admin')") == ["admin"]
        assert extract_roles("hasRole(['user', \"editor\"])") == ["user", "editor"]

    def test_dotted_fallback(self) -> None:
        assert extract_roles("roles.manager") == ["manager"]
        assert extract_roles("passport.authenticate") == []
        assert extract_roles("checkRole") == []


class TestExpressAuthExtractor:
    def test_router_middlewares_come_first(self) -> None:
        auth = ExpressAuthExtractor().extract(["requireRole('ops')"], router_middlewares=["jwt"])
        assert auth.middleware_chain == ("jwt", "requireRole('ops')")
        assert auth.guard_names == ("jwt",)
        assert auth.roles == ("ops",)
        assert auth.classification is SecurityClassification.ROLE_RESTRICTED

    def test_unknown_middleware_stays_public(self) -> None:
        auth = ExpressAuthExtractor().extract(["cors", "rateLimit"])
        assert auth.middleware_chain == ("cors", "rateLimit")
        assert not auth.is_authenticated
        assert auth.classification is SecurityClassification.PUBLIC


class TestHookExtractors:
    def test_fastify(self) -> None:
        auth = fastify_hook_extractor().extract(["fastify.verifyJWT", "logRequest"])
        assert auth.is_authenticated
        assert auth.guard_names == ("fastify.verifyJWT",)
        assert auth.middleware_chain == ("fastify.verifyJWT", "logRequest")

    def test_koa(self) -> None:
        auth = koa_middleware_extractor().extract(["koaPassport", "bodyParser"])
        assert auth.guard_names == ("koaPassport",)
        assert koa_middleware_extractor().extract(["bodyParser"]).is_authenticated is False


class TestNestJSAuthExtractor:
    def test_class_context(self) -> None:
        extractor = NestJSAuthExtractor()
        ctx = extractor.class_context([
            DecoratorSpec("Controller", strings=["users"]),
            DecoratorSpec("UseGuards", guards=["JwtAuthGuard", "ThrottlerGuard"]),
            DecoratorSpec("Roles", strings=["ops"]),
        ])
        assert ctx.guards == ["JwtAuthGuard", "ThrottlerGuard"]
        assert ctx.roles == ["ops"]
        assert not ctx.is_public

    def test_class_guards_filtered_by_pattern(self) -> None:
        auth = NestJSAuthExtractor().extract([], ClassAuthContext(guards=["JwtAuthGuard", "ThrottlerGuard"]))
        assert auth.guard_names == ("JwtAuthGuard",)
        assert auth.is_authenticated

    def test_public_does_not_clear_authentication(self) -> None:
        auth = NestJSAuthExtractor().extract(
            [DecoratorSpec("Public")], ClassAuthContext(guards=["AuthGuard"])
        )
        assert auth.is_authenticated
        assert auth.is_explicitly_public

    def test_empty_roles_decorator(self) -> None:
        auth = NestJSAuthExtractor().extract([DecoratorSpec("Roles")])
        assert not auth.is_authenticated
        assert auth.classification is SecurityClassification.PUBLIC


class TestGlobalAuthAnalyzer:
    def test_bootstrap_guard_and_prefix(self) -> None:
        unit = parse_source(
            "main.ts",
            """
async function bootstrap() {
  const app = await NestFactory.create(AppModule);
  app.setGlobalPrefix('api');
  app.useGlobalGuards(new JwtAuthGuard());
  await app.listen(3000);
}
""",
        )
        config = GlobalAuthAnalyzer().analyze([unit])
        assert config.has_global_guard
        assert config.global_guard_name == "JwtAuthGuard"
        assert config.has_global_prefix
        assert config.global_prefix == "api"

    def test_app_guard_provider(self) -> None:
        unit = parse_source(
            "app.module.ts",
            """
@Module({
  providers: [{ provide: APP_GUARD, useClass: RolesGuard }],
})
export class AppModule {}
""",
        )
        config = GlobalAuthAnalyzer().analyze([unit])
        assert config.has_global_guard
        assert config.global_guard_name == "RolesGuard"
        assert not config.has_global_prefix

    def test_nothing_registered(self) -> None:
        config = GlobalAuthAnalyzer().analyze([parse_source("a.ts", "const x = { provide: FOO };")])
        assert not config.has_global_guard
