"""End-to-end tests for the project analyzer."""

import tempfile
from pathlib import Path

from apiposture.analysis import parse_source
from apiposture.core import ProjectAnalyzer
from apiposture.models import (
    ApiPostureConfig,
    FrameworkType,
    HttpMethod,
    RuleConfig,
    ScanConfig,
    SuppressionConfig,
)


class TestProjectAnalyzer:
    def _make_project(self, tmpdir: str) -> Path:
        root = Path(tmpdir) / "shop"
        (root / "src" / "routes").mkdir(parents=True)
        (root / "package.json").write_text('{"dependencies": {"express": "^4.18.0"}}')
        (root / "src" / "app.ts").write_text(
            """
import express from 'express';
import { ordersRouter } from './routes/orders';

const app = express();
app.use('/api/orders', ordersRouter);
app.get('/api/health', allowAnonymous, (req, res) => res.send('ok'));
app.get('/api/products', listProducts);
"""
        )
        (root / "src" / "routes" / "orders.ts").write_text(
            """
export const ordersRouter = express.Router();
ordersRouter.get('/', requireAuth, listOrders);
ordersRouter.post('/', createOrder);
"""
        )
        (root / "src" / "routes" / "orders.test.ts").write_text(
            "ordersRouter.get('/test-only', h);\n"
        )
        return root

    def test_analyze_project(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            result = ProjectAnalyzer().analyze(self._make_project(tmpdir))

            assert result.files_scanned == 2
            routes = {(e.method, e.route) for e in result.endpoints}
            assert routes == {
                (HttpMethod.GET, "/api/health"),
                (HttpMethod.GET, "/api/products"),
                (HttpMethod.GET, "/api/orders"),
                (HttpMethod.POST, "/api/orders"),
            }
            by_endpoint = {}
            for f in result.findings:
                by_endpoint.setdefault(f.endpoint.display(), set()).add(f.rule_id)
            assert by_endpoint == {
                "GET /api/products": {"AP001", "AP008"},
                "POST /api/orders": {"AP001", "AP004", "AP008"},
            }
            assert result.scan_duration_ms >= 0
            assert not result.global_auth.has_global_guard

    def test_suppressions_and_disabled_rules(self) -> None:
        config = ApiPostureConfig(
            rules={"AP008": RuleConfig(enabled=False)},
            suppressions=[SuppressionConfig(route="/api/products", reason="Public catalog")],
        )
        with tempfile.TemporaryDirectory() as tmpdir:
            result = ProjectAnalyzer(config).analyze(self._make_project(tmpdir))

            assert all(f.rule_id != "AP008" for f in result.findings)
            assert [f.endpoint.route for f in result.suppressed_findings] == ["/api/products"]
            assert {f.rule_id for f in result.active_findings} == {"AP001", "AP004"}
            assert result.summary().suppressed_findings == 1

    def test_exclude_patterns_from_config(self) -> None:
        config = ApiPostureConfig(scan=ScanConfig(exclude_patterns=["**/routes/**"]))
        with tempfile.TemporaryDirectory() as tmpdir:
            result = ProjectAnalyzer(config).analyze(self._make_project(tmpdir))
            assert result.files_scanned == 1
            assert {e.route for e in result.endpoints} == {"/api/health", "/api/products"}

    def test_framework_selection(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            result = ProjectAnalyzer(frameworks=[FrameworkType.NESTJS]).analyze(self._make_project(tmpdir))
            assert result.endpoints == []
            assert result.findings == []

    def test_missing_project(self) -> None:
        try:
            ProjectAnalyzer().analyze("/nonexistent/shop")
            assert False, "Should have raised"
        except FileNotFoundError:
            pass

    def test_analyze_units_mixed_frameworks(self) -> None:
        units = [
            parse_source(
                "users.controller.ts",
                """
@Controller('users')
@UseGuards(JwtAuthGuard)
export class UsersController {
  @Public()
  @Get('directory')
  directory() {}
}
""",
            ),
            parse_source("main.ts", "app.useGlobalGuards(new RolesGuard());\n"),
        ]
        result = ProjectAnalyzer().analyze_units(units)
        assert [e.display() for e in result.endpoints] == ["GET /users/directory"]
        assert [f.rule_id for f in result.findings] == ["AP003"]
        assert result.global_auth.global_guard_name == "RolesGuard"
        assert result.files_scanned == 2

    def test_all_discoverers_without_package_json(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            (root / "server.js").write_text(
                "fastify.get('/me', { preHandler: [fastify.authenticate] }, getMe);\n"
            )
            (root / "routes.js").write_text("koaRouter.get('/items', listItems);\n")
            result = ProjectAnalyzer().analyze(root)
            seen = sorted((e.framework.value, e.display()) for e in result.endpoints)
            # Every discoverer runs, and "koaRouter" also reads as an Express router name
            assert seen == [
                ("express", "GET /items"),
                ("fastify", "GET /me"),
                ("koa", "GET /items"),
            ]
