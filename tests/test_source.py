"""Tests for source loading and tree helpers."""

import logging
import tempfile
from pathlib import Path

from apiposture.analysis import FrameworkDetector, SourceFileLoader, parse_source
from apiposture.models import FrameworkType


class TestParseSource:
    def test_string_and_template_values(self) -> None:
        unit = parse_source(
            "routes.ts",
            "app.get('/a', h);\napp.get(`/users/${id}/posts`, h);\napp.get(`/static`, h);\n",
        )
        calls = unit.find("call_expression")
        paths = [unit.call_arguments(c)[0] for c in calls]
        assert unit.string_value(paths[0]) == "/a"
        assert unit.string_value(paths[1]) is None
        assert unit.template_value(paths[1]) == "/users/:param/posts"
        assert unit.string_value(paths[2]) == "/static"

    def test_location_is_one_based(self) -> None:
        unit = parse_source("x.js", "\n  app.get('/a', h);\n")
        call = unit.find("call_expression")[0]
        loc = unit.location(call)
        assert (loc.line, loc.column) == (2, 3)
        assert loc.file_path == "x.js"

    def test_object_properties(self) -> None:
        unit = parse_source("x.js", "f({ method: 'GET', 'url': '/a', ...rest });")
        obj = unit.find("object")[0]
        props = dict(unit.object_properties(obj))
        assert set(props) == {"method", "url"}
        assert unit.string_value(props["url"]) == "/a"

    def test_decorators_on_exported_class_and_methods(self) -> None:
        unit = parse_source(
            "c.ts",
            """
@Controller('users')
export class UsersController {
  @Public()
  @Get(':id')
  findOne() {}
}
""",
        )
        cls = unit.find("class_declaration")[0]
        assert [unit.decorator_name(d) for d in unit.decorators(cls)] == ["Controller"]
        method = unit.find("method_definition")[0]
        names = [unit.decorator_name(d) for d in unit.decorators(method)]
        assert names == ["Public", "Get"]
        get_args = unit.decorator_arguments(unit.decorators(method)[1])
        assert unit.string_value(get_args[0]) == ":id"

    def test_missing_parser_warns_once(self, caplog) -> None:  # noqa: ANN001
        with caplog.at_level(logging.WARNING, logger="apiposture.analysis.source"):
            assert parse_source("a.xyz", "x", lang="no-such-language") is None
            assert parse_source("b.xyz", "y", lang="no-such-language") is None
        warnings = [r for r in caplog.records if "no-such-language" in r.getMessage()]
        assert len(warnings) == 1
        assert warnings[0].levelno == logging.WARNING


class TestSourceFileLoader:
    def test_load_directory_filters(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            (root / "src").mkdir()
            (root / "src" / "app.ts").write_text("app.get('/a', h);\n")
            (root / "src" / "app.test.ts").write_text("app.get('/t', h);\n")
            (root / "src" / "notes.md").write_text("# notes\n")
            (root / "node_modules" / "lib").mkdir(parents=True)
            (root / "node_modules" / "lib" / "index.js").write_text("app.get('/x', h);\n")
            (root / "legacy").mkdir()
            (root / "legacy" / "old.js").write_text("app.get('/old', h);\n")

            loader = SourceFileLoader(exclude_patterns=["**/legacy/**"])
            units = loader.load_directory(root)

            names = sorted(Path(u.file_path).name for u in units)
            assert names == ["app.ts"]

    def test_include_patterns(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            (root / "api").mkdir()
            (root / "api" / "routes.js").write_text("router.get('/a', h);\n")
            (root / "scripts").mkdir()
            (root / "scripts" / "seed.js").write_text("console.log(1);\n")

            units = SourceFileLoader(include_patterns=["api/**"]).load_directory(root)
            assert [Path(u.file_path).name for u in units] == ["routes.js"]

    def test_missing_directory_raises(self) -> None:
        loader = SourceFileLoader()
        try:
            loader.load_directory("/nonexistent/project/path")
            assert False, "Should have raised"
        except FileNotFoundError:
            pass

    def test_cache_returns_same_unit(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "a.js"
            path.write_text("app.get('/a', h);\n")
            loader = SourceFileLoader()
            assert loader.load_file(path) is loader.load_file(path)
            loader.clear_cache()
            assert loader.load_file(path) is not None


class TestFrameworkDetector:
    def test_detects_dependencies(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            (Path(tmpdir) / "package.json").write_text(
                '{"dependencies": {"@nestjs/core": "10.0.0"}, "devDependencies": {"koa": "2"}}'
            )
            detected = FrameworkDetector().detect(tmpdir)
            assert detected == [FrameworkType.NESTJS, FrameworkType.KOA]

    def test_malformed_package_json(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            (Path(tmpdir) / "package.json").write_text("{not json")
            assert FrameworkDetector().detect(tmpdir) == []

    def test_missing_package_json(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            assert FrameworkDetector().detect(tmpdir) == []
