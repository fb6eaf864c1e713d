"""Source loading — tree-sitter parsing of JS/TS files and AST helpers."""

from __future__ import annotations

import fnmatch
import logging
import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from apiposture.models.endpoint import SourceLocation

logger = logging.getLogger(__name__)

# Extension -> tree-sitter language name
EXT_TO_LANG: dict[str, str] = {
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
}

DEFAULT_EXTENSIONS: tuple[str, ...] = (".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs")

# Dirs always skipped (deps, build output, VCS)
SKIP_DIRS = frozenset({
    "node_modules", ".git", "dist", "build", "coverage", ".next", ".nuxt",
})

DEFAULT_EXCLUDE_PATTERNS: tuple[str, ...] = (
    "**/node_modules/**",
    "**/dist/**",
    "**/build/**",
    "**/.git/**",
    "**/coverage/**",
    "**/*.spec.ts",
    "**/*.test.ts",
    "**/*.spec.js",
    "**/*.test.js",
)

FUNCTION_NODES = frozenset({
    "arrow_function", "function_expression", "function", "generator_function",
})

_parsers: dict[str, object] = {}


def get_parser(lang: str):  # noqa: ANN201
    """Lazily load tree-sitter parsers."""
    if lang not in _parsers:
        try:
            from tree_sitter_language_pack import get_parser as _load

            _parsers[lang] = _load(lang)
        except Exception as e:
            # Cached as None, so this is reported once per language
            logger.warning("Could not load the %s parser: %s", lang, e)
            _parsers[lang] = None
    return _parsers[lang]


def language_for(file_path: str | Path) -> str:
    return EXT_TO_LANG.get(Path(file_path).suffix.lower(), "typescript")


@dataclass
class SourceUnit:
    """A parsed file: path, raw bytes and the tree-sitter root node.

    Helper methods are the only tree primitives the discoverers rely on.
    """

    file_path: str
    source: bytes
    root: object = field(repr=False)

    # ── traversal ──

    def walk(self, node=None) -> Iterator:  # noqa: ANN001
        """Pre-order walk of all AST nodes."""
        yield from _walk(self.root if node is None else node)

    def find(self, *types: str, node=None) -> list:  # noqa: ANN001
        return [n for n in self.walk(node) if n.type in types]

    def text(self, node) -> str:  # noqa: ANN001
        return self.source[node.start_byte:node.end_byte].decode("utf-8", errors="ignore")

    def location(self, node) -> SourceLocation:  # noqa: ANN001
        row, column = node.start_point[0], node.start_point[1]
        return SourceLocation(file_path=self.file_path, line=row + 1, column=column + 1)

    # ── literals ──

    def string_value(self, node) -> str | None:  # noqa: ANN001
        """Value of a quoted string or a substitution-free template literal."""
        if node is None:
            return None
        if node.type == "string":
            return self.text(node)[1:-1]
        if node.type == "template_string":
            if any(c.type == "template_substitution" for c in node.named_children):
                return None
            return self.text(node)[1:-1]
        return None

    def template_value(self, node) -> str | None:  # noqa: ANN001
        """Like string_value, but renders each ${...} in a template as ``:param``."""
        if node is None:
            return None
        if node.type != "template_string":
            return self.string_value(node)
        parts: list[str] = []
        cursor = node.start_byte + 1
        for child in node.named_children:
            if child.type != "template_substitution":
                continue
            parts.append(self.source[cursor:child.start_byte].decode("utf-8", errors="ignore"))
            parts.append(":param")
            cursor = child.end_byte
        parts.append(self.source[cursor:node.end_byte - 1].decode("utf-8", errors="ignore"))
        return "".join(parts)

    # ── calls, arrays, objects ──

    def call_arguments(self, call) -> list:  # noqa: ANN001
        args = call.child_by_field_name("arguments")
        if args is None or args.type != "arguments":
            return []
        return [a for a in args.named_children if a.type != "comment"]

    @staticmethod
    def array_elements(node) -> list:  # noqa: ANN001
        if node is None or node.type != "array":
            return []
        return [e for e in node.named_children if e.type != "comment"]

    def object_properties(self, node) -> list[tuple[str, object]]:  # noqa: ANN001
        """(key, value-node) pairs of an object literal; spreads and methods skipped."""
        if node is None or node.type != "object":
            return []
        props: list[tuple[str, object]] = []
        for child in node.named_children:
            if child.type != "pair":
                continue
            key = child.child_by_field_name("key")
            value = child.child_by_field_name("value")
            if key is None or value is None:
                continue
            if key.type == "property_identifier":
                props.append((self.text(key), value))
            elif key.type == "string":
                props.append((self.string_value(key) or "", value))
        return props

    def member_parts(self, node) -> tuple[str, str] | None:  # noqa: ANN001
        """(object identifier, property name) for ``obj.prop``; None otherwise."""
        if node is None or node.type != "member_expression":
            return None
        obj = node.child_by_field_name("object")
        prop = node.child_by_field_name("property")
        if obj is None or prop is None or obj.type != "identifier":
            return None
        return self.text(obj), self.text(prop)

    # ── decorators ──

    def decorators(self, decl) -> list:  # noqa: ANN001
        """Decorators attached to a class or method declaration, in source order.

        The TypeScript grammar hangs class decorators on the enclosing
        ``export_statement`` and method decorators on the class body, just
        before the ``method_definition``; both places are collected.
        """
        found: list = []
        parent = decl.parent
        if parent is not None and parent.type == "export_statement":
            found.extend(c for c in parent.children if c.type == "decorator")
        if parent is not None and parent.type == "class_body":
            preceding: list = []
            prev = decl.prev_named_sibling
            while prev is not None and prev.type in ("decorator", "comment"):
                if prev.type == "decorator":
                    preceding.append(prev)
                prev = prev.prev_named_sibling
            found.extend(reversed(preceding))
        found.extend(c for c in decl.children if c.type == "decorator")
        return found

    @staticmethod
    def _decorator_expression(decorator):  # noqa: ANN001, ANN205
        for child in decorator.named_children:
            if child.type != "comment":
                return child
        return None

    def decorator_name(self, decorator) -> str | None:  # noqa: ANN001
        expr = self._decorator_expression(decorator)
        if expr is None:
            return None
        if expr.type == "identifier":
            return self.text(expr)
        if expr.type == "call_expression":
            callee = expr.child_by_field_name("function")
            if callee is not None and callee.type == "identifier":
                return self.text(callee)
        return None

    def decorator_arguments(self, decorator) -> list:  # noqa: ANN001
        expr = self._decorator_expression(decorator)
        if expr is None or expr.type != "call_expression":
            return []
        return self.call_arguments(expr)


def _walk(node):  # noqa: ANN001, ANN202
    """Depth-first walk of all AST nodes."""
    yield node
    for child in node.children:
        yield from _walk(child)


def parse_source(file_path: str, text: str | bytes, lang: str | None = None) -> SourceUnit | None:
    """Parse in-memory source into a SourceUnit; None when no parser is available."""
    content = text.encode("utf-8") if isinstance(text, str) else text
    parser = get_parser(lang or language_for(file_path))
    if parser is None:
        return None
    tree = parser.parse(content)
    return SourceUnit(file_path=file_path, source=content, root=tree.root_node)


class SourceFileLoader:
    """Finds, reads and parses the JS/TS files of a project."""

    def __init__(
        self,
        extensions: Iterable[str] = DEFAULT_EXTENSIONS,
        exclude_patterns: Iterable[str] = (),
        include_patterns: Iterable[str] = (),
    ) -> None:
        self.extensions = {e.lower() for e in extensions}
        self.exclude_patterns = list(DEFAULT_EXCLUDE_PATTERNS) + list(exclude_patterns)
        self.include_patterns = list(include_patterns)
        self._cache: dict[str, SourceUnit] = {}

    def load_directory(self, directory: str | Path) -> list[SourceUnit]:
        root = Path(directory).resolve()
        if not root.is_dir():
            raise FileNotFoundError(f"Directory not found: {root}")

        units: list[SourceUnit] = []
        for path in self._collect_files(root):
            unit = self.load_file(path)
            if unit is not None:
                units.append(unit)

        logger.info("Loaded %d source files from %s", len(units), root)
        return units

    def load_file(self, path: str | Path) -> SourceUnit | None:
        absolute = str(Path(path).resolve())
        if absolute in self._cache:
            return self._cache[absolute]

        try:
            content = Path(absolute).read_bytes()
        except OSError as e:
            logger.warning("Could not read %s: %s", absolute, e)
            return None

        try:
            unit = parse_source(absolute, content)
        except Exception as e:
            logger.warning("Could not parse %s: %s", absolute, e)
            return None
        if unit is None:
            logger.warning("No parser available for %s", absolute)
            return None

        self._cache[absolute] = unit
        return unit

    def clear_cache(self) -> None:
        self._cache.clear()

    def _collect_files(self, root: Path) -> list[Path]:
        files: list[Path] = []
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(d for d in dirnames if d not in SKIP_DIRS)
            for name in sorted(filenames):
                path = Path(dirpath) / name
                if path.suffix.lower() not in self.extensions:
                    continue
                rel = path.relative_to(root).as_posix()
                if self._matches_any(rel, self.exclude_patterns):
                    continue
                if self.include_patterns and not self._matches_any(rel, self.include_patterns):
                    continue
                files.append(path)
        return files

    @staticmethod
    def _matches_any(rel_path: str, patterns: list[str]) -> bool:
        # "**/x" should also match at the project root, so try a rooted form too
        candidates = (rel_path, "/" + rel_path)
        return any(
            fnmatch.fnmatchcase(candidate, pattern)
            for pattern in patterns
            for candidate in candidates
        )
