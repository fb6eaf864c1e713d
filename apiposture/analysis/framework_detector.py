"""Framework detection from package.json dependencies."""

from __future__ import annotations

import logging
from pathlib import Path

import orjson

from apiposture.models.types import FrameworkType

logger = logging.getLogger(__name__)

# Framework -> package names that indicate it
PACKAGE_SIGNATURES: dict[FrameworkType, tuple[str, ...]] = {
    FrameworkType.EXPRESS: ("express",),
    FrameworkType.NESTJS: ("@nestjs/core", "@nestjs/common"),
    FrameworkType.FASTIFY: ("fastify",),
    FrameworkType.KOA: ("koa", "koa-router", "@koa/router"),
}


class FrameworkDetector:
    """Reports which supported frameworks a project declares as dependencies."""

    def detect(self, project_path: str | Path) -> list[FrameworkType]:
        package_json = Path(project_path) / "package.json"
        if not package_json.is_file():
            return []

        try:
            data = orjson.loads(package_json.read_bytes())
        except (OSError, orjson.JSONDecodeError) as e:
            logger.warning("Failed to read %s: %s", package_json, e)
            return []
        if not isinstance(data, dict):
            return []

        deps: dict[str, str] = {}
        for key in ("dependencies", "devDependencies"):
            section = data.get(key)
            if isinstance(section, dict):
                deps.update(section)

        return [
            framework
            for framework, packages in PACKAGE_SIGNATURES.items()
            if any(pkg in deps for pkg in packages)
        ]
