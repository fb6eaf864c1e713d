"""Project analyzer — load, discover, evaluate, suppress."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Sequence
from pathlib import Path

from apiposture.analysis.framework_detector import FrameworkDetector
from apiposture.analysis.source import SourceFileLoader, SourceUnit
from apiposture.authorization.global_auth import GlobalAuthAnalyzer
from apiposture.core.suppression import SuppressionMatcher
from apiposture.discovery import create_discoverers
from apiposture.models.config import ApiPostureConfig
from apiposture.models.endpoint import Endpoint
from apiposture.models.scan import ScanResult
from apiposture.models.types import FrameworkType
from apiposture.rules.engine import RuleEngine

logger = logging.getLogger(__name__)


class ProjectAnalyzer:
    """Runs one scan: SourceFileLoader -> discoverers -> RuleEngine -> SuppressionMatcher.

    Every selected discoverer sees every file. Selection: ``frameworks`` when
    given, else whatever package.json declares, else all four.
    """

    def __init__(
        self,
        config: ApiPostureConfig | None = None,
        frameworks: Sequence[FrameworkType] | None = None,
    ) -> None:
        self.config = config or ApiPostureConfig()
        self.frameworks = list(frameworks) if frameworks else None
        self.loader = SourceFileLoader(
            exclude_patterns=self.config.scan.exclude_patterns,
            include_patterns=self.config.scan.include_patterns,
        )
        self.engine = RuleEngine(self.config.rules)
        self.suppressions = SuppressionMatcher(self.config.suppressions)

    def analyze(self, project_path: str | Path) -> ScanResult:
        """Scan a project directory. Raises FileNotFoundError if it does not exist."""
        t0 = time.perf_counter()
        root = Path(project_path).resolve()
        units = self.loader.load_directory(root)

        declared = FrameworkDetector().detect(root)
        if declared:
            logger.info("package.json declares: %s", ", ".join(f.value for f in declared))

        result = self.analyze_units(units, project_path=str(root), frameworks=self.frameworks or declared)
        result.scan_duration_ms = int((time.perf_counter() - t0) * 1000)
        return result

    def analyze_units(
        self,
        units: Iterable[SourceUnit],
        project_path: str = ".",
        frameworks: Sequence[FrameworkType] | None = None,
    ) -> ScanResult:
        t0 = time.perf_counter()
        units = list(units)

        endpoints = self.discover(units, frameworks or self.frameworks)
        if not endpoints:
            logger.info("No endpoints found in %d files", len(units))

        findings = self.suppressions.apply(self.engine.evaluate(endpoints))
        global_auth = GlobalAuthAnalyzer().analyze(units)

        result = ScanResult(
            project_path=project_path,
            endpoints=endpoints,
            findings=findings,
            files_scanned=len(units),
            scan_duration_ms=int((time.perf_counter() - t0) * 1000),
            global_auth=global_auth,
        )
        logger.info(
            "Scanned %d files: %d endpoints, %d findings (%d suppressed)",
            result.files_scanned,
            len(endpoints),
            len(result.active_findings),
            len(result.suppressed_findings),
        )
        return result

    def discover(
        self,
        units: Sequence[SourceUnit],
        frameworks: Sequence[FrameworkType] | None = None,
    ) -> list[Endpoint]:
        """Selected discoverers over all units; Express collects mounts across every unit first."""
        endpoints: list[Endpoint] = []
        for discoverer in create_discoverers(frameworks or None):
            found = discoverer.discover_all(units)
            logger.debug("%s discovered %d endpoints", discoverer.name, len(found))
            endpoints.extend(found)
        return endpoints
