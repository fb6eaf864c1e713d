"""Source loading and project inspection."""

from apiposture.analysis.framework_detector import FrameworkDetector
from apiposture.analysis.source import SourceFileLoader, SourceUnit, parse_source

__all__ = ["FrameworkDetector", "SourceFileLoader", "SourceUnit", "parse_source"]
