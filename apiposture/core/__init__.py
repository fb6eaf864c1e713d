"""Scan pipeline: analyzer, suppressions and result filtering."""

from apiposture.core.analyzer import ProjectAnalyzer
from apiposture.core.filters import ResultFilter, SortDirection, SortField
from apiposture.core.suppression import SuppressionMatcher, route_pattern_regex

__all__ = [
    "ProjectAnalyzer",
    "ResultFilter",
    "SortDirection",
    "SortField",
    "SuppressionMatcher",
    "route_pattern_regex",
]
