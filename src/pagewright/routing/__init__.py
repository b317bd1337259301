"""Route-rule declarations and path ordering."""

from pagewright.routing.paths import compare_paths, path_sort_key, specificity, to_platform_pattern
from pagewright.routing.rules import PublicAssetMount, Redirect, RouteRule, RouteRuleTable

__all__ = [
    "PublicAssetMount",
    "Redirect",
    "RouteRule",
    "RouteRuleTable",
    "compare_paths",
    "path_sort_key",
    "specificity",
    "to_platform_pattern",
]
