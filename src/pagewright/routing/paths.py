"""Path ordering and URL helpers.

Every artifact writer sorts through ``path_sort_key`` so generated files
are deterministic across builds (stable diffs), and uses the wildcard
helpers to translate route-rule patterns into the platform's dialect.
"""

import re

# A "/" immediately followed by "*" is part of the wildcard, not a separator.
_SEGMENT_SPLIT = re.compile(r"/(?!\*)")

ROUTE_WILDCARD = "/**"
PLATFORM_WILDCARD = "/*"


def segment_count(path: str) -> int:
    """Number of ``/``-delimited segments, counting the leading empty one."""
    return len(path.split("/"))


def path_sort_key(path: str) -> tuple[int, str]:
    """Sort key: fewer segments first, then lexicographic."""
    return (segment_count(path), path)


def compare_paths(a: str, b: str) -> int:
    """Three-way comparator matching ``path_sort_key``.

    Returns a negative number when ``a`` sorts first, positive when ``b``
    does, and zero only for equal strings.
    """
    by_depth = segment_count(a) - segment_count(b)
    if by_depth:
        return by_depth
    return (a > b) - (a < b)


def specificity(pattern: str) -> int:
    """Segment count of a route pattern with the wildcard normalized out.

    ``/api/**`` and ``/api/*`` both count as two segments, so a wildcard
    never makes a pattern look more specific than its prefix.
    """
    return len(_SEGMENT_SPLIT.split(pattern))


def to_platform_pattern(pattern: str) -> str:
    """Collapse a trailing ``/**`` into the platform's ``/*`` wildcard."""
    if pattern.endswith(ROUTE_WILDCARD):
        return pattern[: -len(ROUTE_WILDCARD)] + PLATFORM_WILDCARD
    return pattern


def with_leading_slash(path: str) -> str:
    return path if path.startswith("/") else "/" + path


def path_segments(path: str | None) -> tuple[str, ...]:
    """Non-empty segments of ``path`` after stripping outer slashes."""
    if not path:
        return ()
    return tuple(part for part in path.strip("/").split("/") if part)


def join_url(base: str, *parts: str) -> str:
    """Join URL path fragments with exactly one ``/`` between each."""
    url = base
    for part in parts:
        if not part:
            continue
        if not url:
            url = part
            continue
        url = url.rstrip("/") + "/" + part.lstrip("/")
    return url
