"""Static-asset exclusion resolver.

Works out which request paths the platform's static layer can answer on
its own, so the dynamic handler is never invoked for them:

1. Every non-fallthrough mount with an explicit base URL becomes one
   ``{base_url}/*`` prefix, unless another such mount already covers it.
2. Every remaining file in the output directory is listed individually.

Both groups are sorted with ``path_sort_key``; prefixes come first.
"""

import fnmatch
from collections.abc import Iterable, Sequence

from pagewright.routing.paths import (
    PLATFORM_WILDCARD,
    join_url,
    path_segments,
    path_sort_key,
    with_leading_slash,
)
from pagewright.routing.rules import PublicAssetMount

# Build output that lives in the public directory but is never served.
WORKER_ARTIFACTS = frozenset({"_worker.js", "_worker.js.map", "pagewright.json"})
# Platform control files, read by the platform and never served.
CONTROL_FILES = frozenset({"_routes.json", "_headers", "_redirects"})


def explicit_prefix_mounts(mounts: Sequence[PublicAssetMount]) -> list[PublicAssetMount]:
    """Non-fallthrough, non-root mounts not nested under another one.

    Nesting is decided per path segment: ``/images/icons`` is under
    ``/images`` but ``/imagesets`` is not. Duplicate base URLs keep the
    first declaration.
    """
    candidates = [mount for mount in mounts if mount.is_explicit_prefix]
    kept: list[PublicAssetMount] = []
    for index, mount in enumerate(candidates):
        segments = mount.segments
        subsumed = False
        for other_index, other in enumerate(candidates):
            if other_index == index:
                continue
            prefix = other.segments
            if len(prefix) < len(segments) and segments[: len(prefix)] == prefix:
                subsumed = True
                break
            if prefix == segments and other_index < index:
                subsumed = True
                break
        if not subsumed:
            kept.append(mount)
    return kept


def prefix_excludes(mounts: Sequence[PublicAssetMount]) -> list[str]:
    patterns = [
        join_url("/" + "/".join(mount.segments), "*") for mount in explicit_prefix_mounts(mounts)
    ]
    return sorted(patterns, key=path_sort_key)


def is_excluded(relative_path: str, patterns: Iterable[str]) -> bool:
    """Whether an output file is already covered by an exclude pattern.

    ``/dir/*`` covers everything below ``dir`` at any depth (the platform
    wildcard spans segments); other patterns are matched as globs.
    """
    segments = path_segments(relative_path)
    for pattern in patterns:
        if pattern.endswith(PLATFORM_WILDCARD):
            prefix = path_segments(pattern[: -len(PLATFORM_WILDCARD)])
            if segments[: len(prefix)] == prefix and len(segments) > len(prefix):
                return True
        elif fnmatch.fnmatchcase("/".join(segments), "/".join(path_segments(pattern))):
            return True
    return False


def file_excludes(files: Iterable[str], covered: Iterable[str]) -> list[str]:
    """One ``/path`` pattern per output file not already covered."""
    covered = list(covered)
    patterns: list[str] = []
    for name in files:
        top = path_segments(name)[:1]
        if not top or top[0] in WORKER_ARTIFACTS or name in CONTROL_FILES:
            continue
        if is_excluded(name, covered):
            continue
        patterns.append(with_leading_slash(name))
    return sorted(set(patterns), key=path_sort_key)


def resolve_asset_excludes(
    mounts: Sequence[PublicAssetMount],
    files: Iterable[str],
    *,
    existing: Sequence[str] = (),
) -> list[str]:
    """Ordered exclude patterns for the static assets of one build.

    Args:
        mounts: Declared static-asset mounts.
        files: Files present in the output directory, relative POSIX paths.
        existing: Exclude patterns already declared by the user; files
            they cover are not listed again.

    Returns:
        Explicit-prefix patterns followed by per-file patterns.
    """
    prefixes = prefix_excludes(mounts)
    return prefixes + file_excludes(files, [*existing, *prefixes])
