"""Routing manifest writer (``_routes.json``).

Tells the platform which request paths invoke the dynamic handler
(``include``) and which are answered by the static layer (``exclude``).
``exclude`` always wins over ``include`` at serve time.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from pagewright.build._files import list_files, write_text_atomic
from pagewright.build.assets import resolve_asset_excludes
from pagewright.config import MAX_ROUTE_RULES, BuildConfig

logger = logging.getLogger("pagewright.build")

ROUTES_FILENAME = "_routes.json"


@dataclass(slots=True)
class RoutingManifest:
    """The ``_routes.json`` document."""

    version: int = 1
    include: list[str] = field(default_factory=lambda: ["/*"])
    exclude: list[str] = field(default_factory=list)

    @property
    def rule_count(self) -> int:
        return len(self.include) + len(self.exclude)

    def to_dict(self) -> dict[str, Any]:
        return {"version": self.version, "include": self.include, "exclude": self.exclude}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)


def enforce_rule_budget(manifest: RoutingManifest, limit: int = MAX_ROUTE_RULES) -> int:
    """Drop trailing ``exclude`` entries until the manifest fits ``limit``.

    ``include`` is never touched. The entries dropped are the ones appended
    last, i.e. the most specific per-file exclusions. Returns how many were
    dropped.
    """
    room = max(0, limit - len(manifest.include))
    dropped = max(0, len(manifest.exclude) - room)
    if dropped:
        del manifest.exclude[room:]
    return dropped


def build_routes_manifest(config: BuildConfig, files: list[str] | None) -> RoutingManifest:
    """Assemble the manifest for ``config``.

    ``files`` is the output directory listing; it is ignored when
    ``default_routes`` is disabled.
    """
    routes = config.routes
    manifest = RoutingManifest(
        version=routes.version or 1,
        include=routes.resolved_include,
        exclude=routes.resolved_exclude,
    )
    if not routes.default_routes:
        return manifest

    manifest.exclude.extend(
        resolve_asset_excludes(config.public_assets, files or [], existing=manifest.exclude)
    )
    dropped = enforce_rule_budget(manifest)
    if dropped:
        logger.info(
            "Dropped %d exclude rule(s) from %s to stay within the %d-rule limit; "
            "those assets will reach the dynamic handler.",
            dropped,
            ROUTES_FILENAME,
            MAX_ROUTE_RULES,
        )
    return manifest


async def write_routes(config: BuildConfig, *, files: list[str] | None = None) -> RoutingManifest:
    """Compute and write ``_routes.json`` into the output directory.

    Args:
        config: Build configuration snapshot.
        files: Output directory listing. Scanned from disk when omitted
            and asset exclusions are enabled.
    """
    if config.routes.default_routes and files is None:
        files = await list_files(config.public_dir)

    manifest = build_routes_manifest(config, files)
    path = config.public_dir / ROUTES_FILENAME
    await write_text_atomic(path, manifest.to_json())
    logger.info(
        "Wrote %s (%d include, %d exclude)",
        path,
        len(manifest.include),
        len(manifest.exclude),
    )
    return manifest
