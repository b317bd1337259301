"""Compile all deploy artifacts for one build.

Runs the writers strictly one after another against the same config
snapshot: routes, headers, redirects, then the deployment descriptor.
Any file-system failure stops the build and names the artifact.
"""

import logging
import time
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pagewright.build.descriptor import DESCRIPTOR_FILENAME, write_descriptor
from pagewright.build.headers import HEADERS_FILENAME, write_headers
from pagewright.build.redirects import REDIRECTS_FILENAME, write_redirects
from pagewright.build.routes import ROUTES_FILENAME, RoutingManifest, write_routes
from pagewright.config import BuildConfig
from pagewright.errors import ArtifactWriteError

logger = logging.getLogger("pagewright.build")


@dataclass(slots=True)
class CompileResult:
    """What one compilation pass wrote."""

    manifest: RoutingManifest | None = None
    written: list[Path] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


async def compile_artifacts(
    config: BuildConfig,
    *,
    files: list[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> CompileResult:
    """Write ``_routes.json``, ``_headers``, ``_redirects`` and ``wrangler.toml``.

    Args:
        config: Build configuration snapshot.
        files: Output directory listing from the build pipeline. Scanned
            from disk when omitted.
        environ: Environment used for CI detection (``os.environ`` when
            omitted).

    Raises:
        ArtifactWriteError: If reading or writing any artifact fails.
        DescriptorError: If the existing ``wrangler.toml`` is malformed.
    """
    start = time.perf_counter()
    result = CompileResult()
    public_dir = config.public_dir

    result.manifest = await _run(
        ROUTES_FILENAME, public_dir / ROUTES_FILENAME, lambda: write_routes(config, files=files)
    )
    result.written.append(public_dir / ROUTES_FILENAME)

    for name, writer in (
        (HEADERS_FILENAME, write_headers),
        (REDIRECTS_FILENAME, write_redirects),
    ):
        if await _run(name, public_dir / name, lambda w=writer: w(config)):
            result.written.append(public_dir / name)
        else:
            result.skipped.append(name)

    descriptor = await _run(
        DESCRIPTOR_FILENAME,
        config.wrangler_source,
        lambda: write_descriptor(config, environ=environ),
    )
    if descriptor is not None:
        result.written.append(descriptor)
    else:
        result.skipped.append(DESCRIPTOR_FILENAME)

    logger.debug(
        "Compiled %d artifact(s) in %.3fs", len(result.written), time.perf_counter() - start
    )
    return result


async def _run(artifact: str, path: Path, step: Callable[[], Awaitable[Any]]) -> Any:
    try:
        return await step()
    except OSError as exc:
        raise ArtifactWriteError(artifact, exc.filename or path, exc.strerror or str(exc)) from exc
