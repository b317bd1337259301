"""Deployment descriptor writer (``wrangler.toml``).

Merges the descriptor already on disk with the inline overrides from
``[wrangler]`` in ``pagewright.toml``. Nothing is written when there are no
inline overrides, so a descriptor managed by hand is never clobbered.
"""

import logging
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import tomli_w

from pagewright._internal.tree import deep_merge
from pagewright.build._files import read_text_if_exists, write_text_atomic
from pagewright.config import BuildConfig
from pagewright.errors import DescriptorError

logger = logging.getLogger("pagewright.build")

DESCRIPTOR_FILENAME = "wrangler.toml"


def parse_descriptor(text: str, *, source: Path | str = DESCRIPTOR_FILENAME) -> dict[str, Any]:
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise DescriptorError(f"Invalid TOML in {source}: {exc}") from exc


def merge_descriptor(
    on_disk: Mapping[str, Any], overrides: Mapping[str, Any]
) -> dict[str, Any]:
    """Inline overrides win; nested tables are merged key by key."""
    return deep_merge(on_disk, overrides)


def descriptor_output_path(config: BuildConfig, *, ci: bool) -> Path:
    """Under CI the descriptor goes to the project root so the deploy step
    (a separate pipeline stage) can find it; locally it stays in the build
    directory."""
    directory = config.root_dir if ci else config.resolved_build_dir
    return directory / DESCRIPTOR_FILENAME


def dump_descriptor(document: Mapping[str, Any]) -> str:
    try:
        return tomli_w.dumps(document)
    except TypeError as exc:
        raise DescriptorError(f"Cannot serialize {DESCRIPTOR_FILENAME}: {exc}") from exc


async def write_descriptor(
    config: BuildConfig, *, environ: Mapping[str, str] | None = None
) -> Path | None:
    """Write the merged descriptor; returns its path, or ``None`` if skipped.

    Raises:
        DescriptorError: If the on-disk descriptor is not valid TOML.
    """
    if not config.wrangler:
        logger.debug("No inline [wrangler] overrides; leaving %s alone.", DESCRIPTOR_FILENAME)
        return None

    source = config.wrangler_source
    text = await read_text_if_exists(source)
    on_disk = parse_descriptor(text, source=source) if text is not None else {}

    merged = merge_descriptor(on_disk, config.wrangler)
    path = descriptor_output_path(config, ci=config.is_ci(environ))
    await write_text_atomic(path, dump_descriptor(merged))
    logger.info("Wrote %s", path)
    return path
