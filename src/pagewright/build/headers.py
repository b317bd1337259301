"""Header rules writer (``_headers``).

Blocks are ordered most specific first so the platform, which applies
every matching block, sees narrow rules ahead of the broad ones::

    /api/v1/*
      Cache-Control: no-store

    /api/*
      X-Robots-Tag: noindex
"""

import logging
import re

from pagewright.build._files import read_text_if_exists, write_text_atomic
from pagewright.config import BuildConfig
from pagewright.routing.paths import specificity, to_platform_pattern
from pagewright.routing.rules import RouteRule, RouteRuleTable

logger = logging.getLogger("pagewright.build")

HEADERS_FILENAME = "_headers"

# A hand-authored rule for every path: "/*" alone or followed by whitespace.
CATCH_ALL_LINE = re.compile(r"^/\*(?:[ \t]|$)", re.MULTILINE)


def has_catch_all(content: str) -> bool:
    return CATCH_ALL_LINE.search(content) is not None


def render_headers(table: RouteRuleTable) -> list[str]:
    """One text block per route rule carrying headers, most specific first."""
    rules = sorted(table.with_headers(), key=lambda rule: specificity(rule.pattern), reverse=True)
    return [_render_block(rule) for rule in rules]


def _render_block(rule: RouteRule) -> str:
    lines = [to_platform_pattern(rule.pattern)]
    lines.extend(f"  {name}: {value}" for name, value in rule.headers)
    return "\n".join(lines)


def merge_generated(generated: str, existing: str | None, separator: str) -> str:
    """Put ``generated`` above ``existing`` unless it is already there."""
    if not existing:
        return generated
    if not generated or existing.startswith(generated):
        return existing
    return generated + separator + existing


async def write_headers(config: BuildConfig) -> bool:
    """Write ``_headers``; returns ``False`` when generation was skipped.

    An existing file with a catch-all rule is treated as hand-maintained
    and left byte-for-byte untouched.
    """
    path = config.public_dir / HEADERS_FILENAME
    existing = await read_text_if_exists(path)
    if existing is not None and has_catch_all(existing):
        logger.info("Not adding rules to %s (an existing catch-all rule was found).", path)
        return False

    blocks = render_headers(config.route_rules)
    if not blocks and existing is None:
        return False

    generated = "\n\n".join(blocks)
    content = merge_generated(generated + "\n" if generated else "", existing, "\n")
    await write_text_atomic(path, content)
    logger.info("Wrote %s (%d rule block(s))", path, len(blocks))
    return True
