"""Redirect rules writer (``_redirects``).

One tab-separated rule per line, broadest first, so a narrower rule
declared by the application always comes after (and overrides) the
broad fallbacks::

    /* /404.html 404
    /blog/*	/news/:splat	301
    /old	/new	301
"""

import logging

import anyio

from pagewright.build._files import read_text_if_exists, write_text_atomic
from pagewright.build.headers import has_catch_all, merge_generated
from pagewright.config import BuildConfig
from pagewright.routing.paths import specificity, to_platform_pattern, with_leading_slash
from pagewright.routing.rules import RouteRuleTable

logger = logging.getLogger("pagewright.build")

REDIRECTS_FILENAME = "_redirects"


def not_found_fallback(page: str) -> str:
    return f"/* {with_leading_slash(page)} 404"


def render_redirects(table: RouteRuleTable, *, not_found_page: str | None = None) -> list[str]:
    """Redirect lines, least specific first.

    Args:
        table: Route rules; only those with a redirect are rendered.
        not_found_page: Output-relative path of the custom 404 page when
            one exists. Adds the lowest-priority ``/*`` fallback line
            unless a catch-all redirect is already declared.
    """
    rules = sorted(table.with_redirects(), key=lambda rule: specificity(rule.pattern))
    lines: list[str] = []
    if not_found_page and not any(rule.is_catch_all for rule in rules):
        lines.append(not_found_fallback(not_found_page))
    for rule in rules:
        assert rule.redirect is not None
        lines.append(
            f"{to_platform_pattern(rule.pattern)}\t{rule.redirect.to}\t{rule.redirect.status_code}"
        )
    return lines


async def write_redirects(config: BuildConfig) -> bool:
    """Write ``_redirects``; returns ``False`` when generation was skipped."""
    path = config.public_dir / REDIRECTS_FILENAME
    existing = await read_text_if_exists(path)
    if existing is not None and has_catch_all(existing):
        logger.info("Not adding rules to %s (an existing catch-all rule was found).", path)
        return False

    page = config.not_found_page
    has_page = bool(page) and await anyio.Path(config.public_dir / page).is_file()
    lines = render_redirects(config.route_rules, not_found_page=page if has_page else None)
    if not lines and existing is None:
        return False

    generated = "".join(f"{line}\n" for line in lines)
    content = merge_generated(generated, existing, "")
    await write_text_atomic(path, content)
    logger.info("Wrote %s (%d rule(s))", path, len(lines))
    return True
