"""Route-rule and static-asset mount declarations.

Frozen dataclasses built by ``load_config()`` (or directly by a build
pipeline) and consumed read-only by the artifact writers.
"""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from pagewright.errors import ConfigurationError
from pagewright.routing.paths import ROUTE_WILDCARD, path_segments

DEFAULT_REDIRECT_STATUS = 307


@dataclass(frozen=True, slots=True)
class Redirect:
    """A redirect directive: send matching requests to ``to``."""

    to: str
    status_code: int = DEFAULT_REDIRECT_STATUS

    def __post_init__(self) -> None:
        if not self.to:
            raise ConfigurationError("Redirect target must not be empty")
        if not 300 <= self.status_code <= 399:
            msg = f"Redirect status must be a 3xx code, got {self.status_code}"
            raise ConfigurationError(msg)


@dataclass(frozen=True, slots=True)
class RouteRule:
    """Behaviour directives attached to one path pattern.

    ``pattern`` is either an exact path (``/about``) or a prefix ending in
    a single trailing wildcard segment (``/api/**``). ``headers`` keeps
    declaration order; names are unique case-insensitively.
    """

    pattern: str
    headers: tuple[tuple[str, str], ...] = ()
    redirect: Redirect | None = None

    def __post_init__(self) -> None:
        validate_pattern(self.pattern)
        seen: set[str] = set()
        for name, _ in self.headers:
            key = name.lower()
            if key in seen:
                msg = f"Duplicate header {name!r} in route rule {self.pattern!r}"
                raise ConfigurationError(msg)
            seen.add(key)

    @property
    def is_catch_all(self) -> bool:
        return self.pattern == ROUTE_WILDCARD


@dataclass(frozen=True, slots=True)
class PublicAssetMount:
    """A directory of pre-built files served by the platform's static layer.

    ``base_url`` of ``None`` (or ``/``) mounts the files at the root.
    ``fallthrough`` mounts still let misses reach the dynamic handler, so
    they are never excluded from it.
    """

    base_url: str | None = None
    fallthrough: bool = False

    @property
    def segments(self) -> tuple[str, ...]:
        return path_segments(self.base_url)

    @property
    def is_explicit_prefix(self) -> bool:
        return not self.fallthrough and bool(self.segments)


@dataclass(frozen=True, slots=True)
class RouteRuleTable:
    """Ordered collection of route rules, unique by pattern."""

    rules: tuple[RouteRule, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        patterns = [rule.pattern for rule in self.rules]
        if len(patterns) != len(set(patterns)):
            raise ConfigurationError("Route rule patterns must be unique")

    def __iter__(self) -> Iterator[RouteRule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def with_headers(self) -> list[RouteRule]:
        return [rule for rule in self.rules if rule.headers]

    def with_redirects(self) -> list[RouteRule]:
        return [rule for rule in self.rules if rule.redirect is not None]

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RouteRuleTable":
        """Build a table from ``{pattern: {"headers": ..., "redirect": ...}}``."""
        return cls(tuple(parse_route_rule(pattern, value) for pattern, value in data.items()))


def validate_pattern(pattern: str) -> None:
    """Reject patterns the platform interpreter cannot express.

    Raises:
        ConfigurationError: If the pattern does not start with ``/`` or has
            a wildcard anywhere other than one trailing ``/**``.
    """
    if not pattern.startswith("/"):
        raise ConfigurationError(f"Route pattern must start with '/': {pattern!r}")
    head = pattern[: -len(ROUTE_WILDCARD)] if pattern.endswith(ROUTE_WILDCARD) else pattern
    if "*" in head:
        msg = f"Route pattern may only end in a single '/**' wildcard: {pattern!r}"
        raise ConfigurationError(msg)


def parse_route_rule(pattern: str, value: Any) -> RouteRule:
    """Build a ``RouteRule`` from its ``pagewright.toml`` table."""
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Route rule {pattern!r} must be a table")

    headers = value.get("headers") or {}
    if not isinstance(headers, Mapping):
        raise ConfigurationError(f"Route rule {pattern!r}: headers must be a table")

    return RouteRule(
        pattern=pattern,
        headers=tuple((str(name), _header_value(pattern, name, v)) for name, v in headers.items()),
        redirect=_parse_redirect(pattern, value.get("redirect")),
    )


def parse_mounts(items: Iterable[Any]) -> tuple[PublicAssetMount, ...]:
    mounts: list[PublicAssetMount] = []
    for item in items:
        if not isinstance(item, Mapping):
            raise ConfigurationError("Each [[public_assets]] entry must be a table")
        base_url = item.get("base_url")
        if base_url is not None and not isinstance(base_url, str):
            raise ConfigurationError("public_assets.base_url must be a string")
        mounts.append(
            PublicAssetMount(base_url=base_url, fallthrough=bool(item.get("fallthrough", False)))
        )
    return tuple(mounts)


def _header_value(pattern: str, name: str, value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, str | int | float):
        msg = f"Route rule {pattern!r}: header {name!r} must be a string or number"
        raise ConfigurationError(msg)
    return str(value)


def _parse_redirect(pattern: str, value: Any) -> Redirect | None:
    if value is None:
        return None
    if isinstance(value, str):
        return Redirect(to=value)
    if isinstance(value, Mapping):
        to = value.get("to")
        status = value.get("status_code", DEFAULT_REDIRECT_STATUS)
        if not isinstance(to, str) or not isinstance(status, int):
            msg = f"Route rule {pattern!r}: redirect needs a string 'to' and int 'status_code'"
            raise ConfigurationError(msg)
        return Redirect(to=to, status_code=status)
    raise ConfigurationError(f"Route rule {pattern!r}: redirect must be a string or table")
