"""Build configuration.

BuildConfig is a frozen dataclass, immutable once loaded: the four artifact
writers all read the same snapshot, so nothing one writer does can change
what the next one sees.

Loaded from ``pagewright.toml``::

    output_dir = "dist"

    [[public_assets]]
    base_url = "/images"

    [route_rules."/api/**".headers]
    "Cache-Control" = "no-store"

    [pages.routes]
    include = ["/*"]
"""

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pagewright.errors import ConfigurationError
from pagewright.routing.rules import PublicAssetMount, RouteRuleTable, parse_mounts

CONFIG_FILENAME = "pagewright.toml"

# Hard platform cap on include + exclude entries in the routing manifest.
MAX_ROUTE_RULES = 100

# Environment variables set by common CI providers.
_CI_PROVIDER_VARS = (
    "GITHUB_ACTIONS",
    "GITLAB_CI",
    "BUILDKITE",
    "CIRCLECI",
    "TRAVIS",
    "JENKINS_URL",
    "TEAMCITY_VERSION",
    "CF_PAGES",
    "NETLIFY",
    "VERCEL",
)
_FALSY = frozenset({"", "0", "false", "no", "off"})


@dataclass(frozen=True, slots=True)
class PagesRoutesConfig:
    """User-declared routing manifest overrides.

    ``include``/``exclude`` of ``None`` mean "not declared" and fall back to
    ``("/*",)`` and ``()``. With ``default_routes=False`` the declared lists
    are written verbatim and no static-asset exclusions are computed.
    """

    version: int = 1
    include: tuple[str, ...] | None = None
    exclude: tuple[str, ...] | None = None
    default_routes: bool = True

    def __post_init__(self) -> None:
        if self.include is not None and len(self.include) > MAX_ROUTE_RULES:
            msg = (
                f"pages.routes.include has {len(self.include)} entries; "
                f"the platform allows at most {MAX_ROUTE_RULES} rules in total"
            )
            raise ConfigurationError(msg)

    @property
    def resolved_include(self) -> list[str]:
        return list(self.include) if self.include is not None else ["/*"]

    @property
    def resolved_exclude(self) -> list[str]:
        return list(self.exclude) if self.exclude is not None else []


@dataclass(frozen=True, slots=True)
class BuildConfig:
    """Resolved configuration for one compilation pass.

    All fields have sensible defaults. Relative directories are resolved
    against ``root_dir``::

        config = BuildConfig(root_dir=Path("."), output_dir=Path("dist"))
    """

    root_dir: Path = field(default_factory=Path.cwd)

    # Output
    output_dir: Path = Path("dist")
    build_dir: Path = Path(".pagewright")
    not_found_page: str = "404.html"

    # Inputs from the build pipeline
    public_assets: tuple[PublicAssetMount, ...] = ()
    route_rules: RouteRuleTable = field(default_factory=RouteRuleTable)

    # Routing manifest
    routes: PagesRoutesConfig = field(default_factory=PagesRoutesConfig)

    # Deployment descriptor
    wrangler: Mapping[str, Any] = field(default_factory=dict)
    wrangler_config_path: str = "wrangler.toml"

    # None = detect from the environment
    ci: bool | None = None

    @property
    def public_dir(self) -> Path:
        return self.root_dir / self.output_dir

    @property
    def resolved_build_dir(self) -> Path:
        return self.root_dir / self.build_dir

    @property
    def wrangler_source(self) -> Path:
        return self.root_dir / self.wrangler_config_path

    def is_ci(self, environ: Mapping[str, str] | None = None) -> bool:
        if self.ci is not None:
            return self.ci
        return detect_ci(os.environ if environ is None else environ)


def detect_ci(environ: Mapping[str, str]) -> bool:
    """Whether the process runs under a continuous-integration provider."""
    ci = environ.get("CI")
    if ci is not None:
        return ci.strip().lower() not in _FALSY
    return any(environ.get(name) for name in _CI_PROVIDER_VARS)


def load_config(path: str | Path) -> BuildConfig:
    """Load ``pagewright.toml`` into a ``BuildConfig``.

    ``path`` may point at the file or at the directory containing it. A
    missing file is not an error: defaults rooted at that directory are
    returned.

    Raises:
        ConfigurationError: If the file is not valid TOML or a value has
            the wrong type.
    """
    config_file = _resolve_config_path(Path(path))
    root = config_file.parent

    if not config_file.exists():
        return BuildConfig(root_dir=root)

    try:
        data = tomllib.loads(config_file.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Invalid TOML in {config_file}: {exc}") from exc

    return config_from_mapping(data, root_dir=root)


def config_from_mapping(data: Mapping[str, Any], *, root_dir: Path) -> BuildConfig:
    """Build a ``BuildConfig`` from an already-parsed document."""
    pages = _as_table(data.get("pages"), "pages")
    routes_data = _as_table(pages.get("routes"), "pages.routes")

    wrangler = dict(_as_table(data.get("wrangler"), "wrangler"))
    wrangler_config_path = wrangler.pop("config_path", "wrangler.toml")

    public_assets = data.get("public_assets", [])
    if not isinstance(public_assets, list):
        raise ConfigurationError("public_assets must be an array of tables")

    ci = data.get("ci")
    if ci is not None and not isinstance(ci, bool):
        raise ConfigurationError("ci must be a boolean")

    return BuildConfig(
        root_dir=root_dir,
        output_dir=Path(_as_str(data.get("output_dir", "dist"), "output_dir")),
        build_dir=Path(_as_str(data.get("build_dir", ".pagewright"), "build_dir")),
        not_found_page=_as_str(data.get("not_found_page", "404.html"), "not_found_page"),
        public_assets=parse_mounts(public_assets),
        route_rules=RouteRuleTable.from_mapping(
            _as_table(data.get("route_rules"), "route_rules")
        ),
        routes=PagesRoutesConfig(
            version=_as_int(routes_data.get("version", 1), "pages.routes.version"),
            include=_as_str_tuple(routes_data.get("include"), "pages.routes.include"),
            exclude=_as_str_tuple(routes_data.get("exclude"), "pages.routes.exclude"),
            default_routes=pages.get("default_routes", True) is not False,
        ),
        wrangler=wrangler,
        wrangler_config_path=_as_str(wrangler_config_path, "wrangler.config_path"),
        ci=ci,
    )


def _resolve_config_path(path: Path) -> Path:
    path = path.expanduser()
    if path.is_dir():
        return (path / CONFIG_FILENAME).resolve()
    return path.resolve()


def _as_table(value: Any, name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"{name} must be a table")
    return value


def _as_str(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{name} must be a string")
    return value


def _as_int(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{name} must be an integer")
    return value


def _as_str_tuple(value: Any, name: str) -> tuple[str, ...] | None:
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigurationError(f"{name} must be an array of strings")
    return tuple(value)
