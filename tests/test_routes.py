"""Tests for pagewright.build.routes — the _routes.json writer."""

import json
import logging
from pathlib import Path

import pytest

from pagewright.build.routes import (
    RoutingManifest,
    build_routes_manifest,
    enforce_rule_budget,
    write_routes,
)
from pagewright.config import MAX_ROUTE_RULES, BuildConfig, PagesRoutesConfig
from pagewright.routing.rules import PublicAssetMount


@pytest.fixture
def site(tmp_path: Path) -> Path:
    """A build output directory with a few static files."""
    dist = tmp_path / "dist"
    (dist / "images").mkdir(parents=True)
    (dist / "images" / "a.png").write_bytes(b"\x89PNG")
    (dist / "robots.txt").write_text("User-agent: *")
    (dist / "_worker.js").mkdir()
    (dist / "_worker.js" / "index.js").write_text("export default {}")
    return tmp_path


class TestRoutingManifest:
    def test_defaults(self) -> None:
        manifest = RoutingManifest()
        assert manifest.to_dict() == {"version": 1, "include": ["/*"], "exclude": []}

    def test_json_is_indented(self) -> None:
        text = RoutingManifest(exclude=["/a"]).to_json()
        assert text == (
            '{\n  "version": 1,\n  "include": [\n    "/*"\n  ],\n'
            '  "exclude": [\n    "/a"\n  ]\n}'
        )


class TestRuleBudget:
    def test_within_budget_untouched(self) -> None:
        manifest = RoutingManifest(exclude=["/a", "/b"])
        assert enforce_rule_budget(manifest) == 0
        assert manifest.exclude == ["/a", "/b"]

    def test_truncates_exclude_from_the_end(self) -> None:
        manifest = RoutingManifest(include=["/*", "/api/*"], exclude=[f"/f{i}" for i in range(120)])
        dropped = enforce_rule_budget(manifest)

        assert dropped == 22
        assert manifest.rule_count == MAX_ROUTE_RULES
        assert manifest.exclude[-1] == "/f97"
        assert manifest.include == ["/*", "/api/*"]

    def test_include_never_touched(self) -> None:
        manifest = RoutingManifest(include=[f"/i{i}" for i in range(100)], exclude=["/a"])
        enforce_rule_budget(manifest)
        assert len(manifest.include) == 100
        assert manifest.exclude == []


class TestBuildRoutesManifest:
    def test_default_routes_disabled_writes_user_lists_verbatim(self, tmp_path: Path) -> None:
        config = BuildConfig(
            root_dir=tmp_path,
            public_assets=(PublicAssetMount(base_url="/images"),),
            routes=PagesRoutesConfig(include=("/api/*",), default_routes=False),
        )
        manifest = build_routes_manifest(config, ["robots.txt"])
        assert manifest.to_dict() == {"version": 1, "include": ["/api/*"], "exclude": []}

    def test_user_exclude_first_then_assets(self, tmp_path: Path) -> None:
        config = BuildConfig(
            root_dir=tmp_path,
            public_assets=(PublicAssetMount(base_url="/images"),),
            routes=PagesRoutesConfig(exclude=("/static/*",)),
        )
        manifest = build_routes_manifest(config, ["robots.txt", "static/app.js"])
        assert manifest.exclude == ["/static/*", "/images/*", "/robots.txt"]

    def test_overflow_logged(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        config = BuildConfig(root_dir=tmp_path)
        files = [f"file{i:03}.txt" for i in range(150)]

        with caplog.at_level(logging.INFO, logger="pagewright.build"):
            manifest = build_routes_manifest(config, files)

        assert manifest.rule_count == MAX_ROUTE_RULES
        assert manifest.exclude[0] == "/file000.txt"
        assert "Dropped 51 exclude rule(s)" in caplog.text


class TestWriteRoutes:
    async def test_scans_output_directory(self, site: Path) -> None:
        config = BuildConfig(
            root_dir=site,
            public_assets=(
                PublicAssetMount(base_url="/images"),
                PublicAssetMount(base_url="/images/icons"),
            ),
        )
        manifest = await write_routes(config)

        written = json.loads((site / "dist" / "_routes.json").read_text())
        assert written == {"version": 1, "include": ["/*"], "exclude": ["/images/*", "/robots.txt"]}
        assert manifest.exclude == written["exclude"]

    async def test_default_routes_disabled_skips_scan(self, tmp_path: Path) -> None:
        # The output directory does not even exist yet: no scan may happen.
        config = BuildConfig(
            root_dir=tmp_path,
            routes=PagesRoutesConfig(include=("/api/*",), default_routes=False),
        )
        await write_routes(config)

        written = json.loads((tmp_path / "dist" / "_routes.json").read_text())
        assert written == {"version": 1, "include": ["/api/*"], "exclude": []}

    async def test_explicit_file_list_used(self, tmp_path: Path) -> None:
        config = BuildConfig(root_dir=tmp_path)
        await write_routes(config, files=["a.css"])

        written = json.loads((tmp_path / "dist" / "_routes.json").read_text())
        assert written["exclude"] == ["/a.css"]

    async def test_budget_holds_for_large_sites(self, tmp_path: Path) -> None:
        dist = tmp_path / "dist"
        dist.mkdir()
        for i in range(130):
            (dist / f"page{i}.html").write_text("x")

        config = BuildConfig(root_dir=tmp_path, routes=PagesRoutesConfig(include=("/*", "/api/*")))
        await write_routes(config)

        written = json.loads((dist / "_routes.json").read_text())
        assert len(written["include"]) + len(written["exclude"]) <= MAX_ROUTE_RULES
        assert written["include"] == ["/*", "/api/*"]

    async def test_deterministic(self, site: Path) -> None:
        config = BuildConfig(root_dir=site, public_assets=(PublicAssetMount(base_url="/images"),))
        await write_routes(config)
        first = (site / "dist" / "_routes.json").read_bytes()
        (site / "dist" / "_routes.json").unlink()
        await write_routes(config)

        assert (site / "dist" / "_routes.json").read_bytes() == first
