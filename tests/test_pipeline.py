"""Tests for pagewright.build.pipeline — the full compilation pass."""

from pathlib import Path

import pytest

from pagewright.build import compile_artifacts
from pagewright.config import BuildConfig, PagesRoutesConfig
from pagewright.errors import ArtifactWriteError, DescriptorError
from pagewright.routing.rules import PublicAssetMount, RouteRuleTable

ARTIFACTS = ("_routes.json", "_headers", "_redirects")


def _populate(dist: Path) -> None:
    (dist / "images").mkdir(parents=True)
    (dist / "images" / "a.png").write_bytes(b"\x89PNG")
    (dist / "robots.txt").write_text("User-agent: *\n")
    (dist / "404.html").write_text("<h1>Not found</h1>")


def _config(root: Path) -> BuildConfig:
    return BuildConfig(
        root_dir=root,
        public_assets=(PublicAssetMount("/images"), PublicAssetMount("/images/icons")),
        route_rules=RouteRuleTable.from_mapping(
            {
                "/api/**": {"headers": {"Cache-Control": "no-store"}},
                "/api/v1/**": {"headers": {"X-Version": "1"}},
                "/old": {"redirect": {"to": "/new", "status_code": 301}},
            }
        ),
        wrangler={"name": "site", "vars": {"MODE": "prod"}},
        ci=False,
    )


class TestCompileArtifacts:
    async def test_writes_all_artifacts(self, tmp_path: Path) -> None:
        _populate(tmp_path / "dist")
        config = _config(tmp_path)

        result = await compile_artifacts(config)

        dist = tmp_path / "dist"
        assert result.written == [
            dist / "_routes.json",
            dist / "_headers",
            dist / "_redirects",
            tmp_path / ".pagewright" / "wrangler.toml",
        ]
        assert result.skipped == []
        assert result.manifest is not None
        assert result.manifest.exclude == ["/images/*", "/404.html", "/robots.txt"]

    async def test_redirects_scenario(self, tmp_path: Path) -> None:
        _populate(tmp_path / "dist")
        await compile_artifacts(_config(tmp_path))

        content = (tmp_path / "dist" / "_redirects").read_text()
        assert content == "/* /404.html 404\n/old\t/new\t301\n"

    async def test_idempotent_across_fresh_outputs(self, tmp_path: Path) -> None:
        first_root, second_root = tmp_path / "one", tmp_path / "two"
        for root in (first_root, second_root):
            _populate(root / "dist")
            await compile_artifacts(_config(root))

        for name in ARTIFACTS:
            first = (first_root / "dist" / name).read_bytes()
            assert first == (second_root / "dist" / name).read_bytes()
        assert (first_root / ".pagewright" / "wrangler.toml").read_bytes() == (
            second_root / ".pagewright" / "wrangler.toml"
        ).read_bytes()

    async def test_rerun_in_same_output_is_stable(self, tmp_path: Path) -> None:
        _populate(tmp_path / "dist")
        config = _config(tmp_path)
        await compile_artifacts(config)
        before = {name: (tmp_path / "dist" / name).read_bytes() for name in ARTIFACTS}

        await compile_artifacts(config)

        assert {name: (tmp_path / "dist" / name).read_bytes() for name in ARTIFACTS} == before

    async def test_empty_configuration(self, tmp_path: Path) -> None:
        (tmp_path / "dist").mkdir()
        config = BuildConfig(root_dir=tmp_path, not_found_page="")

        result = await compile_artifacts(config)

        assert result.written == [tmp_path / "dist" / "_routes.json"]
        assert result.skipped == ["_headers", "_redirects", "wrangler.toml"]

    async def test_explicit_routes_skip_scan(self, tmp_path: Path) -> None:
        _populate(tmp_path / "dist")
        config = BuildConfig(
            root_dir=tmp_path,
            routes=PagesRoutesConfig(include=("/api/*",), default_routes=False),
        )

        result = await compile_artifacts(config)

        assert result.manifest is not None
        assert result.manifest.include == ["/api/*"]
        assert result.manifest.exclude == []

    async def test_files_from_build_pipeline(self, tmp_path: Path) -> None:
        config = BuildConfig(root_dir=tmp_path, ci=False)

        result = await compile_artifacts(config, files=["favicon.ico"])

        assert result.manifest is not None
        assert result.manifest.exclude == ["/favicon.ico"]

    async def test_write_failure_names_artifact(self, tmp_path: Path) -> None:
        (tmp_path / "dist").write_text("not a directory")
        config = BuildConfig(root_dir=tmp_path)

        with pytest.raises(ArtifactWriteError) as exc_info:
            await compile_artifacts(config, files=[])

        assert exc_info.value.artifact == "_routes.json"
        assert "_routes.json" in str(exc_info.value)

    async def test_malformed_descriptor_propagates(self, tmp_path: Path) -> None:
        (tmp_path / "dist").mkdir()
        (tmp_path / "wrangler.toml").write_text("name = \n")
        config = BuildConfig(root_dir=tmp_path, wrangler={"name": "site"}, ci=True)

        with pytest.raises(DescriptorError):
            await compile_artifacts(config)
