"""Route-rule to deploy-artifact compiler.

Usage::

    from pagewright.build import compile_artifacts
    from pagewright.config import load_config

    result = anyio.run(compile_artifacts, load_config("pagewright.toml"))
"""

from pagewright.build.assets import resolve_asset_excludes
from pagewright.build.descriptor import merge_descriptor, write_descriptor
from pagewright.build.headers import render_headers, write_headers
from pagewright.build.pipeline import CompileResult, compile_artifacts
from pagewright.build.redirects import render_redirects, write_redirects
from pagewright.build.routes import RoutingManifest, build_routes_manifest, write_routes

__all__ = [
    "CompileResult",
    "RoutingManifest",
    "build_routes_manifest",
    "compile_artifacts",
    "merge_descriptor",
    "render_headers",
    "render_redirects",
    "resolve_asset_excludes",
    "write_descriptor",
    "write_headers",
    "write_redirects",
    "write_routes",
]
