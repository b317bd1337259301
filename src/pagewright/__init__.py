"""Pagewright — compile route rules into static-hosting deploy artifacts.

Turns declarative route rules (custom headers, redirects, static-asset
mounts) into the files a Pages-style hosting platform reads at deploy
time: ``_routes.json``, ``_headers``, ``_redirects`` and ``wrangler.toml``.
Also provides the runtime dispatcher that fronts the dynamic ASGI app.

Basic usage::

    import anyio
    from pagewright import compile_artifacts, load_config

    anyio.run(compile_artifacts, load_config("pagewright.toml"))

Runtime::

    from pagewright import DeploymentEnv, Dispatcher

    dispatcher = Dispatcher(app, env=DeploymentEnv(vars=os.environ))
"""

__version__ = "0.1.0"
__all__ = [
    "ArtifactWriteError",
    "BuildConfig",
    "CompileResult",
    "ConfigurationError",
    "DeploymentEnv",
    "DescriptorError",
    "Dispatcher",
    "PagewrightError",
    "PublicAssetMount",
    "Redirect",
    "RouteRule",
    "RouteRuleTable",
    "StaticAssets",
    "TaskRegistry",
    "compile_artifacts",
    "load_config",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import pagewright`` fast while providing a clean top-level API.
    """
    if name in ("BuildConfig", "load_config"):
        from pagewright import config as _config

        return getattr(_config, name)

    if name in ("CompileResult", "compile_artifacts"):
        from pagewright.build import pipeline as _pipeline

        return getattr(_pipeline, name)

    if name in ("PublicAssetMount", "Redirect", "RouteRule", "RouteRuleTable"):
        from pagewright.routing import rules as _rules

        return getattr(_rules, name)

    if name in ("DeploymentEnv", "Dispatcher", "StaticAssets", "TaskRegistry"):
        from pagewright import runtime as _runtime

        return getattr(_runtime, name)

    if name in ("ArtifactWriteError", "ConfigurationError", "DescriptorError", "PagewrightError"):
        from pagewright import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
