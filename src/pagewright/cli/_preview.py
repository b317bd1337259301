"""``pagewright preview`` — serve a build the way the platform would.

Wraps the application in a ``Dispatcher`` whose asset binding serves the
build output directory, then runs it on a single-worker pounce server.
"""

import argparse
import os
import sys

from pagewright.cli._resolve import resolve_app
from pagewright.config import BuildConfig, load_config
from pagewright.errors import PagewrightError
from pagewright.runtime.assets import StaticAssets
from pagewright.runtime.dispatcher import Dispatcher
from pagewright.runtime.env import DeploymentEnv


def build_dispatcher(app: object, config: BuildConfig) -> Dispatcher:
    """Dispatcher serving ``config.public_dir`` in front of ``app``."""
    assets = StaticAssets(config.public_dir, not_found_page=config.not_found_page)
    return Dispatcher(
        app,  # type: ignore[arg-type]
        env=DeploymentEnv(vars=dict(os.environ), assets=assets),
        is_public_asset=assets.exists,
    )


def run_preview(args: argparse.Namespace) -> None:
    """Resolve ``args.app`` and serve it behind the dispatcher."""
    try:
        config = load_config(args.config)
        app = resolve_app(args.app)
    except (PagewrightError, ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    from pounce.config import ServerConfig
    from pounce.server import Server

    server_config = ServerConfig(host=args.host, port=args.port, workers=1)
    Server(server_config, build_dispatcher(app, config)).run()
