"""Pagewright CLI — compile deploy artifacts and preview a build locally.

Entry point registered as ``pagewright`` in ``pyproject.toml``::

    [project.scripts]
    pagewright = "pagewright.cli:main"
"""

import argparse
import logging
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``pagewright`` command."""
    parser = argparse.ArgumentParser(
        prog="pagewright",
        description="Pagewright — compile route rules into static-hosting deploy artifacts.",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Log debug output"
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- pagewright build -----------------------------------------------------
    build_parser = subparsers.add_parser(
        "build", help="Write _routes.json, _headers, _redirects and wrangler.toml"
    )
    build_parser.add_argument(
        "--config",
        default="pagewright.toml",
        help="Path to pagewright.toml or the directory containing it",
    )

    # -- pagewright preview ---------------------------------------------------
    preview_parser = subparsers.add_parser(
        "preview", help="Serve the build output and app like the platform would"
    )
    preview_parser.add_argument("app", help="Import string (e.g. myapp:app)")
    preview_parser.add_argument(
        "--config",
        default="pagewright.toml",
        help="Path to pagewright.toml or the directory containing it",
    )
    preview_parser.add_argument("--host", default="127.0.0.1", help="Bind host address")
    preview_parser.add_argument("--port", type=int, default=8788, help="Bind port number")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    configure_logging(verbose=args.verbose)

    if args.command == "build":
        from pagewright.cli._build import run_build

        run_build(args)
    elif args.command == "preview":
        from pagewright.cli._preview import run_preview

        run_preview(args)


def configure_logging(*, verbose: bool = False) -> logging.Logger:
    """Attach a console handler to the ``pagewright`` logger hierarchy."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger("pagewright")
    logger.setLevel(level)

    # Reset handlers to avoid duplicate output when main() runs more than once.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[pagewright] %(levelname)s %(message)s"))
    logger.addHandler(handler)
    return logger
