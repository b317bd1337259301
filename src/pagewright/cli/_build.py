"""``pagewright build`` — compile the deploy artifacts for a build output."""

import argparse
import sys

import anyio

from pagewright.build.pipeline import compile_artifacts
from pagewright.config import load_config
from pagewright.errors import PagewrightError


def run_build(args: argparse.Namespace) -> None:
    """Load ``args.config`` and write every artifact.

    Prints one line per artifact written or skipped. Any ``PagewrightError``
    is reported on stderr with exit status 1.
    """
    try:
        config = load_config(args.config)
        result = anyio.run(compile_artifacts, config)
    except PagewrightError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    for path in result.written:
        print(f"wrote    {path}")
    for name in result.skipped:
        print(f"skipped  {name}")
    if result.manifest is not None:
        print(
            f"routes   {len(result.manifest.include)} include, "
            f"{len(result.manifest.exclude)} exclude"
        )
