"""Pagewright exception hierarchy.

Shared across the config loader, the artifact writers, and the CLI so
every module raises and catches the same types.
"""

from pathlib import Path


class PagewrightError(Exception):
    """Base for all pagewright-specific errors."""


class ConfigurationError(PagewrightError):
    """Raised when ``pagewright.toml`` or a route-rule declaration is invalid.

    Typically raised by ``load_config()`` before any artifact is written.
    """


class DescriptorError(PagewrightError):
    """Raised when the deployment descriptor cannot be parsed or serialized.

    A corrupt ``wrangler.toml`` is never partially merged.
    """


class ArtifactWriteError(PagewrightError):
    """A deploy artifact could not be read, scanned, or written.

    Fatal: the build stops at the first failing artifact and no partial
    output is considered valid.
    """

    def __init__(self, artifact: str, path: Path | str | None, reason: str) -> None:
        self.artifact = artifact
        self.path = path
        self.reason = reason
        location = f" ({path})" if path else ""
        super().__init__(f"Failed to write {artifact}{location}: {reason}")
