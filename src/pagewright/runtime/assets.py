"""Static asset handler.

An ASGI application serving the build output directory, standing in for
the platform's own static layer (the ``assets`` binding of a
``DeploymentEnv``) during local preview.

Usage::

    assets = StaticAssets("dist", not_found_page="404.html")
    env = DeploymentEnv(assets=assets)
    dispatcher = Dispatcher(app, env=env, is_public_asset=assets.exists)
"""

import mimetypes
from pathlib import Path
from urllib.parse import unquote

import anyio

from pagewright._internal.asgi import Receive, Scope, Send
from pagewright.runtime._send import send_response


class StaticAssets:
    """Serves files from a directory.

    Security: resolves symlinks and verifies the final path is within the
    configured directory to prevent path traversal.
    """

    __slots__ = ("_cache_control", "_directory", "_index", "_not_found_page")

    def __init__(
        self,
        directory: str | Path,
        *,
        index: str = "index.html",
        not_found_page: str | None = None,
        cache_control: str = "public, max-age=3600",
    ) -> None:
        self._directory = Path(directory).resolve()
        self._index = index
        self._not_found_page = not_found_page
        self._cache_control = cache_control

    @property
    def directory(self) -> Path:
        return self._directory

    def exists(self, path: str) -> bool:
        """Whether ``path`` resolves to a servable file."""
        return self._resolve(path) is not None

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        method = scope.get("method", "GET")
        if method not in ("GET", "HEAD"):
            await send_response(
                send, 405, b"Method Not Allowed", headers=(("Allow", "GET, HEAD"),)
            )
            return

        path = scope.get("path", "/")
        head = method == "HEAD"

        # Directory without trailing slash: redirect so relative links work
        relative = unquote(path).lstrip("/")
        candidate = self._safe_path(relative)
        if (
            candidate is not None
            and relative
            and not path.endswith("/")
            and candidate.is_dir()
            and (candidate / self._index).is_file()
        ):
            await send_response(send, 301, headers=(("Location", path + "/"),), head=head)
            return

        file_path = self._resolve(path)
        if file_path is not None:
            await self._serve_file(send, file_path, head=head)
            return

        error_page = self._safe_path(self._not_found_page) if self._not_found_page else None
        if error_page is not None and error_page.is_file():
            await self._serve_file(send, error_page, status=404, head=head)
            return

        await send_response(send, 404, b"Not Found", head=head)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _safe_path(self, relative: str) -> Path | None:
        """Resolve ``relative`` inside the directory, or ``None`` if it escapes."""
        file_path = (self._directory / relative).resolve() if relative else self._directory
        if not file_path.is_relative_to(self._directory):
            return None
        return file_path

    def _resolve(self, path: str) -> Path | None:
        file_path = self._safe_path(unquote(path).lstrip("/"))
        if file_path is None:
            return None
        if file_path.is_dir():
            file_path = file_path / self._index
        return file_path if file_path.is_file() else None

    async def _serve_file(
        self, send: Send, file_path: Path, *, status: int = 200, head: bool = False
    ) -> None:
        content_type, _ = mimetypes.guess_type(str(file_path))
        if content_type is None:
            content_type = "application/octet-stream"

        body = await anyio.Path(file_path).read_bytes()
        await send_response(
            send,
            status,
            body,
            content_type=content_type,
            headers=(("Cache-Control", self._cache_control),),
            head=head,
        )
