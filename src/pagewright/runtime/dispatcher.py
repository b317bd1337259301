"""Runtime request dispatcher.

The entry point the platform invokes for every request, in front of the
dynamic ASGI application:

- ``websocket`` scopes go to the dedicated upgrade handler when one is
  configured.
- ``http`` scopes go to the environment's static-asset handler when it is
  bound (and, if an ``is_public_asset`` predicate is given, the path is a
  public asset).
- Everything else reaches the application with a normalized path and a
  ``RequestContext`` attached to the scope.

``scheduled()`` is the separate entry point for cron triggers.
"""

import logging
import re
from collections.abc import Callable, Mapping
from typing import Any

from pagewright._internal.asgi import ASGIApp, Receive, Scope, Send
from pagewright.runtime.env import (
    CONTEXT_SCOPE_KEY,
    DeploymentEnv,
    ExecutionContext,
    RequestContext,
)
from pagewright.runtime.tasks import TaskRegistry, run_cron_tasks

logger = logging.getLogger("pagewright.runtime")

_REPEATED_SLASHES = re.compile(r"/{2,}")


def normalize_path(path: str) -> str:
    """Leading slash, no repeated slashes; an empty path becomes ``/``."""
    return _REPEATED_SLASHES.sub("/", "/" + path.lstrip("/"))


class Dispatcher:
    """ASGI application routing each invocation to the right handler.

    Usage::

        dispatcher = Dispatcher(app, env=DeploymentEnv(vars=os.environ))
    """

    __slots__ = ("_app", "_env", "_is_public_asset", "_platform", "_tasks", "_websocket")

    def __init__(
        self,
        app: ASGIApp,
        *,
        env: DeploymentEnv | None = None,
        websocket: ASGIApp | None = None,
        tasks: TaskRegistry | None = None,
        is_public_asset: Callable[[str], bool] | None = None,
        platform: Mapping[str, Any] | None = None,
    ) -> None:
        self._app = app
        self._env = env or DeploymentEnv()
        self._websocket = websocket
        self._tasks = tasks
        self._is_public_asset = is_public_asset
        self._platform = platform or {}

    @property
    def env(self) -> DeploymentEnv:
        return self._env

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        scope_type = scope["type"]

        if scope_type == "websocket" and self._websocket is not None:
            await self._invoke(self._websocket, scope, receive, send)
            return

        if scope_type == "http" and self._serves_asset(scope.get("path", "/")):
            assert self._env.assets is not None
            await self._env.assets(scope, receive, send)
            return

        if scope_type in ("http", "websocket"):
            await self._invoke(self._app, scope, receive, send)
            return

        # lifespan and server-specific scopes belong to the application
        await self._app(scope, receive, send)

    async def scheduled(
        self,
        cron: str,
        *,
        env: DeploymentEnv | None = None,
        payload: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Run the tasks scheduled on ``cron``; a no-op without a registry."""
        if self._tasks is None:
            logger.debug("Scheduled trigger %r ignored: no task registry", cron)
            return {}

        execution = ExecutionContext()
        context = RequestContext(
            env=env or self._env, execution=execution, platform=self._platform
        )
        try:
            return await run_cron_tasks(self._tasks, cron, context=context, payload=payload)
        finally:
            await execution.drain()

    # -- Internal --

    def _serves_asset(self, path: str) -> bool:
        if self._env.assets is None:
            return False
        if self._is_public_asset is None:
            return True
        return self._is_public_asset(path)

    async def _invoke(self, handler: ASGIApp, scope: Scope, receive: Receive, send: Send) -> None:
        execution = ExecutionContext()
        child = dict(scope)
        child["path"] = normalize_path(scope.get("path", "/"))
        child[CONTEXT_SCOPE_KEY] = RequestContext(
            env=self._env, execution=execution, platform=self._platform
        )
        try:
            await handler(child, receive, send)
        finally:
            await execution.drain()
