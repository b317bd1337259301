"""Per-deployment environment and per-request context.

The dispatcher hands these to the application explicitly (in the ASGI
scope under ``CONTEXT_SCOPE_KEY``); there is no process-wide "current
environment".
"""

from collections.abc import Awaitable, Mapping
from dataclasses import dataclass, field
from typing import Any

import anyio

from pagewright._internal.asgi import ASGIApp, Scope

CONTEXT_SCOPE_KEY = "pagewright.context"


@dataclass(frozen=True, slots=True)
class DeploymentEnv:
    """Bindings the platform provides to every invocation.

    ``vars`` holds environment variables and secrets; ``assets`` is the
    platform's static-asset handler when one is bound.
    """

    vars: Mapping[str, str] = field(default_factory=dict)
    assets: ASGIApp | None = None


class ExecutionContext:
    """Collects background work that must finish after the response.

    ``wait_until()`` only registers the awaitable; ``drain()`` runs
    everything registered so far concurrently and waits for it.
    """

    __slots__ = ("_pending",)

    def __init__(self) -> None:
        self._pending: list[Awaitable[Any]] = []

    def wait_until(self, awaitable: Awaitable[Any]) -> None:
        self._pending.append(awaitable)

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        while self._pending:
            batch, self._pending = self._pending, []
            async with anyio.create_task_group() as tg:
                for awaitable in batch:
                    tg.start_soon(_await, awaitable)


async def _await(awaitable: Awaitable[Any]) -> None:
    await awaitable


@dataclass(frozen=True, slots=True)
class RequestContext:
    """Everything an invocation may need besides the request itself."""

    env: DeploymentEnv
    execution: ExecutionContext
    platform: Mapping[str, Any] = field(default_factory=dict)

    def wait_until(self, awaitable: Awaitable[Any]) -> None:
        self.execution.wait_until(awaitable)


def get_context(scope: Scope) -> RequestContext:
    """Return the ``RequestContext`` the dispatcher attached to ``scope``.

    Raises:
        LookupError: If the scope did not come through a ``Dispatcher``.
    """
    try:
        return scope[CONTEXT_SCOPE_KEY]
    except KeyError:
        raise LookupError("No pagewright request context in scope") from None
