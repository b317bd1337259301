"""Scheduled tasks.

Tasks are coroutine functions registered against a cron expression. When
the platform fires a schedule, every task registered for that exact
expression runs concurrently::

    tasks = TaskRegistry()

    @tasks.task("0 * * * *")
    async def purge_cache(event: TaskEvent) -> None:
        ...
"""

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

import anyio

logger = logging.getLogger("pagewright.runtime")


@dataclass(frozen=True, slots=True)
class TaskEvent:
    """Argument passed to every scheduled task."""

    cron: str
    context: Any = None
    payload: Mapping[str, Any] = field(default_factory=dict)


TaskFunc = Callable[[TaskEvent], Awaitable[Any]]


class TaskRegistry:
    """Maps cron expressions to the tasks scheduled on them."""

    __slots__ = ("_tasks",)

    def __init__(self) -> None:
        self._tasks: dict[str, dict[str, TaskFunc]] = {}

    def task(self, cron: str, *, name: str | None = None) -> Callable[[TaskFunc], TaskFunc]:
        """Register the decorated coroutine function under ``cron``."""

        def decorator(func: TaskFunc) -> TaskFunc:
            self.add(cron, func, name=name)
            return func

        return decorator

    def add(self, cron: str, func: TaskFunc, *, name: str | None = None) -> None:
        task_name = name or getattr(func, "__name__", repr(func))
        scheduled = self._tasks.setdefault(cron, {})
        if task_name in scheduled:
            raise ValueError(f"Task {task_name!r} is already scheduled on {cron!r}")
        scheduled[task_name] = func

    def for_cron(self, cron: str) -> dict[str, TaskFunc]:
        return dict(self._tasks.get(cron, {}))

    @property
    def schedules(self) -> tuple[str, ...]:
        return tuple(self._tasks)

    def __len__(self) -> int:
        return sum(len(tasks) for tasks in self._tasks.values())


async def run_cron_tasks(
    registry: TaskRegistry,
    cron: str,
    *,
    context: Any = None,
    payload: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Run every task registered for ``cron``; return results by task name.

    A failing task cancels its siblings and the error propagates.
    """
    tasks = registry.for_cron(cron)
    if not tasks:
        logger.info("No tasks scheduled for %r", cron)
        return {}

    event = TaskEvent(cron=cron, context=context, payload=payload or {})
    results: dict[str, Any] = {}

    async def run_one(task_name: str, func: TaskFunc) -> None:
        results[task_name] = await func(event)

    async with anyio.create_task_group() as tg:
        for task_name, func in tasks.items():
            tg.start_soon(run_one, task_name, func)

    logger.info("Ran %d task(s) for %r", len(results), cron)
    return {task_name: results[task_name] for task_name in tasks}
