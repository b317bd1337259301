"""Runtime dispatch in front of the dynamic application."""

from pagewright.runtime.assets import StaticAssets
from pagewright.runtime.dispatcher import Dispatcher, normalize_path
from pagewright.runtime.env import DeploymentEnv, ExecutionContext, RequestContext, get_context
from pagewright.runtime.tasks import TaskEvent, TaskRegistry, run_cron_tasks

__all__ = [
    "DeploymentEnv",
    "Dispatcher",
    "ExecutionContext",
    "RequestContext",
    "StaticAssets",
    "TaskEvent",
    "TaskRegistry",
    "get_context",
    "normalize_path",
    "run_cron_tasks",
]
