"""livedash - live terminal dashboard for background tasks."""

__version__ = "0.1.0"

from .channel import TaskSnapshot, read_snapshot, write_progress, write_status  # noqa: E402
from .config import DashboardConfig, load_config  # noqa: E402
from .dashboard import DashboardLoop, LoopState  # noqa: E402
from .screen import Screen  # noqa: E402
from .session import DashboardSession, SessionInterrupted  # noqa: E402
from .tasks import TaskDescriptor, TaskRegistry, TaskStatus  # noqa: E402

__all__ = [
    "DashboardConfig",
    "DashboardLoop",
    "DashboardSession",
    "LoopState",
    "Screen",
    "SessionInterrupted",
    "TaskDescriptor",
    "TaskRegistry",
    "TaskSnapshot",
    "TaskStatus",
    "load_config",
    "read_snapshot",
    "write_progress",
    "write_status",
]
