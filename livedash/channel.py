"""File-backed progress/status channels.

One writer (the task's background process) and one reader (the dashboard
loop) per file. Writes go to a temp file in the same directory and are then
renamed over the target, so a reader sees either the old value or the new
one, never a partial write. There is no locking and no notification: the
reader polls and the last write wins.
"""

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from .errors import ChannelReadError
from .tasks import TaskDescriptor, TaskStatus

logger = logging.getLogger(__name__)

PROGRESS_MIN = 0
PROGRESS_MAX = 100


@dataclass(frozen=True)
class TaskSnapshot:
    """Progress and status of one task at the time it was read."""

    name: str
    progress: int
    status: TaskStatus


# ---------------------------------------------------------------------------
# Low-level scalar I/O
# ---------------------------------------------------------------------------

def write_scalar(path: Path, value: int) -> None:
    """Atomically replace ``path`` with a bare decimal integer."""
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}_")
    try:
        with os.fdopen(fd, "w") as f:
            f.write(f"{int(value)}\n")
        os.replace(temp_path, path)
    except Exception:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise


def read_scalar(path: Path) -> int:
    """Read a bare decimal integer.

    Raises:
        ChannelReadError: if the file is missing, unreadable or not an integer
    """
    try:
        content = path.read_text()
    except OSError as e:
        raise ChannelReadError(path, str(e)) from e

    try:
        return int(content.strip())
    except ValueError as e:
        raise ChannelReadError(path, f"not an integer: {content.strip()!r}") from e


# ---------------------------------------------------------------------------
# Channel operations
# ---------------------------------------------------------------------------

def clamp_progress(value: int) -> int:
    return max(PROGRESS_MIN, min(PROGRESS_MAX, int(value)))


def write_progress(task: TaskDescriptor, value: int) -> None:
    """Publish a task's progress, clamped into [0, 100]."""
    write_scalar(task.progress_path, clamp_progress(value))


def write_status(task: TaskDescriptor, status: TaskStatus | int) -> None:
    """Publish a task's status."""
    write_scalar(task.status_path, int(TaskStatus(status)))


def read_progress(task: TaskDescriptor) -> int:
    """Latest progress, or 0 if the channel is missing or unreadable."""
    try:
        value = read_scalar(task.progress_path)
    except ChannelReadError as e:
        logger.debug(f"{task.name}: {e}; using 0")
        return PROGRESS_MIN
    return clamp_progress(value)


def read_status(task: TaskDescriptor) -> TaskStatus:
    """Latest status, or NOT_STARTED if the channel is missing or unreadable."""
    try:
        value = read_scalar(task.status_path)
    except ChannelReadError as e:
        logger.debug(f"{task.name}: {e}; using NOT_STARTED")
        return TaskStatus.NOT_STARTED
    return TaskStatus.parse(value)


def read_snapshot(task: TaskDescriptor) -> TaskSnapshot:
    return TaskSnapshot(
        name=task.name,
        progress=read_progress(task),
        status=read_status(task),
    )


def reset_channels(task: TaskDescriptor) -> None:
    """Initialize both channels to 0 (NOT_STARTED, 0%)."""
    write_scalar(task.progress_path, PROGRESS_MIN)
    write_scalar(task.status_path, int(TaskStatus.NOT_STARTED))
