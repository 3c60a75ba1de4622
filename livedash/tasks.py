"""Task descriptors, lifecycle states and the task registry.

Each registered task owns two channel files under the channel directory::

    <channel_dir>/<stem>.progress   # 0-100
    <channel_dir>/<stem>.status     # 0 not started, 1 running, 2 success, 3 failed

where ``stem`` is the task name with anything other than letters, digits,
``-`` and ``.`` replaced by ``_``.
"""

import re
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Iterator

from .config import get_channel_dir
from .errors import DuplicateTaskError, UnknownTaskError

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9.\-]")


class TaskStatus(IntEnum):
    """Task lifecycle state, encoded on the wire as its integer value."""

    NOT_STARTED = 0
    RUNNING = 1
    SUCCESS = 2
    FAILED = 3

    @property
    def is_terminal(self) -> bool:
        return self in (TaskStatus.SUCCESS, TaskStatus.FAILED)

    @classmethod
    def parse(cls, text: str | int | None) -> "TaskStatus":
        """Decode a wire value; anything unparseable is NOT_STARTED."""
        try:
            return cls(int(str(text).strip()))
        except (TypeError, ValueError):
            return cls.NOT_STARTED


_LEGAL_TRANSITIONS = {
    TaskStatus.NOT_STARTED: {TaskStatus.RUNNING},
    TaskStatus.RUNNING: {TaskStatus.SUCCESS, TaskStatus.FAILED},
    TaskStatus.SUCCESS: set(),
    TaskStatus.FAILED: set(),
}


def is_legal_transition(old: TaskStatus, new: TaskStatus) -> bool:
    """True if a task may move from ``old`` to ``new``.

    Re-reading the same state is always legal.
    """
    return old == new or new in _LEGAL_TRANSITIONS[old]


@dataclass(frozen=True)
class TaskDescriptor:
    """A registered unit of work and its channel locations."""

    name: str
    order: int
    progress_path: Path
    status_path: Path

    @property
    def stem(self) -> str:
        return self.progress_path.stem

    @property
    def log_paths(self) -> tuple[Path, Path]:
        """(stdout_log, stderr_log) written by the task's process."""
        base = self.progress_path.parent
        return base / f"{self.stem}.stdout.log", base / f"{self.stem}.stderr.log"


def channel_stem(name: str) -> str:
    """Normalize a task name into a file-name stem (spaces -> underscores)."""
    return _UNSAFE_CHARS.sub("_", name)


def channel_paths(name: str, channel_dir: Path | str | None = None) -> tuple[Path, Path]:
    """Derive (progress_path, status_path) for a task name.

    Deterministic, so separate processes using the same name and channel
    directory resolve the same files.
    """
    base = Path(channel_dir) if channel_dir is not None else get_channel_dir()
    stem = channel_stem(name)
    return base / f"{stem}.progress", base / f"{stem}.status"


class TaskRegistry:
    """Ordered collection of task descriptors.

    Display order is registration order.

    Args:
        channel_dir: Directory for channel files (defaults to get_channel_dir())
    """

    def __init__(self, channel_dir: Path | str | None = None):
        self.channel_dir = Path(channel_dir) if channel_dir is not None else get_channel_dir()
        self._tasks: dict[str, TaskDescriptor] = {}
        self._stems: dict[str, str] = {}

    def register(self, name: str) -> TaskDescriptor:
        """Register a task and reset its channels to 0.

        Raises:
            DuplicateTaskError: if the name, or its derived channel paths,
                are already taken
        """
        if name in self._tasks:
            raise DuplicateTaskError(name)

        stem = channel_stem(name)
        if stem in self._stems:
            raise DuplicateTaskError(name, existing=self._stems[stem])

        progress_path, status_path = channel_paths(name, self.channel_dir)
        descriptor = TaskDescriptor(
            name=name,
            order=len(self._tasks),
            progress_path=progress_path,
            status_path=status_path,
        )

        # Imported here: channel depends on this module for TaskStatus
        from .channel import reset_channels
        reset_channels(descriptor)

        self._tasks[name] = descriptor
        self._stems[stem] = name
        return descriptor

    def get(self, name: str) -> TaskDescriptor:
        """Look up a registered task.

        Raises:
            UnknownTaskError: if the name was never registered
        """
        try:
            return self._tasks[name]
        except KeyError:
            raise UnknownTaskError(name) from None

    def names(self) -> list[str]:
        return list(self._tasks)

    def cleanup(self) -> None:
        """Remove every task's channel files and process logs."""
        for task in self._tasks.values():
            for path in (task.progress_path, task.status_path, *task.log_paths):
                try:
                    path.unlink()
                except FileNotFoundError:
                    pass

    def __contains__(self, name: object) -> bool:
        return name in self._tasks

    def __iter__(self) -> Iterator[TaskDescriptor]:
        return iter(self._tasks.values())

    def __len__(self) -> int:
        return len(self._tasks)
