"""Launch task work in independent background processes.

A started task runs in its own process and talks to the dashboard only
through its channel files. The runner never waits for a task in start()
and never reports a task's result except through the status channel.

Each task process redirects its stdout/stderr to files next to its
channels so nothing it prints can reach the dashboard's terminal::

    <channel_dir>/<stem>.stdout.log
    <channel_dir>/<stem>.stderr.log
"""

import functools
import logging
import multiprocessing
import os
import signal
import subprocess
import sys
from collections.abc import Callable, Sequence
from multiprocessing.process import BaseProcess
from pathlib import Path
from typing import Any

from .channel import read_status, write_progress, write_status
from .errors import TaskStateError
from .log_buffer import LogBufferHandler
from .tasks import TaskDescriptor, TaskStatus

logger = logging.getLogger(__name__)

WorkFn = Callable[[TaskDescriptor], Any]


def get_task_log_paths(task: TaskDescriptor) -> tuple[Path, Path]:
    """Paths of a task's stdout and stderr logs."""
    return task.log_paths


def _mp_context() -> multiprocessing.context.BaseContext:
    """Fork where the platform has it, so any callable can be a task."""
    if "fork" in multiprocessing.get_all_start_methods():
        return multiprocessing.get_context("fork")
    return multiprocessing.get_context()


def _detach_screen_handlers() -> None:
    """Drop handlers that draw to the parent's terminal."""
    for name in ("livedash", ""):
        log = logging.getLogger(name)
        for handler in list(log.handlers):
            if isinstance(handler, LogBufferHandler):
                log.removeHandler(handler)


def _task_main(task: TaskDescriptor, work_fn: WorkFn) -> None:
    """Body of a task process."""
    signal.signal(signal.SIGINT, signal.SIG_DFL)
    signal.signal(signal.SIGTERM, signal.SIG_DFL)
    _detach_screen_handlers()

    stdout_log, stderr_log = get_task_log_paths(task)
    stdout_log.parent.mkdir(parents=True, exist_ok=True)
    sys.stdout = open(stdout_log, "w", buffering=1)
    sys.stderr = open(stderr_log, "w", buffering=1)

    write_status(task, TaskStatus.RUNNING)

    try:
        work_fn(task)
    except Exception:
        logger.exception(f"Task {task.name} raised")
        write_status(task, TaskStatus.FAILED)
        sys.exit(1)

    # A task that returns without reporting an outcome succeeded
    if read_status(task) == TaskStatus.RUNNING:
        write_status(task, TaskStatus.SUCCESS)


def run_command(
    task: TaskDescriptor,
    argv: str | Sequence[str],
    cwd: Path | str | None = None,
    env: dict[str, str] | None = None,
) -> int:
    """Run a shell command as the body of a task.

    The command can report progress by writing an integer to
    $LIVEDASH_PROGRESS_FILE. Exit code 0 means SUCCESS, anything else FAILED.

    Returns:
        The command's exit code
    """
    command_env = dict(os.environ if env is None else env)
    command_env["LIVEDASH_TASK"] = task.name
    command_env["LIVEDASH_PROGRESS_FILE"] = str(task.progress_path)
    command_env["LIVEDASH_STATUS_FILE"] = str(task.status_path)

    sys.stdout.flush()
    sys.stderr.flush()
    result = subprocess.run(
        argv,
        shell=isinstance(argv, str),
        cwd=cwd,
        env=command_env,
        stdout=sys.stdout,
        stderr=sys.stderr,
    )

    if result.returncode == 0:
        write_progress(task, 100)
        write_status(task, TaskStatus.SUCCESS)
    else:
        print(f"exit code {result.returncode}", file=sys.stderr)
        write_status(task, TaskStatus.FAILED)
    return result.returncode


class TaskRunner:
    """Starts tasks and keeps handles to their processes."""

    def __init__(self) -> None:
        self._context = _mp_context()
        self._processes: dict[str, BaseProcess] = {}

    def start(self, task: TaskDescriptor, work_fn: WorkFn) -> int:
        """Launch ``work_fn(task)`` in a background process.

        The process writes RUNNING before calling work_fn. If work_fn raises,
        it writes FAILED; if work_fn returns while the task is still RUNNING,
        it writes SUCCESS.

        Returns:
            PID of the task process

        Raises:
            TaskStateError: if the task was already started by this runner
        """
        if task.name in self._processes:
            raise TaskStateError(f"task already started: {task.name}")

        process = self._context.Process(
            target=_task_main,
            args=(task, work_fn),
            name=f"livedash:{task.name}",
        )
        process.start()
        self._processes[task.name] = process

        logger.debug(f"Task {task.name} started with PID {process.pid}")
        return process.pid

    def start_command(
        self,
        task: TaskDescriptor,
        argv: str | Sequence[str],
        cwd: Path | str | None = None,
        env: dict[str, str] | None = None,
    ) -> int:
        """Launch a shell command as a task. See run_command()."""
        work_fn = functools.partial(run_command, argv=argv, cwd=cwd, env=env)
        return self.start(task, work_fn)

    @property
    def started(self) -> list[str]:
        """Names of launched tasks, in launch order."""
        return list(self._processes)

    def was_started(self, name: str) -> bool:
        return name in self._processes

    def is_alive(self, name: str) -> bool:
        process = self._processes.get(name)
        return process is not None and process.is_alive()

    def exitcode(self, name: str) -> int | None:
        process = self._processes.get(name)
        return process.exitcode if process is not None else None

    def join(self, timeout: float | None = None) -> None:
        """Wait for every task process to exit."""
        for process in self._processes.values():
            process.join(timeout)

    def terminate(self) -> list[str]:
        """Send SIGTERM to task processes that are still running.

        Returns:
            Names of the tasks that were terminated
        """
        terminated = []
        for name, process in self._processes.items():
            if process.is_alive():
                process.terminate()
                terminated.append(name)
        for name in terminated:
            self._processes[name].join(1)
        if terminated:
            logger.warning(f"Terminated running tasks: {', '.join(terminated)}")
        return terminated
