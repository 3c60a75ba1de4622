"""Scoped ownership of the terminal for one dashboard run.

Usage::

    with DashboardSession() as dash:
        dash.register_task("Download")
        dash.start_task("Download", download)
        dash.log("Deployment started", "cyan")
        dash.loop()

Entering the session switches to the alternate screen, hides the cursor and
draws the reserved area. Leaving it, whether normally, through an exception
or through SIGINT/SIGTERM, always puts the terminal back.
"""

import logging
import signal
import threading
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from . import widgets
from .channel import TaskSnapshot
from .config import DashboardConfig
from .dashboard import DashboardLoop
from .log_buffer import LogBufferHandler, LogEntry
from .runner import TaskRunner, WorkFn
from .screen import Screen
from .tasks import TaskDescriptor, TaskRegistry
from .terminal import Terminal

logger = logging.getLogger(__name__)

HANDLED_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class SessionInterrupted(SystemExit):
    """Raised from a signal handler so cleanup runs and the process exits 0."""

    def __init__(self, signum: int):
        super().__init__(0)
        self.signum = signum


class DashboardSession:
    """Owns the screen, the task registry and the runner for one run.

    Args:
        config: Dashboard settings (defaults when omitted)
        terminal: Output terminal (probed from stdout when omitted)
        channel_dir: Directory for task channel files
        runner: Task runner (a new one when omitted)
        cleanup_channels: Remove channel files when the session ends
    """

    def __init__(
        self,
        config: DashboardConfig | None = None,
        terminal: Terminal | None = None,
        channel_dir: Path | str | None = None,
        runner: TaskRunner | None = None,
        cleanup_channels: bool = False,
    ):
        self.screen = Screen(terminal=terminal, config=config)
        self.registry = TaskRegistry(channel_dir)
        self.runner = runner or TaskRunner()
        self.cleanup_channels = cleanup_channels
        self.active = False
        self._handler: LogBufferHandler | None = None
        self._previous_handlers: dict[int, Any] = {}

    @property
    def config(self) -> DashboardConfig:
        return self.screen.config

    # -- lifecycle -------------------------------------------------------

    def __enter__(self) -> "DashboardSession":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.stop(abnormal=exc_type is not None)
        return False

    def start(self) -> None:
        terminal = self.screen.terminal
        terminal.enter_alternate_screen()
        # From here on stop() must run, even if start() itself is interrupted
        self.active = True
        try:
            terminal.hide_cursor()
            terminal.clear()
            self.screen.init_reserved_area()

            self._install_signal_handlers()

            self._handler = LogBufferHandler(self.screen.log, fallback=self.screen.log_buffer)
            logging.getLogger("livedash").addHandler(self._handler)
        except BaseException:
            self.stop(abnormal=True)
            raise
        logger.debug("Dashboard session started")

    def stop(self, abnormal: bool = False) -> None:
        """Restore the terminal. Safe to call more than once."""
        if not self.active:
            return
        self.active = False

        if self._handler is not None:
            logging.getLogger("livedash").removeHandler(self._handler)
            self._handler = None

        try:
            if abnormal:
                self.runner.terminate()
            if self.cleanup_channels:
                self.registry.cleanup()
        finally:
            terminal = self.screen.terminal
            terminal.show_cursor()
            terminal.reset_attributes()
            terminal.exit_alternate_screen()
            terminal.flush()
            self._restore_signal_handlers()
            logger.debug(f"Dashboard session ended (abnormal={abnormal})")

    def _install_signal_handlers(self) -> None:
        # signal.signal only works from the main thread
        if threading.current_thread() is not threading.main_thread():
            return
        for signum in HANDLED_SIGNALS:
            self._previous_handlers[signum] = signal.signal(signum, _raise_interrupted)

    def _restore_signal_handlers(self) -> None:
        for signum, previous in self._previous_handlers.items():
            signal.signal(signum, previous)
        self._previous_handlers.clear()

    # -- tasks -----------------------------------------------------------

    def register_task(self, name: str) -> TaskDescriptor:
        return self.registry.register(name)

    def start_task(self, name: str, work_fn: WorkFn) -> int:
        """Run ``work_fn(task)`` for a registered task in the background."""
        return self.runner.start(self.registry.get(name), work_fn)

    def start_command(
        self,
        name: str,
        argv: str | Sequence[str],
        cwd: Path | str | None = None,
        env: dict[str, str] | None = None,
    ) -> int:
        """Run a shell command for a registered task in the background."""
        return self.runner.start_command(self.registry.get(name), argv, cwd=cwd, env=env)

    def loop(self, max_ticks: int | None = None, interval: float | None = None) -> list[TaskSnapshot]:
        """Show task progress until every launched task has finished."""
        dashboard = DashboardLoop(self.screen, self.registry, self.runner, interval=interval)
        return dashboard.run(max_ticks=max_ticks)

    # -- log stream and widgets ------------------------------------------

    def log(self, message: str, color: str = "white") -> LogEntry:
        return self.screen.log(message, color)

    def progress_bar(self, *args: Any, **kwargs: Any) -> bool:
        return widgets.progress_bar(self.screen, *args, **kwargs)

    def dialog(self, *args: Any, **kwargs: Any) -> bool:
        return widgets.dialog(self.screen, *args, **kwargs)

    def spinner(self, *args: Any, **kwargs: Any) -> bool:
        return widgets.spinner(self.screen, *args, **kwargs)

    def sparkline(self, *args: Any, **kwargs: Any) -> bool:
        return widgets.sparkline(self.screen, *args, **kwargs)

    def combo_box(self, *args: Any, **kwargs: Any) -> bool:
        return widgets.combo_box(self.screen, *args, **kwargs)

    def toggle(self, *args: Any, **kwargs: Any) -> bool:
        return widgets.toggle(self.screen, *args, **kwargs)

    def slider(self, *args: Any, **kwargs: Any) -> bool:
        return widgets.slider(self.screen, *args, **kwargs)


def _raise_interrupted(signum: int, frame: object) -> None:
    raise SessionInterrupted(signum)
