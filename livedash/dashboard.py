"""The dashboard loop: poll task channels, repaint the reserved area, decide when to stop.

The reserved area looks like::

    ---- Deployment Dashboard ----
     Download              [ 75%] ⠹
     Disk Check            [100%] ✓
     Service Status        [  0%] ✗
    ── Log output below: ───────────────

The loop is the only reader of the channels. It never writes them; a task
whose process died without reporting a result is shown as failed but its
channel is left as the task last wrote it.
"""

import logging
import time
from collections.abc import Callable
from enum import Enum

from .channel import TaskSnapshot, read_snapshot
from .runner import TaskRunner
from .screen import Screen
from .tasks import TaskDescriptor, TaskRegistry, TaskStatus, is_legal_transition
from .widgets.base import truncate
from .widgets.spinner import spinner_frames

logger = logging.getLogger(__name__)

NAME_WIDTH = 20
SEPARATOR_LABEL = "Log output below:"

STATUS_COLORS = {
    TaskStatus.NOT_STARTED: "grey",
    TaskStatus.RUNNING: "bg_yellow",
    TaskStatus.SUCCESS: "bg_green",
    TaskStatus.FAILED: "bg_red",
}

STATUS_INDICATORS = {
    TaskStatus.NOT_STARTED: "·",
    TaskStatus.SUCCESS: "✓",
    TaskStatus.FAILED: "✗",
}


class LoopState(Enum):
    ACTIVE = "active"
    DONE = "done"


def task_state_id(name: str) -> str:
    """State-store id for a task row's spinner."""
    return f"task:{name}"


def format_task_row(screen: Screen, snapshot: TaskSnapshot, indicator: str) -> str:
    """One dashboard row: colored badge, padded name, percentage, indicator."""
    color = screen.color(STATUS_COLORS[snapshot.status])
    name = snapshot.name[:NAME_WIDTH]
    return f"{color} {name:<{NAME_WIDTH}} {screen.reset} [{snapshot.progress:3d}%] {indicator}"


class DashboardLoop:
    """Repaints task rows until every task has finished.

    Termination: the loop is done when no task is RUNNING and every task the
    runner launched has been seen past NOT_STARTED. Tasks that were
    registered but never launched do not hold the loop open.

    Args:
        screen: Rendering authority
        registry: Tasks to display, in registration order
        runner: Runner that launched the tasks (enables lost-task detection
            and waiting for tasks that have not reported RUNNING yet)
        interval: Seconds between ticks (defaults to config.refresh_interval)
        sleep: Sleep function, injectable for tests
    """

    def __init__(
        self,
        screen: Screen,
        registry: TaskRegistry,
        runner: TaskRunner | None = None,
        interval: float | None = None,
        sleep: Callable[[float], object] = time.sleep,
    ):
        self.screen = screen
        self.registry = registry
        self.runner = runner
        self.interval = interval if interval is not None else screen.config.refresh_interval
        self._sleep = sleep
        self.ticks = 0
        self.violations: list[tuple[str, TaskStatus, TaskStatus]] = []
        self._observed: set[str] = set()
        self._last_status: dict[str, TaskStatus] = {}
        self._lost: set[str] = set()
        self._overflow_warned = False

    # -- reading ---------------------------------------------------------

    def snapshots(self) -> list[TaskSnapshot]:
        """Current effective state of every task, in registration order."""
        return [self._read(task) for task in self.registry]

    def _read(self, task: TaskDescriptor) -> TaskSnapshot:
        # Check liveness before reading: a task that wrote its result and
        # exited in between must not look lost
        exited = (
            self.runner is not None
            and self.runner.was_started(task.name)
            and not self.runner.is_alive(task.name)
        )
        snapshot = read_snapshot(task)

        if exited and not snapshot.status.is_terminal:
            if task.name not in self._lost:
                self._lost.add(task.name)
                code = self.runner.exitcode(task.name)
                logger.debug(f"Task {task.name} lost (exit code {code}, status {snapshot.status.name})")
                self.screen.log(
                    f"Task {task.name} exited without reporting a result (exit code {code})",
                    "red",
                )
            snapshot = TaskSnapshot(task.name, snapshot.progress, TaskStatus.FAILED)

        self._observe(snapshot)
        return snapshot

    def _observe(self, snapshot: TaskSnapshot) -> None:
        previous = self._last_status.get(snapshot.name, TaskStatus.NOT_STARTED)
        if snapshot.name not in self._lost and not is_legal_transition(previous, snapshot.status):
            self.violations.append((snapshot.name, previous, snapshot.status))
            logger.debug(
                f"Task {snapshot.name} went {previous.name} -> {snapshot.status.name}"
            )
        self._last_status[snapshot.name] = snapshot.status
        if snapshot.status != TaskStatus.NOT_STARTED:
            self._observed.add(snapshot.name)

    # -- drawing ---------------------------------------------------------

    def indicator(self, snapshot: TaskSnapshot) -> str:
        """Spinner frame for running tasks, a fixed mark otherwise."""
        if snapshot.status != TaskStatus.RUNNING:
            return STATUS_INDICATORS[snapshot.status]

        frames = spinner_frames("braille")
        state_id = task_state_id(snapshot.name)
        frame = self.screen.state.get(state_id, "frame", 0)
        if self.screen.config.enable_animations:
            self.screen.state.set(state_id, "frame", (frame + 1) % len(frames))
        return self.screen.color("cyan") + frames[frame % len(frames)] + self.screen.reset

    def draw(self, snapshots: list[TaskSnapshot] | None = None) -> None:
        """Repaint the whole reserved area."""
        screen = self.screen
        layout = screen.layout
        if snapshots is None:
            snapshots = self.snapshots()

        screen.goto(layout.reserved_slot_row(0), 1)
        screen.terminal.clear_line()
        heading = truncate(f"---- {screen.config.title} ----", layout.cols)
        screen.write(f"{screen.color('bold')}{heading}{screen.reset}")

        for index, snapshot in enumerate(snapshots):
            row = layout.reserved_slot_row(0) + 1 + index
            if row >= layout.separator_row:
                if not self._overflow_warned:
                    self._overflow_warned = True
                    hidden = len(snapshots) - index
                    screen.log(
                        f"Warning: {hidden} task(s) do not fit the reserved area; "
                        f"raise reserved_rows to see them",
                        "yellow",
                    )
                break
            screen.goto(row, 1)
            screen.terminal.clear_line()
            screen.write(format_task_row(screen, snapshot, self.indicator(snapshot)))

        screen.draw_separator(SEPARATOR_LABEL)
        screen.flush()

    # -- termination -----------------------------------------------------

    def is_done(self, snapshots: list[TaskSnapshot] | None = None) -> bool:
        if snapshots is None:
            snapshots = self.snapshots()
        if any(s.status == TaskStatus.RUNNING for s in snapshots):
            return False
        if self.runner is None:
            return True
        launched = [name for name in self.runner.started if name in self.registry]
        return all(name in self._observed for name in launched)

    def tick(self) -> LoopState:
        """Draw, sleep one interval, then check whether the loop is finished."""
        self.draw(self.snapshots())
        self._sleep(self.interval)
        self.ticks += 1
        return LoopState.DONE if self.is_done() else LoopState.ACTIVE

    def run(self, max_ticks: int | None = None) -> list[TaskSnapshot]:
        """Tick until done (or ``max_ticks``), then draw the final frame.

        Returns:
            Final snapshots in registration order
        """
        logger.debug(f"Dashboard loop started with {len(self.registry)} task(s)")
        while max_ticks is None or self.ticks < max_ticks:
            if self.tick() == LoopState.DONE:
                break

        final = self.snapshots()
        self.draw(final)
        summary = ", ".join(f"{s.name}={s.status.name}" for s in final)
        logger.debug(f"Dashboard loop finished after {self.ticks} tick(s): {summary}")
        return final
