"""livedash CLI: configure the dashboard, run demos, run commands as tasks."""

import argparse
import functools
import logging
import random
import shutil
import sys
import time

from . import __version__
from .channel import TaskSnapshot, write_progress, write_status
from .config import get_config_path, get_logs_dir, load_config, save_config
from .errors import ConfigError, LiveDashError
from .session import DashboardSession
from .tasks import TaskDescriptor, TaskStatus

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# The widget showcase stacks everything in the reserved area
DEMO_RESERVED_ROWS = 18
DEMO_WIDGET_ROWS = {
    "spinner": 8,
    "sparkline": 10,
    "toggle": 12,
    "slider": 14,
    "combo_box": 16,
}

HELP_TEXT = """\
livedash widgets

Every widget takes "key=value" strings and/or keyword arguments and
returns True when it rendered, False when it logged an error instead.

  progress_bar  id val [width=40 color=green label=Progress show_percent=true]
                val accepts +N / -N to move relative to the last value.
                Bars stack in the reserved area in first-use order.
  dialog        id title message [buttons=OK width=50 height=10 shadow=true]
                buttons is a comma-separated list; the first is the default.
  spinner       id [style=braille|dots|pipe|clock message=Loading... color=cyan]
                Each call draws the next frame.
  sparkline     id data [width=40 height=8 color=green label=Graph]
                data is a comma-separated list of integers.
  combo_box     id options [selected=0 allow_custom=true width=30 label=Select custom_text=]
  toggle        id [state=off label=Toggle on_color=green off_color=red width=6]
                state true/on/1/yes means on.
  slider        id value [min=0 max=100 label=Slider width=30 color=blue show_value=true]

All widgets except progress_bar accept row=/col= to draw at a fixed spot.

Background tasks:

  with DashboardSession() as dash:
      dash.register_task("Download")
      dash.start_task("Download", download)   # download(task) runs in its own process
      dash.loop()                              # returns when every started task finished

A task reports through its channel files:

  write_progress(task, 40)                # 0-100
  write_status(task, TaskStatus.SUCCESS)  # optional, returning means success

Shell commands get $LIVEDASH_PROGRESS_FILE and $LIVEDASH_STATUS_FILE:

  livedash run "Build=make all" "Test=make test"
"""


def configure_logging(debug: bool = False) -> None:
    """Send log records to .livedash/logs/livedash.log, never the terminal."""
    logs_dir = get_logs_dir()
    logs_dir.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=logs_dir / "livedash.log",
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
    )


def _prompt_number(prompt: str, current: float, integer: bool = False) -> float:
    """Ask for a number; empty input or garbage keeps the current value."""
    answer = input(f"{prompt} [{current}]: ").strip()
    if not answer:
        return current
    try:
        value = int(answer) if integer else float(answer)
    except ValueError:
        kind = "integer" if integer else "number"
        print(f"Invalid {kind}; keeping {current}")
        return current
    if value <= 0:
        print(f"Must be positive; keeping {current}")
        return current
    return value


def parse_task_spec(spec: str) -> tuple[str, str]:
    """Split ``NAME=COMMAND``.

    Raises:
        ValueError: if either side is empty
    """
    name, sep, command = spec.partition("=")
    name, command = name.strip(), command.strip()
    if not sep or not name or not command:
        raise ValueError(f"expected NAME=COMMAND, got {spec!r}")
    return name, command


def print_summary(snapshots: list[TaskSnapshot]) -> None:
    for snapshot in snapshots:
        print(f"  {snapshot.name:<20s}  {snapshot.status.name:<11s}  {snapshot.progress:3d}%")


# ---------------------------------------------------------------------------
# Demo task bodies (run in task processes)
# ---------------------------------------------------------------------------

def simulate_download(task: TaskDescriptor, steps: int = 20, delay: float = 0.15) -> None:
    for step in range(1, steps + 1):
        time.sleep(delay)
        write_progress(task, step * 100 // steps)


def check_disk(task: TaskDescriptor, target_path: str = "/") -> None:
    usage = shutil.disk_usage(target_path)
    used_percent = usage.used * 100 // usage.total
    print(f"{target_path}: {used_percent}% used, {usage.free // (1024 * 1024)} MiB free")
    for value in range(0, 101, 10):
        time.sleep(0.1)
        write_progress(task, value)
    write_status(task, TaskStatus.SUCCESS)


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------

def cmd_setup(args: argparse.Namespace) -> int:
    """Write .livedash.yaml, asking for values unless --non-interactive."""
    path = get_config_path()
    config = load_config(path)

    if not args.non_interactive:
        print("=== livedash setup ===")
        print(f"This creates (or overwrites) {path}")
        print()
        config.refresh_interval = _prompt_number(
            "Dashboard refresh interval in seconds", config.refresh_interval
        )
        config.reserved_rows = int(
            _prompt_number("Rows reserved for the dashboard above logs", config.reserved_rows, integer=True)
        )
        title = input(f"Dashboard title [{config.title}]: ").strip()
        if title:
            config.title = title
        config.validate()

    save_config(config, path)
    print(f"Config written to {path}")
    return 0


def cmd_demo(args: argparse.Namespace) -> int:
    """Widget showcase with simulated data."""
    config = load_config()
    config.reserved_rows = max(config.reserved_rows, DEMO_RESERVED_ROWS)

    with DashboardSession(config=config) as dash:
        run_widget_demo(dash, cycles=args.cycles, interval=args.interval)
    return 0


def run_widget_demo(dash: DashboardSession, cycles: int | None = None, interval: float = 1.0) -> None:
    screen = dash.screen
    dash.log("livedash demonstration started", "cyan")
    dialog_shown = False
    counter = 0

    while cycles is None or counter < cycles:
        if dialog_shown:
            screen.init_reserved_area()
            screen.clear_log_area()
            screen.redraw_log()
            dialog_shown = False

        dash.progress_bar(id="demo1", val=counter % 100, width=45, color="green", label="Processing")
        dash.progress_bar(id="demo2", val=(counter * 2) % 100, width=45, color="blue", label="Network")
        dash.progress_bar(id="demo3", val=(counter * 3) % 100, width=45, color="yellow", label="Storage")

        rows = DEMO_WIDGET_ROWS
        dash.spinner(id="loader", style="braille", message="Loading system data...", row=rows["spinner"], col=2)
        data = ",".join(str(30 + random.randint(0, 39)) for _ in range(25))
        dash.sparkline(id="metrics", data=data, width=50, label="Metrics", row=rows["sparkline"], col=2)
        dash.toggle(
            id="status",
            state="on" if counter % 4 == 0 else "off",
            label="System Active",
            row=rows["toggle"],
            col=2,
        )
        dash.slider(id="threshold", value=40 + counter % 40, label="Threshold", row=rows["slider"], col=2)
        dash.combo_box(
            id="mode",
            options="Auto,Manual,Debug,Custom",
            selected=counter % 3,
            label="Mode",
            row=rows["combo_box"],
            col=2,
        )

        if counter % 30 == 0 and counter > 0:
            dash.dialog(
                id="notification",
                title="System Notification",
                message=f"Demo cycle {counter // 30} completed. All systems operational.",
                buttons="Acknowledge,Dismiss",
            )
            dialog_shown = True

        if counter % 10 == 0:
            dash.log(f"Demo cycle {counter} completed successfully", "green")
        elif counter % 7 == 0:
            dash.log("Performance metrics updated", "blue")
        elif counter % 5 == 0:
            dash.log("Routine system check", "yellow")

        counter += 1
        time.sleep(interval)


def cmd_tasks_demo(args: argparse.Namespace) -> int:
    """Deployment example: download, disk check and service check as background tasks."""
    config = load_config()

    with DashboardSession(config=config, cleanup_channels=True) as dash:
        for name in ("Download", "Disk Check", "Service Status"):
            dash.register_task(name)

        dash.log("Starting deployment checks", "cyan")
        dash.start_task("Download", simulate_download)
        dash.start_task("Disk Check", functools.partial(check_disk, target_path=args.target_path))
        dash.start_command("Service Status", ["systemctl", "is-active", "--quiet", args.service])

        snapshots = dash.loop()
        dash.log("All tasks finished", "green")
        time.sleep(args.linger)

    print_summary(snapshots)
    return 0


def cmd_run(args: argparse.Namespace) -> int:
    """Run shell commands as dashboard tasks; exit 1 unless all succeed."""
    try:
        specs = [parse_task_spec(spec) for spec in args.tasks]
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    config = load_config()
    if args.title:
        config.title = args.title

    with DashboardSession(config=config, cleanup_channels=True) as dash:
        for name, _ in specs:
            dash.register_task(name)
        for name, command in specs:
            pid = dash.start_command(name, command)
            dash.log(f"Started {name} (pid {pid}): {command}", "cyan")
        snapshots = dash.loop()
        time.sleep(args.linger)

    print_summary(snapshots)
    return 0 if all(s.status == TaskStatus.SUCCESS for s in snapshots) else 1


def cmd_help(args: argparse.Namespace) -> int:
    print(HELP_TEXT, end="")
    return 0


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="livedash",
        description="Live terminal dashboard for background tasks",
    )
    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument("--debug", action="store_true", help="Write debug records to the log file")
    sub = parser.add_subparsers(dest="command")

    # setup
    p_setup = sub.add_parser("setup", help="Create .livedash.yaml")
    p_setup.add_argument("--non-interactive", action="store_true", help="Write current values without asking")
    p_setup.set_defaults(func=cmd_setup)

    # demo
    p_demo = sub.add_parser("demo", help="Widget showcase with simulated data")
    p_demo.add_argument("--cycles", type=int, default=None, help="Stop after N cycles (default: until Ctrl-C)")
    p_demo.add_argument("--interval", type=float, default=1.0, help="Seconds between cycles")
    p_demo.set_defaults(func=cmd_demo)

    # tasks-demo
    p_tasks = sub.add_parser("tasks-demo", help="Deployment example with background tasks")
    p_tasks.add_argument("--target-path", default="/", help="Path to check disk usage for")
    p_tasks.add_argument("--service", default="sshd", help="Service to check with systemctl")
    p_tasks.add_argument("--linger", type=float, default=1.0, help="Seconds to keep the final frame")
    p_tasks.set_defaults(func=cmd_tasks_demo)

    # run NAME=COMMAND ...
    p_run = sub.add_parser("run", help="Run shell commands as dashboard tasks")
    p_run.add_argument("tasks", nargs="+", metavar="NAME=COMMAND", help="Task name and shell command")
    p_run.add_argument("--title", help="Dashboard title")
    p_run.add_argument("--linger", type=float, default=1.0, help="Seconds to keep the final frame")
    p_run.set_defaults(func=cmd_run)

    # help
    p_help = sub.add_parser("help", help="Show the widget reference")
    p_help.set_defaults(func=cmd_help)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(0)

    configure_logging(args.debug)

    try:
        code = args.func(args)
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        sys.exit(1)
    except LiveDashError as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if code:
        sys.exit(code)


if __name__ == "__main__":
    main()
