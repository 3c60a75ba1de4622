"""Shared test fixtures for livedash tests."""

import io
import re
import shutil
import tempfile
from pathlib import Path

import pytest

from livedash.config import DashboardConfig
from livedash.screen import Screen
from livedash.terminal import Terminal

ANSI_RE = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")


def strip_ansi(text: str) -> str:
    """Remove escape sequences, leaving only the printed characters."""
    return ANSI_RE.sub("", text)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    tmp = tempfile.mkdtemp()
    yield Path(tmp)
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def channel_dir(temp_dir, monkeypatch):
    """Point every task channel at a private directory."""
    path = temp_dir / "channels"
    monkeypatch.setenv("LIVEDASH_CHANNEL_DIR", str(path))
    return path


@pytest.fixture
def config_path(temp_dir, monkeypatch):
    """Point the config file at a private location."""
    path = temp_dir / ".livedash.yaml"
    monkeypatch.setenv("LIVEDASH_CONFIG", str(path))
    return path


@pytest.fixture
def stream():
    return io.StringIO()


@pytest.fixture
def terminal(stream):
    """A 24x80, 8-color terminal writing plain ANSI to a StringIO."""
    return Terminal(stream=stream, rows=24, cols=80, colors=8, use_terminfo=False)


@pytest.fixture
def screen(terminal):
    """A screen with default config: 10 reserved rows, 14 log rows."""
    return Screen(terminal=terminal, config=DashboardConfig())


@pytest.fixture
def output(stream):
    """Callable returning everything written so far, escape sequences removed."""
    return lambda: strip_ansi(stream.getvalue())
