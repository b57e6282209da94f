"""Shared fixtures for zlog tests."""

import io
import json
import os
import subprocess
import sys
import textwrap
from pathlib import Path

import pytest

import zlog

PROJECT_ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture(autouse=True)
def log_buffer():
    """Route records to an in-memory buffer and start from the default policy."""
    buffer = io.StringIO()
    zlog.set_output(buffer)
    zlog.reset_config()
    zlog.clear_context()
    yield buffer
    zlog.set_output("stdout")
    zlog.reset_config()
    zlog.clear_context()


@pytest.fixture
def read_records(log_buffer):
    """Return a callable that parses every record written so far."""

    def read():
        lines = [line for line in log_buffer.getvalue().splitlines() if line.strip()]
        return [json.loads(line) for line in lines]

    return read


@pytest.fixture
def last_record(read_records):
    """Return a callable that parses the most recent record."""

    def read():
        records = read_records()
        assert records, "no log record was written"
        return records[-1]

    return read


@pytest.fixture
def run_script(tmp_path):
    """Return a callable that runs a script as __main__ in a child interpreter."""

    def run(source, name="app.py"):
        script = tmp_path / name
        script.write_text(textwrap.dedent(source), encoding="utf-8")
        env = dict(os.environ)
        env["PYTHONPATH"] = os.pathsep.join(
            path for path in (str(PROJECT_ROOT), env.get("PYTHONPATH")) if path
        )
        return subprocess.run(
            [sys.executable, str(script)],
            capture_output=True,
            text=True,
            env=env,
            timeout=60,
        )

    return run
