"""Integration test for Ctrl-C at the interactive provider prompt.

Runs ``python -m authscaffold`` as a child process and delivers a real
SIGINT while it waits for input, so the signal takes the same path it does
in a terminal.
"""

from __future__ import annotations

import os
import select
import signal
import subprocess
import sys
import time
from pathlib import Path

import pytest


pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(sys.platform == "win32", reason="needs POSIX signals"),
]

REPO_ROOT = Path(__file__).resolve().parents[2]
PROMPT_TEXT = "Select providers"


def _read_until(proc: subprocess.Popen, marker: str, timeout: float) -> str:
    """Read the child's stdout until *marker* shows up."""
    deadline = time.monotonic() + timeout
    output = ""
    fd = proc.stdout.fileno()
    while marker not in output:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise AssertionError(f"{marker!r} never appeared; output so far:\n{output}")
        ready, _, _ = select.select([fd], [], [], remaining)
        if not ready:
            continue
        chunk = os.read(fd, 4096)
        if not chunk:
            raise AssertionError(f"process exited before {marker!r}; output:\n{output}")
        output += chunk.decode("utf-8", errors="replace")
    return output


def _child_env() -> dict[str, str]:
    env = {k: v for k, v in os.environ.items() if not k.startswith("AUTHSCAFFOLD_")}
    env["PYTHONUNBUFFERED"] = "1"
    env["PYTHONPATH"] = os.pathsep.join(
        p for p in (str(REPO_ROOT), env.get("PYTHONPATH", "")) if p
    )
    return env


def test_sigint_at_prompt_exits_cleanly(src_project: Path):
    proc = subprocess.Popen(
        [sys.executable, "-m", "authscaffold", "--dir", str(src_project), "--skip-install"],
        stdin=subprocess.PIPE,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        env=_child_env(),
    )
    try:
        output = _read_until(proc, PROMPT_TEXT, timeout=30)
        # Let the child reach the blocking read after printing the prompt.
        time.sleep(0.5)
        proc.send_signal(signal.SIGINT)
        remaining, _ = proc.communicate(timeout=10)
    finally:
        if proc.poll() is None:
            proc.kill()
            proc.wait()

    output += remaining.decode("utf-8", errors="replace")
    assert proc.returncode == 0, output
    assert "Traceback" not in output
    assert "Setup cancelled" in output
    written = {p for p in src_project.rglob("*") if p.is_file() and p.name != "package.json"}
    assert written == set()
