"""Shared pytest fixtures for the authscaffold test suite.

Provides reusable fixtures for:
- Temporary Next.js projects (with and without ``src/``)
- Package manifests
- A stub installer that records calls instead of spawning processes
"""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from authscaffold.config import Config
from authscaffold.detector import PackageManager
from authscaffold.installer import InstallResult, install_command


# ---------------------------------------------------------------------------
# Project builders
# ---------------------------------------------------------------------------

def write_manifest(root: Path, **sections: dict[str, str]) -> Path:
    """Write a ``package.json`` with the given dependency sections."""
    manifest = root / "package.json"
    data: dict[str, Any] = {"name": root.name, "version": "0.1.0", **sections}
    manifest.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return manifest


@pytest.fixture
def make_next_project(tmp_path: Path) -> Callable[..., Path]:
    """Factory for Next.js projects under ``tmp_path``.

    Usage::

        root = make_next_project(src=True, next_auth=False)
    """

    def _make(
        name: str = "next-app",
        *,
        src: bool = True,
        app_dir: bool = True,
        next_auth: bool = False,
    ) -> Path:
        root = tmp_path / name
        root.mkdir()
        deps = {"next": "15.0.0", "react": "19.0.0"}
        if next_auth:
            deps["next-auth"] = "5.0.0-beta.25"
        write_manifest(root, dependencies=deps)
        base = root / "src" if src else root
        if app_dir:
            (base / "app").mkdir(parents=True)
        elif src:
            base.mkdir()
        return root

    return _make


@pytest.fixture
def src_project(make_next_project) -> Path:
    """Next.js project using ``src/app``, without next-auth installed."""
    return make_next_project(src=True)


@pytest.fixture
def root_project(make_next_project) -> Path:
    """Next.js project using a top-level ``app/``."""
    return make_next_project(src=False)


@pytest.fixture
def config_for() -> Callable[..., Config]:
    """Build a ``Config`` for a project root with the install step disabled."""

    def _config(root: Path, providers: list[str] | None = None, **kwargs: Any) -> Config:
        kwargs.setdefault("skip_install", True)
        return Config(target_dir=root, providers=providers or [], **kwargs)

    return _config


# ---------------------------------------------------------------------------
# Stub installer
# ---------------------------------------------------------------------------

class StubInstaller:
    """Records install requests and returns a canned result."""

    def __init__(self, returncode: int = 0, message: str = "") -> None:
        self.returncode = returncode
        self.message = message
        self.calls: list[tuple[PackageManager, Path, int | None]] = []

    async def __call__(
        self, manager: PackageManager, cwd: Path, timeout: int | None = None
    ) -> InstallResult:
        self.calls.append((manager, cwd, timeout))
        return InstallResult(
            manager=manager,
            command=install_command(manager),
            returncode=self.returncode,
            message=self.message,
        )


@pytest.fixture
def stub_installer() -> StubInstaller:
    return StubInstaller()


@pytest.fixture
def failing_installer() -> StubInstaller:
    return StubInstaller(returncode=1, message="network unreachable")


@pytest.fixture
def manifest_writer() -> Callable[..., Path]:
    """``write_manifest`` as a fixture for tests that build their own roots."""
    return write_manifest
