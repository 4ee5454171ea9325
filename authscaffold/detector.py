"""Next.js project detection.

Inspects a target directory and derives the path conventions the generator
writes into: whether application code lives under ``src/``, whether the App
Router is in use, and where components and middleware belong.  Also answers
the manifest questions the pipeline gates on (is this a Next.js project, is
``next-auth`` already installed) and finds the package manager from lock
files.
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from .utils import load_json

MANIFEST_NAME = "package.json"
HOST_FRAMEWORK = "next"
AUTH_LIBRARY = "next-auth"


class PackageManager(str, Enum):
    """JavaScript package managers recognised by lock file."""

    BUN = "bun"
    PNPM = "pnpm"
    YARN = "yarn"
    NPM = "npm"


# Checked per directory, in this order. First match wins.
LOCK_FILES: tuple[tuple[PackageManager, tuple[str, ...]], ...] = (
    (PackageManager.BUN, ("bun.lock", "bun.lockb")),
    (PackageManager.PNPM, ("pnpm-lock.yaml",)),
    (PackageManager.YARN, ("yarn.lock",)),
    (PackageManager.NPM, ("package-lock.json",)),
)

DEFAULT_PACKAGE_MANAGER = PackageManager.NPM


class ProjectStructure(BaseModel):
    """Path conventions of a target project, computed once per run."""

    model_config = ConfigDict(frozen=True)

    has_src_dir: bool
    has_app_dir: bool
    root_path: Path
    base_path: Path
    app_path: Path
    components_path: Path
    middleware_path: Path
    source_extension: str = "ts"

    @property
    def auth_config_path(self) -> Path:
        """``auth.<ext>`` sits next to the middleware, which imports ``./auth``."""
        return self.base_path / f"auth.{self.source_extension}"


def detect_project_structure(root: str | Path, ext: str = "ts") -> ProjectStructure:
    """Detect the layout of the project at *root*.

    Missing directories are not errors; they simply produce ``False`` flags
    and paths that the generator will create.
    """
    root_path = Path(root)
    has_src_dir = (root_path / "src").exists()
    base_path = root_path / "src" if has_src_dir else root_path
    app_path = base_path / "app"

    return ProjectStructure(
        has_src_dir=has_src_dir,
        has_app_dir=app_path.exists(),
        root_path=root_path,
        base_path=base_path,
        app_path=app_path,
        components_path=root_path / "components",
        middleware_path=base_path / f"middleware.{ext}",
        source_extension=ext,
    )


# ---------------------------------------------------------------------------
# Manifest checks
# ---------------------------------------------------------------------------


def _declares_dependency(root: str | Path, package: str) -> bool:
    manifest = Path(root) / MANIFEST_NAME
    if not manifest.is_file():
        return False

    try:
        data = load_json(manifest)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return False

    for section in ("dependencies", "devDependencies"):
        deps = data.get(section)
        if isinstance(deps, dict) and deps.get(package):
            return True
    return False


def is_eligible_project(root: str | Path) -> bool:
    """Return ``True`` if *root* has a ``package.json`` declaring ``next``.

    A malformed manifest makes the project ineligible rather than raising.
    """
    return _declares_dependency(root, HOST_FRAMEWORK)


def has_auth_library_installed(root: str | Path) -> bool:
    """Return ``True`` if ``next-auth`` is already a (dev) dependency."""
    return _declares_dependency(root, AUTH_LIBRARY)


# ---------------------------------------------------------------------------
# Package manager detection
# ---------------------------------------------------------------------------


def detect_package_manager(start: str | Path) -> PackageManager:
    """Find the package manager by walking up from *start*.

    Each directory from *start* to the filesystem root is checked for the
    lock files in ``LOCK_FILES`` order, so the nearest directory with any
    lock file decides. Falls back to npm.
    """
    directory = Path(start).resolve()
    for candidate in (directory, *directory.parents):
        for manager, lock_names in LOCK_FILES:
            if any((candidate / name).exists() for name in lock_names):
                return manager
    return DEFAULT_PACKAGE_MANAGER
