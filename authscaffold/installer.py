"""Installation of ``next-auth`` through the project's package manager.

This is the only place authscaffold spawns a process. The pipeline takes
``install_dependency`` as a parameter so tests can replace it.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel

from .detector import AUTH_LIBRARY, PackageManager
from .utils import run_command

INSTALL_COMMANDS: dict[PackageManager, tuple[str, ...]] = {
    PackageManager.BUN: ("bun", "add", AUTH_LIBRARY),
    PackageManager.PNPM: ("pnpm", "add", AUTH_LIBRARY),
    PackageManager.YARN: ("yarn", "add", AUTH_LIBRARY),
    PackageManager.NPM: ("npm", "install", AUTH_LIBRARY),
}

RUN_DEV_COMMANDS: dict[PackageManager, str] = {
    PackageManager.BUN: "bun run dev",
    PackageManager.PNPM: "pnpm dev",
    PackageManager.YARN: "yarn dev",
    PackageManager.NPM: "npm run dev",
}


class InstallResult(BaseModel):
    """Outcome of one install attempt."""

    manager: PackageManager
    command: str
    returncode: int
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def install_command(manager: PackageManager) -> str:
    return " ".join(INSTALL_COMMANDS[manager])


async def install_dependency(
    manager: PackageManager,
    cwd: str | Path,
    timeout: int | None = None,
) -> InstallResult:
    """Install ``next-auth`` with *manager* in *cwd*.

    Output is streamed straight to the terminal. A package manager that is
    not on ``PATH`` gives a failed result instead of an exception.
    """
    cmd = list(INSTALL_COMMANDS[manager])
    try:
        returncode, message = await run_command(cmd, cwd=cwd, timeout=timeout)
    except FileNotFoundError:
        return InstallResult(
            manager=manager,
            command=install_command(manager),
            returncode=127,
            message=f"{cmd[0]}: command not found",
        )
    return InstallResult(
        manager=manager,
        command=install_command(manager),
        returncode=returncode,
        message=message,
    )
