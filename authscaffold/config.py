"""authscaffold configuration.

Typed settings for a single scaffolding run. All settings use Pydantic v2
models so they are validated at construction time and can be built from
environment variables or CLI flags without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator


_TRUTHY = {"1", "true", "yes", "on"}


def _split_csv(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


class Config(BaseModel):
    """Settings for one ``authscaffold`` run.

    Instances are created once by the CLI entry point (or by tests) and then
    passed to ``SetupPipeline`` and ``FileGenerator``.
    """

    target_dir: Path = Field(default=Path("."), description="Root of the Next.js project")
    providers: list[str] = Field(
        default_factory=list,
        description="Preselected provider ids; empty means prompt interactively",
    )
    skip_install: bool = Field(default=False, description="Never run the package manager")
    install_timeout: int | None = Field(
        default=None, ge=1, description="Install timeout in seconds (None waits forever)"
    )
    source_extension: str = Field(default="ts", description="Extension for generated .ts files")
    protected_routes: list[str] = Field(
        default_factory=lambda: ["/dashboard", "/profile"],
        description="Route prefixes the generated middleware protects",
    )
    env_file_name: str = Field(default=".env.local.example")
    dev_server_url: str = Field(default="http://localhost:3000")

    @field_validator("source_extension")
    @classmethod
    def _strip_dot(cls, value: str) -> str:
        value = value.lstrip(".")
        if not value:
            raise ValueError("source_extension must not be empty")
        return value

    @field_validator("protected_routes")
    @classmethod
    def _normalise_routes(cls, routes: list[str]) -> list[str]:
        normalised = []
        for route in routes:
            route = "/" + route.strip().strip("/")
            if route not in normalised:
                normalised.append(route)
        return normalised

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def target_path(self) -> Path:
        """Absolute path of the target root."""
        return Path(self.target_dir).resolve()

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            AUTHSCAFFOLD_TARGET_DIR, AUTHSCAFFOLD_PROVIDERS,
            AUTHSCAFFOLD_SKIP_INSTALL, AUTHSCAFFOLD_INSTALL_TIMEOUT,
            AUTHSCAFFOLD_PROTECTED_ROUTES.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("AUTHSCAFFOLD_TARGET_DIR"):
            kwargs["target_dir"] = Path(os.environ["AUTHSCAFFOLD_TARGET_DIR"])
        if os.environ.get("AUTHSCAFFOLD_PROVIDERS"):
            kwargs["providers"] = _split_csv(os.environ["AUTHSCAFFOLD_PROVIDERS"])
        if os.environ.get("AUTHSCAFFOLD_SKIP_INSTALL"):
            kwargs["skip_install"] = (
                os.environ["AUTHSCAFFOLD_SKIP_INSTALL"].strip().lower() in _TRUTHY
            )
        if os.environ.get("AUTHSCAFFOLD_INSTALL_TIMEOUT"):
            kwargs["install_timeout"] = int(os.environ["AUTHSCAFFOLD_INSTALL_TIMEOUT"])
        if os.environ.get("AUTHSCAFFOLD_PROTECTED_ROUTES"):
            kwargs["protected_routes"] = _split_csv(os.environ["AUTHSCAFFOLD_PROTECTED_ROUTES"])
        return cls(**kwargs)
