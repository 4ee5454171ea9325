"""Auth boilerplate generator.

Takes a detected ``ProjectStructure`` and the selected providers and writes
the seven artifacts (auth config, middleware, API route, session provider,
login button, user profile, env template).  Every write is guarded: a file
that already exists is never touched, and a failure on one artifact is
recorded without stopping the others.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from enum import Enum
from pathlib import Path
from typing import Any

from jinja2 import TemplateError
from pydantic import BaseModel, Field

from ..config import Config
from ..detector import ProjectStructure
from ..providers import ProviderConfig, ProviderId
from .templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Result models
# ---------------------------------------------------------------------------


class GenerationStatus(str, Enum):
    CREATED = "created"
    SKIPPED = "skipped"
    ERROR = "error"


class GenerationResult(BaseModel):
    """Outcome of generating a single artifact."""

    label: str
    path: Path
    status: GenerationStatus
    error: str | None = None


class GenerationSummary(BaseModel):
    """Ordered results of one ``generate_all`` call."""

    results: list[GenerationResult] = Field(default_factory=list)

    def _count(self, status: GenerationStatus) -> int:
        return sum(1 for r in self.results if r.status is status)

    @property
    def created(self) -> int:
        return self._count(GenerationStatus.CREATED)

    @property
    def skipped(self) -> int:
        return self._count(GenerationStatus.SKIPPED)

    @property
    def errors(self) -> int:
        return self._count(GenerationStatus.ERROR)

    @property
    def outcome(self) -> str:
        """``success``, ``partial`` or ``failure``."""
        if self.errors == 0:
            return "success"
        if self.errors == len(self.results):
            return "failure"
        return "partial"


# ---------------------------------------------------------------------------
# Content rules
# ---------------------------------------------------------------------------


GENERIC_SIGN_IN_LABEL = "Sign in"


def sign_in_trigger(providers: Sequence[ProviderConfig]) -> tuple[str, str]:
    """Return the ``(call, label)`` pair for the login button.

    Several OAuth providers, or credentials mixed with anything else, need
    the provider-agnostic ``signIn()`` which opens the Auth.js sign-in page.
    A single provider is called directly by id.
    """
    oauth_count = sum(1 for p in providers if p.is_oauth)
    has_credentials = any(p.id is ProviderId.CREDENTIALS for p in providers)

    if oauth_count > 1 or (has_credentials and len(providers) > 1):
        return "signIn()", GENERIC_SIGN_IN_LABEL

    provider = providers[0]
    return f'signIn("{provider.id.value}")', f"Sign in with {provider.name}"


def middleware_matchers(routes: Sequence[str]) -> list[str]:
    """``/dashboard`` -> ``/dashboard/:path*``."""
    return [f"{route.rstrip('/')}/:path*" for route in routes]


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class FileGenerator:
    """Renders and writes the auth artifacts for one project.

    The generator never overwrites: running it twice leaves the files from
    the first run untouched and reports them as skipped.
    """

    def __init__(
        self,
        structure: ProjectStructure,
        providers: Sequence[ProviderConfig],
        config: Config | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        if not providers:
            raise ValueError("FileGenerator needs at least one provider")
        self.structure = structure
        self.providers = list(providers)
        self.config = config or Config(target_dir=structure.root_path)
        self.renderer = renderer or TemplateRenderer()

    # -- Public API --------------------------------------------------------

    async def generate_all(self) -> GenerationSummary:
        """Generate every artifact in fixed order and collect the outcomes."""
        steps = (
            self.generate_auth_config,
            self.generate_middleware,
            self.generate_auth_route,
            self.generate_session_provider,
            self.generate_login_button,
            self.generate_user_profile,
            self.generate_env_example,
        )
        summary = GenerationSummary()
        for step in steps:
            summary.results.append(await step())
        return summary

    async def generate_auth_config(self) -> GenerationResult:
        snippets = [p.config_snippet for p in self.providers]
        return await self._generate(
            "Auth configuration",
            self.structure.auth_config_path,
            "auth.ts.j2",
            {"providers": self.providers, "provider_list": ",\n    ".join(snippets)},
        )

    async def generate_middleware(self) -> GenerationResult:
        return await self._generate(
            "Middleware",
            self.structure.middleware_path,
            "middleware.ts.j2",
            {"matchers": middleware_matchers(self.config.protected_routes)},
        )

    async def generate_auth_route(self) -> GenerationResult:
        ext = self.structure.source_extension
        path = self.structure.app_path / "api" / "auth" / "[...nextauth]" / f"route.{ext}"
        return await self._generate("API route", path, "route.ts.j2", {})

    async def generate_session_provider(self) -> GenerationResult:
        return await self._generate(
            "Session provider",
            self.structure.components_path / "session-provider.tsx",
            "session-provider.tsx.j2",
            {},
        )

    async def generate_login_button(self) -> GenerationResult:
        call, label = sign_in_trigger(self.providers)
        return await self._generate(
            "Login button",
            self.structure.components_path / "login-button.tsx",
            "login-button.tsx.j2",
            {"sign_in_call": call, "sign_in_label": label},
        )

    async def generate_user_profile(self) -> GenerationResult:
        return await self._generate(
            "User profile",
            self.structure.components_path / "user-profile.tsx",
            "user-profile.tsx.j2",
            {},
        )

    async def generate_env_example(self) -> GenerationResult:
        return await self._generate(
            "Environment template",
            self.structure.root_path / self.config.env_file_name,
            "env.example.j2",
            {"env_providers": [p for p in self.providers if p.env_vars]},
        )

    # -- Internals ---------------------------------------------------------

    async def _generate(
        self,
        label: str,
        path: Path,
        template_name: str,
        context: dict[str, Any],
    ) -> GenerationResult:
        try:
            if await asyncio.to_thread(path.exists):
                return GenerationResult(label=label, path=path, status=GenerationStatus.SKIPPED)
            content = self.renderer.render(template_name, context)
            created = await asyncio.to_thread(_write_new_file, path, content)
        except (OSError, TemplateError) as exc:
            return GenerationResult(
                label=label, path=path, status=GenerationStatus.ERROR, error=str(exc)
            )

        status = GenerationStatus.CREATED if created else GenerationStatus.SKIPPED
        return GenerationResult(label=label, path=path, status=status)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _write_new_file(path: Path, content: str) -> bool:
    """Create parent dirs and write *content* unless *path* already exists.

    Returns ``False`` if the file appeared after the existence check.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        with path.open("x", encoding="utf-8") as fh:
            fh.write(content)
    except FileExistsError:
        return False
    return True
