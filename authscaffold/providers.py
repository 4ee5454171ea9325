"""Authentication provider registry.

Each provider is a plain data record consumed generically by the templates.
Adding a provider means adding a ``ProviderId`` member and a registry entry;
no new code path is needed.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict

from .errors import UnknownProviderError


class ProviderId(str, Enum):
    GOOGLE = "google"
    GITHUB = "github"
    CREDENTIALS = "credentials"


class EnvVar(BaseModel):
    """An environment variable a provider needs at runtime."""

    model_config = ConfigDict(frozen=True)

    key: str
    description: str
    placeholder: str


class ProviderConfig(BaseModel):
    """Template metadata for one Auth.js provider."""

    model_config = ConfigDict(frozen=True)

    id: ProviderId
    name: str
    import_name: str
    import_path: str
    env_vars: tuple[EnvVar, ...] = ()
    config_snippet: str
    setup_instructions: tuple[str, ...] = ()
    callback_path: str | None = None

    @property
    def is_oauth(self) -> bool:
        """Redirect-based providers have a callback path."""
        return self.callback_path is not None

    @property
    def import_line(self) -> str:
        return f'import {self.import_name} from "{self.import_path}"'

    def instructions_for(self, base_url: str) -> list[str]:
        """Setup steps with ``{base_url}`` filled in (no trailing slash)."""
        base_url = base_url.rstrip("/")
        return [step.format(base_url=base_url) for step in self.setup_instructions]


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

_GOOGLE = ProviderConfig(
    id=ProviderId.GOOGLE,
    name="Google",
    import_name="Google",
    import_path="next-auth/providers/google",
    env_vars=(
        EnvVar(
            key="AUTH_GOOGLE_ID",
            description="Google OAuth Client ID",
            placeholder="your-google-client-id",
        ),
        EnvVar(
            key="AUTH_GOOGLE_SECRET",
            description="Google OAuth Client Secret",
            placeholder="your-google-client-secret",
        ),
    ),
    config_snippet=(
        "Google({\n"
        "      clientId: process.env.AUTH_GOOGLE_ID!,\n"
        "      clientSecret: process.env.AUTH_GOOGLE_SECRET!,\n"
        "    })"
    ),
    setup_instructions=(
        "Go to https://console.cloud.google.com/",
        "Create OAuth 2.0 credentials",
        "Add redirect URI: {base_url}/api/auth/callback/google",
    ),
    callback_path="/api/auth/callback/google",
)

_GITHUB = ProviderConfig(
    id=ProviderId.GITHUB,
    name="GitHub",
    import_name="GitHub",
    import_path="next-auth/providers/github",
    env_vars=(
        EnvVar(
            key="AUTH_GITHUB_ID",
            description="GitHub OAuth App Client ID",
            placeholder="your-github-client-id",
        ),
        EnvVar(
            key="AUTH_GITHUB_SECRET",
            description="GitHub OAuth App Client Secret",
            placeholder="your-github-client-secret",
        ),
    ),
    config_snippet=(
        "GitHub({\n"
        "      clientId: process.env.AUTH_GITHUB_ID!,\n"
        "      clientSecret: process.env.AUTH_GITHUB_SECRET!,\n"
        "    })"
    ),
    setup_instructions=(
        "Go to https://github.com/settings/developers",
        "Create a new OAuth App",
        "Set callback URL to: {base_url}/api/auth/callback/github",
    ),
    callback_path="/api/auth/callback/github",
)

_CREDENTIALS = ProviderConfig(
    id=ProviderId.CREDENTIALS,
    name="Credentials (Email/Password)",
    import_name="Credentials",
    import_path="next-auth/providers/credentials",
    env_vars=(),
    config_snippet=(
        "Credentials({\n"
        '      name: "credentials",\n'
        "      credentials: {\n"
        '        email: { label: "Email", type: "email" },\n'
        '        password: { label: "Password", type: "password" },\n'
        "      },\n"
        "      async authorize(credentials) {\n"
        "        // Replace with a lookup against your user store.\n"
        "        if (!credentials?.email || !credentials?.password) return null\n"
        "\n"
        "        return {\n"
        '          id: "1",\n'
        "          email: credentials.email as string,\n"
        '          name: "User",\n'
        "        }\n"
        "      },\n"
        "    })"
    ),
    setup_instructions=(
        "Replace the authorize() function in auth.ts with your actual authentication logic",
        "Connect to your database to validate credentials",
        "Consider using bcrypt for password hashing",
    ),
    callback_path=None,
)

PROVIDERS: Mapping[ProviderId, ProviderConfig] = MappingProxyType(
    {p.id: p for p in (_GOOGLE, _GITHUB, _CREDENTIALS)}
)


def get_all_providers() -> list[ProviderConfig]:
    """Return every provider in display order."""
    return list(PROVIDERS.values())


def provider_ids() -> list[str]:
    return [p.value for p in PROVIDERS]


def parse_provider_list(text: str) -> list[str]:
    """Split a ``--providers`` value such as ``"google, github"``."""
    return [part.strip() for part in text.split(",") if part.strip()]


def get_provider_configs(ids: Iterable[str]) -> list[ProviderConfig]:
    """Resolve provider ids to configs, preserving input order.

    Ids are matched case-insensitively after stripping whitespace; repeated
    ids are kept once, at their first position.

    Raises:
        UnknownProviderError: Naming every id that is not registered.
        ValueError: If *ids* is empty.
    """
    resolved: list[ProviderConfig] = []
    unknown: list[str] = []

    for raw in ids:
        key = raw.strip().lower()
        try:
            config = PROVIDERS[ProviderId(key)]
        except ValueError:
            unknown.append(raw)
            continue
        if config not in resolved:
            resolved.append(config)

    if unknown:
        raise UnknownProviderError(unknown, provider_ids())
    if not resolved:
        raise ValueError("At least one provider must be selected")
    return resolved
