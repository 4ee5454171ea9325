"""Exceptions raised by authscaffold.

Precondition failures stop a run before anything is written. Per-artifact
write failures are not exceptions at this level; ``FileGenerator`` records
them as ``error`` results instead.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class ScaffoldError(Exception):
    """Base class for every error authscaffold raises on purpose."""


class PreconditionError(ScaffoldError):
    """A fail-fast gate rejected the target project."""


class IneligibleProjectError(PreconditionError):
    """The target is not a Next.js project."""

    def __init__(self, root: Path) -> None:
        self.root = root
        super().__init__(
            f"{root} does not appear to be a Next.js project: "
            'package.json must exist and list "next" as a dependency.'
        )


class MissingAppRouterError(PreconditionError):
    """The target has no App Router directory."""

    def __init__(self, app_path: Path) -> None:
        self.app_path = app_path
        super().__init__(
            f"App Router directory not found at {app_path}. "
            "Only the Next.js App Router is supported."
        )


class UnknownProviderError(ScaffoldError, ValueError):
    """One or more requested provider ids are not in the registry."""

    def __init__(self, ids: Sequence[str], valid: Sequence[str]) -> None:
        self.ids = list(ids)
        self.valid = list(valid)
        label = "provider" if len(self.ids) == 1 else "providers"
        super().__init__(
            f"Unknown {label}: {', '.join(self.ids)} "
            f"(valid: {', '.join(self.valid)})"
        )
