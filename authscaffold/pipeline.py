"""authscaffold setup pipeline.

Adds Auth.js boilerplate to an existing Next.js App Router project:

1. GATE     -- the target must be a Next.js project with an ``app/`` router.
2. RESOLVE  -- providers come from ``--providers`` or an interactive prompt.
3. INSTALL  -- ``next-auth`` is installed if missing (best effort).
4. GENERATE -- seven artifacts are written, skipping files that already exist.
5. REPORT   -- summary table plus per-provider setup instructions.

Usage::

    authscaffold
    authscaffold --providers google,github
    python -m authscaffold --dir ./my-app --skip-install
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys
import traceback
from collections.abc import Awaitable, Callable, Sequence
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from . import __version__
from .config import Config
from .detector import (
    PackageManager,
    ProjectStructure,
    detect_package_manager,
    detect_project_structure,
    has_auth_library_installed,
    is_eligible_project,
)
from .errors import (
    IneligibleProjectError,
    MissingAppRouterError,
    PreconditionError,
    UnknownProviderError,
)
from .installer import RUN_DEV_COMMANDS, InstallResult, install_command, install_dependency
from .prompt import select_providers
from .providers import ProviderConfig, get_provider_configs, parse_provider_list
from .scaffolder import FileGenerator, GenerationStatus, GenerationSummary
from .utils import (
    console,
    display_path,
    print_banner,
    print_error,
    print_info,
    print_section,
    print_success,
    print_summary_table,
    print_warning,
)

Installer = Callable[[PackageManager, Path, int | None], Awaitable[InstallResult]]
Selector = Callable[[Console], list[str] | None]


class SetupPipeline:
    """Runs one scaffolding pass against ``config.target_dir``.

    Attributes:
        config: Settings for this run.
        installer: Coroutine used to install ``next-auth``.
        selector: Interactive provider picker, used when ``config.providers``
            is empty. Returning ``None`` cancels the run.
    """

    def __init__(
        self,
        config: Config,
        installer: Installer = install_dependency,
        selector: Selector = select_providers,
    ) -> None:
        self.config = config
        self.installer = installer
        self.selector = selector
        self.structure: ProjectStructure | None = None
        self.providers: list[ProviderConfig] = []

    def prepare(self) -> bool:
        """Run the project gates and settle the provider selection.

        This step blocks on the interactive prompt, so the CLI calls it
        before starting the event loop; Ctrl-C then reaches the prompt as a
        plain ``KeyboardInterrupt``.

        Returns:
            ``False`` if the provider prompt was cancelled.

        Raises:
            IneligibleProjectError: No ``package.json`` declaring ``next``.
            MissingAppRouterError: No ``app/`` directory.
            UnknownProviderError: A requested provider id is not registered.
        """
        root = self.config.target_path
        print_banner("Auth.js setup", f"Project : {root}")

        if not is_eligible_project(root):
            raise IneligibleProjectError(root)

        structure = detect_project_structure(root, self.config.source_extension)
        self._print_structure(structure)
        if not structure.has_app_dir:
            raise MissingAppRouterError(structure.app_path)

        ids = list(self.config.providers) or self.selector(console)
        if ids is None:
            print_warning("Setup cancelled. No files were written.")
            return False
        self.providers = get_provider_configs(ids)
        self.structure = structure
        console.print(
            f"  Providers: [bold]{', '.join(p.name for p in self.providers)}[/bold]"
        )
        return True

    async def run(self) -> GenerationSummary | None:
        """Execute the pipeline, calling ``prepare`` first if needed.

        Returns:
            The generation summary, or ``None`` if the provider prompt was
            cancelled (nothing is written in that case).
        """
        if self.structure is None and not self.prepare():
            return None
        structure = self.structure
        root = structure.root_path

        manager = detect_package_manager(root)
        await self._ensure_auth_library(root, manager)

        print_section("Generating files")
        generator = FileGenerator(structure, self.providers, self.config)
        summary = await generator.generate_all()

        self._print_results(summary, root)
        if summary.outcome != "failure":
            self._print_next_steps(structure, self.providers, manager)
        return summary

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    async def _ensure_auth_library(self, root: Path, manager: PackageManager) -> None:
        """Install ``next-auth`` if needed. Never raises on install failure."""
        if has_auth_library_installed(root):
            print_success("next-auth is already installed")
            return
        if self.config.skip_install:
            print_warning(
                f"next-auth is not installed. Install it with: {install_command(manager)}"
            )
            return

        console.print(f"\n  Installing next-auth with [bold]{manager.value}[/bold]...")
        print_info(f"  Running: {install_command(manager)}")
        result = await self.installer(manager, root, self.config.install_timeout)
        if result.ok:
            print_success("next-auth installed successfully")
        else:
            detail = f" ({escape(result.message)})" if result.message else ""
            print_warning(f"Failed to install next-auth automatically{detail}.")
            print_warning(f"  Please install it manually: {result.command}")
            print_info("  Continuing with file generation...")

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def _print_structure(self, structure: ProjectStructure) -> None:
        console.print("  Detected project structure:")
        print_info(f"   - Has src/ directory: {'Yes' if structure.has_src_dir else 'No'}")
        print_info(f"   - Has app/ directory: {'Yes' if structure.has_app_dir else 'No'}")

    def _print_results(self, summary: GenerationSummary, root: Path) -> None:
        for result in summary.results:
            shown = escape(display_path(result.path, root))
            if result.status is GenerationStatus.CREATED:
                console.print(f"  [green]+[/green] Created {shown}")
            elif result.status is GenerationStatus.SKIPPED:
                console.print(f"  [dim]-[/dim] Skipped {shown} [dim](already exists)[/dim]")
            else:
                console.print(f"  [red]x[/red] Failed  {shown}: {escape(result.error or '')}")
        console.print()

        print_summary_table(
            {
                "Created": str(summary.created),
                "Skipped": str(summary.skipped),
                "Errors": str(summary.errors),
            },
            title="Generated files",
        )

        if summary.outcome == "success":
            print_success("Auth.js setup completed successfully!")
        elif summary.outcome == "partial":
            print_warning(
                f"Setup finished with {summary.errors} error(s). "
                "Fix the problems above and re-run; existing files are kept."
            )
        else:
            print_error("Setup failed: no files could be generated.")

    def _print_next_steps(
        self,
        structure: ProjectStructure,
        providers: Sequence[ProviderConfig],
        manager: PackageManager,
    ) -> None:
        print_section("Next steps", color="bright_yellow")
        env_name = self.config.env_file_name
        local_name = env_name.removesuffix(".example")
        step = 1

        console.print(f"[yellow]{step}.[/yellow] Create [cyan]{local_name}[/cyan] with your secrets:")
        print_info(f"   cp {env_name} {local_name}")
        step += 1

        for provider in providers:
            console.print(f"[yellow]{step}.[/yellow] Configure [cyan]{provider.name}[/cyan]:")
            for line in provider.instructions_for(self.config.dev_server_url):
                print_info(f"   - {line}")
            step += 1

        layout = structure.app_path / f"layout.{structure.source_extension}x"
        session_module = os.path.relpath(
            structure.components_path / "session-provider", structure.app_path
        )
        console.print(
            f"[yellow]{step}.[/yellow] Wrap your root layout with "
            f"[cyan]AuthSessionProvider[/cyan]:"
        )
        print_info(f"   In {display_path(layout, structure.root_path)}:")
        print_info(
            f'   import AuthSessionProvider from "{Path(session_module).as_posix()}"'
        )
        step += 1

        console.print(f"[yellow]{step}.[/yellow] Start your development server:")
        print_info(f"   {RUN_DEV_COMMANDS[manager]}")
        console.print()

        console.print("[bold cyan]Components created:[/bold cyan]")
        print_info("   - <LoginButton /> - Sign in/out button")
        print_info("   - <UserProfile /> - Display user session info")
        print_info("   - <AuthSessionProvider /> - Session context for client components")
        console.print()

        console.print("[bold cyan]Protected routes:[/bold cyan]")
        for route in self.config.protected_routes:
            print_info(f"   - {route.rstrip('/')}/*")
        console.print()


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="authscaffold",
        description="Add Auth.js (next-auth) boilerplate to a Next.js App Router project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  authscaffold\n"
            "  authscaffold --providers google,github\n"
            "  authscaffold --dir ./my-app --providers credentials --skip-install\n"
        ),
    )
    parser.add_argument(
        "-v", "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--providers",
        default=None,
        metavar="IDS",
        help="Comma-separated provider ids (google, github, credentials); skips the prompt",
    )
    parser.add_argument(
        "--dir",
        default=None,
        metavar="PATH",
        help="Target project directory (default: current directory)",
    )
    parser.add_argument(
        "--skip-install",
        action="store_true",
        help="Do not install next-auth even if it is missing",
    )
    return parser


def _build_config(args: argparse.Namespace) -> Config:
    """Environment settings with CLI flags applied on top."""
    config = Config.from_env()
    if args.dir:
        config.target_dir = Path(args.dir)
    if args.skip_install:
        config.skip_install = True
    if args.providers is not None:
        config.providers = parse_provider_list(args.providers)
    return config


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``authscaffold`` and ``python -m authscaffold``."""
    args = build_parser().parse_args(argv)

    try:
        config = _build_config(args)
    except ValueError as exc:
        print_error(f"Error: invalid configuration: {escape(str(exc))}")
        sys.exit(1)
    if args.providers is not None and not config.providers:
        print_error("Error: --providers needs at least one provider id.")
        sys.exit(1)

    pipeline = SetupPipeline(config)
    try:
        # The provider prompt blocks on stdin; keep it out of the event loop.
        if not pipeline.prepare():
            return
        summary = asyncio.run(pipeline.run())
    except (PreconditionError, UnknownProviderError) as exc:
        print_error(f"Error: {escape(str(exc))}")
        sys.exit(1)
    except Exception as exc:
        print_error(f"Fatal error: {escape(str(exc))}")
        console.print(f"[dim]{escape(traceback.format_exc())}[/dim]")
        sys.exit(1)

    if summary is not None and summary.outcome == "failure":
        sys.exit(1)


if __name__ == "__main__":
    main()
