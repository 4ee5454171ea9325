"""Interactive provider selection."""

from __future__ import annotations

from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table

from .providers import ProviderConfig, get_all_providers, parse_provider_list


def _resolve_choice(token: str, providers: list[ProviderConfig]) -> str | None:
    """Map ``"2"`` or ``"github"`` to a provider id, or ``None``."""
    token = token.strip().lower()
    if token.isdigit():
        index = int(token) - 1
        if 0 <= index < len(providers):
            return providers[index].id.value
        return None
    for provider in providers:
        if provider.id.value == token:
            return provider.id.value
    return None


def parse_selection(answer: str, providers: list[ProviderConfig]) -> tuple[list[str], list[str]]:
    """Split an answer into ``(selected ids, rejected tokens)``."""
    selected: list[str] = []
    rejected: list[str] = []
    for token in parse_provider_list(answer):
        provider_id = _resolve_choice(token, providers)
        if provider_id is None:
            rejected.append(token)
        elif provider_id not in selected:
            selected.append(provider_id)
    return selected, rejected


def select_providers(console: Console) -> list[str] | None:
    """Ask which providers to set up.

    Re-asks until at least one valid provider is chosen. Returns ``None`` if
    the user cancels with Ctrl-C or Ctrl-D.
    """
    providers = get_all_providers()

    table = Table(title="Authentication providers", header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Id", style="bold")
    table.add_column("Provider")
    table.add_column("Type", style="dim")
    for number, provider in enumerate(providers, start=1):
        kind = "OAuth redirect" if provider.is_oauth else "Credentials form"
        table.add_row(str(number), provider.id.value, provider.name, kind)
    console.print(table)

    while True:
        try:
            answer = Prompt.ask(
                "Select providers (comma-separated numbers or ids)",
                console=console,
            )
        except (KeyboardInterrupt, EOFError):
            console.print()
            return None

        selected, rejected = parse_selection(answer or "", providers)
        if rejected:
            console.print(f"[yellow]Not a provider: {', '.join(rejected)}[/yellow]")
            continue
        if not selected:
            console.print("[yellow]Select at least one provider.[/yellow]")
            continue
        return selected
