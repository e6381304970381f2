"""Rich console helpers for CLI output."""

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from ..core.models import SearchOutcome, SymptomDocument
from ..mcp.services.protocol import ProtocolService

console = Console()


def print_info(message: str) -> None:
    console.print(f"[blue]ℹ[/blue] {message}")


def print_success(message: str) -> None:
    console.print(f"[green]✓[/green] {message}")


def print_warning(message: str) -> None:
    console.print(f"[yellow]⚠[/yellow] {message}")


def print_error(message: str) -> None:
    console.print(f"[red]✗[/red] {message}")


def print_document(document: SymptomDocument) -> None:
    markdown = ProtocolService().format_document(document)
    console.print(Panel(Markdown(markdown), title=f"🌿 {document.name}", border_style="green"))


def print_search_outcome(query: str, outcome: SearchOutcome) -> None:
    if outcome.degraded:
        print_warning(f"Search unavailable: {outcome.reason}. Showing common symptoms instead.")

    table = Table(title=f"Results for '{query}'", show_lines=False)
    table.add_column("#", style="dim", width=3)
    table.add_column("Symptom", style="bold cyan")
    table.add_column("Category")
    table.add_column("Emotional meaning")
    table.add_column("Conflict")
    for i, result in enumerate(outcome.results, 1):
        table.add_row(str(i), result.name, result.category, result.emotional_meaning, result.conflict)
    console.print(table)
