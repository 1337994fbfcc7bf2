# src/interface/cli.py

import dataclasses
from typing import Any, List, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.prompt import Prompt
from rich import box
from rich.text import Text

from src.application.index_service import SyncReport
from src.domain.models import PAGE_SIZES, SearchResult


console = Console()


def display_welcome_banner() -> None:
    console.print(Panel.fit(
        "[bold cyan]🔍 Collection Search[/bold cyan]\n"
        "[dim]Full-text search over typed collections[/dim]",
        box=box.DOUBLE,
        border_style="cyan",
    ))


def display_info(message: str) -> None:
    console.print(f"[bold blue]ℹ[/bold blue] {message}")


def display_sync_report(reports: Sequence[SyncReport]) -> None:
    table = Table(title="Indexed collections", box=box.SIMPLE_HEAVY)
    table.add_column("Collection", style="bold")
    table.add_column("Upserted", justify="right", style="green")
    table.add_column("Deleted", justify="right", style="red")

    for report in reports:
        table.add_row(report.collection, str(report.upserted), str(report.deleted))

    console.print(table)
    console.print("[green]✓[/green] Indexing finished.\n")


def display_export(collection_name: str, documents: str) -> None:
    display_info(f'Data for collection "{collection_name}"')
    # JSON lines, written verbatim.
    console.out(documents.rstrip("\n"), highlight=False)


def prompt_for_collection(names: List[str]) -> str:
    return Prompt.ask("\n[bold yellow]📚 Collection[/bold yellow]", choices=names, default=names[0])


def prompt_for_query() -> str:
    return Prompt.ask("[bold yellow]❓ Query[/bold yellow]", default="")


def prompt_for_page_size() -> int:
    answer = Prompt.ask(
        "[bold yellow]📄 Page size[/bold yellow]",
        choices=[str(size) for size in PAGE_SIZES],
        default="10",
    )
    return int(answer)


def display_results(query: str, result: SearchResult, page: int) -> None:
    console.print(
        f"\n[bold]Results for:[/bold] [italic]\"{query}\"[/italic] "
        f"[dim](page {page}, {result.total_count} total)[/dim]\n"
    )

    if not result.items:
        console.print("[dim]No matching documents.[/dim]")
        return

    for rank, item in enumerate(result.items, start=1):
        console.print(Panel(
            _describe(item),
            title=f"[bold]#{rank}[/bold] {type(item).__name__}",
            border_style="cyan",
            box=box.ROUNDED,
            padding=(1, 2),
        ))


def display_error(message: str) -> None:
    console.print(f"\n[bold red]✗ Error:[/bold red] {message}\n")


def ask_next_page() -> bool:
    answer = Prompt.ask("[dim]Next page?[/dim]", choices=["y", "n"], default="n")
    return answer.lower() == "y"


def ask_continue() -> bool:
    answer = Prompt.ask(
        "\n[dim]Search again?[/dim]",
        choices=["y", "n"],
        default="y",
    )
    return answer.lower() == "y"


def _describe(item: Any) -> Text:
    text = Text()
    if not dataclasses.is_dataclass(item):
        text.append(str(item))
        return text

    for field in dataclasses.fields(item):
        value = getattr(item, field.name)
        if value is None:
            continue
        text.append(f"{field.name}: ", style="dim")
        text.append(f"{value}\n", style="bold white" if field.name == "title" else "")
    text.rstrip()
    return text
