"""
UI components for the frumle CLI.

Renders analysis results, account status and errors with Rich.
"""

from typing import Any, Iterable

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from frumle.core.project_config import (
    CONFIG_NAME,
    LOCAL_ENVIRONMENT,
    PRODUCTION_ENVIRONMENT,
    BaseUrlEntry,
)

UNKNOWN = "?"


def _value(data: Any, key: str) -> str:
    """Look up ``key`` for display; server values are escaped so Rich prints them literally."""
    if not isinstance(data, dict):
        return UNKNOWN
    value = data.get(key)
    return UNKNOWN if value is None else escape(str(value))


def _section(data: Any, key: str) -> dict[str, Any]:
    value = data.get(key) if isinstance(data, dict) else None
    return value if isinstance(value, dict) else {}


def render_error(console: Console, message: str, hints: Iterable[str] = ()) -> None:
    """Render an error message followed by optional hint lines."""
    console.print(f"[bold red]Error:[/bold red] {escape(message)}")
    hints = list(hints)
    if hints:
        console.print()
        for hint in hints:
            console.print(f"[cyan]{escape(hint)}[/cyan]")


def render_base_urls(console: Console, entries: list[BaseUrlEntry]) -> None:
    for entry in entries:
        if entry.environment == LOCAL_ENVIRONMENT and entry.url:
            console.print(f"  [green]✓[/green] Local URL detected: {escape(entry.url)}")

    has_production = any(
        e.environment == PRODUCTION_ENVIRONMENT and e.url for e in entries
    )
    if entries and not has_production:
        console.print(
            f"  [yellow]Tip:[/yellow] Add a production URL in {CONFIG_NAME} "
            "to test APIs in production"
        )


def render_quota(console: Console, quota: Any) -> None:
    grid = Table.grid(padding=(0, 1))
    grid.add_column(style="bold")
    grid.add_column()
    grid.add_row("Quota:", f"{_value(quota, 'analysesPerMonth')} analyses per month")
    grid.add_row("Used:", f"{_value(quota, 'used')} / {_value(quota, 'analysesPerMonth')}")
    grid.add_row("Remaining:", _value(quota, "remaining"))
    console.print(grid)


def render_status(console: Console, status: dict[str, Any]) -> None:
    """Render account status: key prefix, quota and usage."""
    quota = _section(status, "quota")
    usage = _section(status, "usage")

    grid = Table.grid(padding=(0, 1))
    grid.add_column(style="bold")
    grid.add_column()
    grid.add_row("API Key:", f"{escape(str(status.get('apiKey') or ''))}...")
    grid.add_row("", "")
    grid.add_row("Quota Total:", f"{_value(quota, 'analysesPerMonth')} analyses/month")
    grid.add_row("Quota Used:", _value(quota, "used"))
    grid.add_row("Quota Remaining:", _value(quota, "remaining"))
    grid.add_row("", "")
    grid.add_row("Total Analyses:", _value(usage, "totalAnalyses"))
    if usage.get("lastAnalysisAt"):
        grid.add_row("Last Analysis:", _value(usage, "lastAnalysisAt"))

    console.print(Panel(grid, title="[bold]Account Status[/bold]", border_style="blue", expand=False))


def is_analysis_pending(response: dict[str, Any]) -> bool:
    """True when the backend queued the analysis instead of returning a result."""
    return response.get("status") == "processing" or response.get("result") is None


def render_analysis_started(
    console: Console,
    response: dict[str, Any],
    directory: str,
    file_count: int,
    dashboard_url: str,
) -> None:
    grid = Table.grid(padding=(0, 1))
    grid.add_column(style="bold")
    grid.add_column()
    grid.add_row("Directory:", escape(directory))
    grid.add_row("Files queued:", escape(str(response.get("fileCount") or file_count)))
    if "quota" in response:
        grid.add_row("Remaining:", f"{_value(response['quota'], 'remaining')} analyses")

    console.print(
        Panel(grid, title="[bold green]Analysis Started[/bold green]", border_style="green", expand=False)
    )
    console.print("Analysis in progress...")
    console.print("Your documentation will be available in your dashboard shortly.")
    console.print(f"Check your dashboard at: {escape(dashboard_url)}")


def render_analysis_results(console: Console, response: dict[str, Any]) -> None:
    result = _section(response, "result")
    stats = _section(result, "stats")

    summary = Table.grid(padding=(0, 1))
    summary.add_column(style="bold")
    summary.add_column()
    if result.get("framework"):
        summary.add_row("Framework:", _value(result, "framework"))
    summary.add_row("Total Files:", _value(stats, "totalFiles"))
    summary.add_row("Analyzed:", _value(stats, "analyzedFiles"))
    summary.add_row("Total Chunks:", _value(stats, "totalChunks"))
    if "quota" in response:
        summary.add_row("Remaining:", f"{_value(response['quota'], 'remaining')} analyses")

    console.print(
        Panel(summary, title="[bold green]Analysis Results[/bold green]", border_style="green", expand=False)
    )

    if result.get("summary"):
        console.print(Panel(Text(str(result["summary"])), title="Summary", border_style="blue"))

    console.print("[bold green]Analysis complete![/bold green] Results saved to the dashboard.")
