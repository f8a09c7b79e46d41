"""
CLI for frumle.

Provides the command-line interface for analyzing PHP codebases and
managing the API key.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from frumle import __version__
from frumle.cli.router import resolve_command_args
from frumle.cli.ui import (
    is_analysis_pending,
    render_analysis_results,
    render_analysis_started,
    render_base_urls,
    render_error,
    render_quota,
    render_status,
)
from frumle.core.config import FrumleSettings, LoggingConfig, load_config
from frumle.core.project_config import ProjectConfigError
from frumle.core.user_config import CredentialStore, CredentialStoreError
from frumle.infrastructure import (
    ApiClientError,
    AuthenticationError,
    QuotaExceededError,
    create_api_client,
)
from frumle.services import AnalysisService

MIN_API_KEY_LENGTH = 10

# Initialize Rich Console
console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    name="frumle",
    help="frumle - AI-powered codebase analyzer for PHP",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)

_NO_KEY_HINTS = (
    "To get started:",
    "  1. Register at the Frumle dashboard",
    "  2. Add your API key: frumle add-key <your-api-key>",
    "  3. Or use: frumle login <your-api-key>",
)


def configure_logging(config: LoggingConfig, verbose: bool = False) -> None:
    """Route log records to stderr through Rich."""
    level = logging.DEBUG if verbose else getattr(logging, config.level.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format=config.format,
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def parse_ignore_list(ignore: Optional[str]) -> Optional[list[str]]:
    """Split a comma-separated ``--ignore`` value; None when nothing usable was given."""
    if ignore is None:
        return None
    dirs = [d.strip() for d in ignore.split(",") if d.strip()]
    return dirs or None


def _load_settings(config_path: Optional[Path]) -> FrumleSettings:
    """Load settings, exiting with an error when the config file is unusable."""
    try:
        cfg = load_config(config_path)
    except (OSError, ValueError) as e:
        render_error(console, f"Invalid configuration: {e}")
        raise typer.Exit(1)
    return cfg


def _config_option():
    return typer.Option(
        None, "--config", help="YAML or JSON settings file (api, scan, logging sections)"
    )


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"frumle {__version__}")
        raise typer.Exit()


@app.callback()
def _main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version",
        callback=_version_callback,
        is_eager=True,
    ),
):
    """Analyze a PHP codebase with AI (default command: analyze)."""


@app.command()
def analyze(
    directory: Optional[Path] = typer.Argument(
        None, help="Directory to analyze (default: current directory)"
    ),
    project_name: Optional[str] = typer.Option(
        None,
        "--project-name",
        help="Project name (defaults to composer.json name or directory)",
    ),
    ignore: Optional[str] = typer.Option(
        None, "--ignore", help="Comma-separated directories to ignore"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logging"),
    config: Optional[Path] = _config_option(),
):
    """Analyze a codebase."""
    cfg = _load_settings(config)
    configure_logging(cfg.logging, verbose)

    target = directory if directory is not None else Path.cwd()
    if not target.is_dir():
        render_error(console, f'Directory "{target}" does not exist')
        raise typer.Exit(1)
    target = target.resolve()

    api_key = CredentialStore().get_api_key()
    if api_key is None:
        render_error(console, "No API key found!", _NO_KEY_HINTS)
        raise typer.Exit(1)

    console.print("[bold blue]Starting codebase analysis...[/bold blue]")
    console.print(f"Directory: {escape(str(target))}\n")

    client = create_api_client(cfg.api)
    try:
        service = AnalysisService(client, cfg.scan)

        with console.status("[bold blue]Scanning files...[/bold blue]"):
            scan_result, _, ignore_dirs = service.scan(target, parse_ignore_list(ignore))

        if scan_result.is_empty:
            render_error(console, "No files found to analyze")
            raise typer.Exit(1)

        console.print(f"  [green]✓[/green] Found {len(scan_result.files)} files")
        if scan_result.skipped:
            console.print(
                f"  [yellow]![/yellow] Skipped {len(scan_result.skipped)} unreadable entries"
            )

        console.print("[bold blue]Detecting base URLs...[/bold blue]")
        try:
            request = service.prepare(target, scan_result, ignore_dirs, project_name)
        except ProjectConfigError as e:
            render_error(console, str(e))
            raise typer.Exit(1)

        render_base_urls(console, request.base_urls)
        console.print(f"Project: [bold]{escape(request.project_name)}[/bold]")

        try:
            with console.status("[bold blue]Analyzing with AI...[/bold blue]"):
                response = service.submit(request, api_key)
        except AuthenticationError as e:
            render_error(console, f"Analysis error: {e}", ["Try: frumle add-key <your-api-key>"])
            raise typer.Exit(1)
        except QuotaExceededError as e:
            render_error(console, f"Analysis error: {e}", ["Check quota: frumle status"])
            raise typer.Exit(1)
        except ApiClientError as e:
            render_error(console, f"Analysis error: {e}")
            raise typer.Exit(1)
    finally:
        client.close()

    console.print()
    if is_analysis_pending(response):
        render_analysis_started(
            console,
            response,
            directory=str(target),
            file_count=request.file_count,
            dashboard_url=cfg.api.dashboard_url,
        )
    else:
        render_analysis_results(console, response)


def _add_key(api_key: str, config_path: Optional[Path] = None) -> None:
    cfg = _load_settings(config_path)
    configure_logging(cfg.logging)

    api_key = api_key.strip()
    if len(api_key) < MIN_API_KEY_LENGTH:
        render_error(
            console,
            "Invalid API key format",
            [f"API key must be at least {MIN_API_KEY_LENGTH} characters long"],
        )
        raise typer.Exit(1)

    console.print("[bold blue]Verifying API key with server...[/bold blue]")
    try:
        with create_api_client(cfg.api) as client:
            status = client.verify_api_key(api_key)
    except ApiClientError as e:
        render_error(
            console,
            f"Failed to add API key: {e}",
            [
                "Make sure:",
                "  1. Your API key is correct",
                "  2. You registered at the Frumle dashboard",
                "  3. You have an internet connection",
            ],
        )
        raise typer.Exit(1)

    try:
        CredentialStore().set_api_key(api_key)
    except CredentialStoreError as e:
        render_error(console, str(e))
        raise typer.Exit(1)

    console.print("[bold green]API key added successfully![/bold green]\n")
    render_quota(console, status.get("quota"))
    console.print("\nYou can now run: [bold]frumle[/bold]")


@app.command("add-key")
def add_key(
    api_key: str = typer.Argument(..., help="Your frumle API key"),
    config: Optional[Path] = _config_option(),
):
    """Add your API key."""
    _add_key(api_key, config)


@app.command()
def login(
    api_key: str = typer.Argument(..., help="Your frumle API key"),
    config: Optional[Path] = _config_option(),
):
    """Login with API key (alias for add-key)."""
    _add_key(api_key, config)


@app.command()
def status(config: Optional[Path] = _config_option()):
    """Check API key status and quota."""
    cfg = _load_settings(config)
    configure_logging(cfg.logging)

    api_key = CredentialStore().get_api_key()
    if api_key is None:
        render_error(
            console,
            "Status check failed: No API key found. Run 'frumle add-key <api-key>' first.",
        )
        raise typer.Exit(1)

    try:
        with create_api_client(cfg.api) as client:
            account = client.check_status(api_key)
    except ApiClientError as e:
        render_error(console, f"Status check failed: {e}")
        raise typer.Exit(1)

    render_status(console, account)


def main(argv: Optional[list[str]] = None) -> None:
    """Console script entry point."""
    args = sys.argv[1:] if argv is None else argv
    app(args=resolve_command_args(args), prog_name="frumle")


if __name__ == "__main__":
    main()
