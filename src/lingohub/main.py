"""Command line interface for inspecting and driving the SDK.

Configuration comes from LINGOHUB_* environment variables (or a .env file)
and can be overridden per command.
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from lingohub.application import LingohubConfig, LingohubSDK
from lingohub.domain.types import UpdateOutcome
from lingohub.logger import LogLevel, setup_logger

console = Console()

cli = typer.Typer(
    name="lingohub",
    help="Over-the-air localization updates from Lingohub",
    epilog="""
    Examples:
    $ LINGOHUB_API_KEY=... lingohub update --app-version 2.3.0
    $ lingohub lookup welcome.title --language de
    """,
    add_completion=False,
)


class _KeyEchoSource:
    """Stand-in for the host bundle: returns the default or the key itself."""

    identifier = "lingohub-cli"

    def localized_string(self, key: str, default: Optional[str], table: str) -> str:
        return default or key


def _build_sdk(
    app_version: Optional[str],
    storage_dir: Optional[Path],
    debug: bool,
) -> LingohubSDK:
    config = LingohubConfig.from_env(
        app_version=app_version,
        storage_dir=storage_dir,
        log_level=LogLevel.FULL if debug else None,
    )
    if debug:
        setup_logger(LogLevel.FULL, console_output=True)
    return LingohubSDK.from_config(config)


@cli.command()
def update(
    app_version: Optional[str] = typer.Option(None, "--app-version", help="Version of the host application"),
    storage_dir: Optional[Path] = typer.Option(None, "--storage-dir", help="SDK storage directory"),
    force: bool = typer.Option(False, "--force", help="Ignore the daily check limit"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """Check for a newer distribution and install it."""
    with _build_sdk(app_version, storage_dir, debug) as sdk:
        if force:
            result = asyncio.run(sdk.update())
        else:
            result = asyncio.run(sdk.update_if_due())
            if result is None:
                console.print("[yellow]Skipped:[/yellow] already checked within the last 24 hours (use --force)")
                return

    if result.outcome is UpdateOutcome.UPDATED:
        console.print(f"[green]Installed[/green] distribution {result.artifact_id}")
    elif result.outcome is UpdateOutcome.NO_UPDATE:
        console.print("No update available")
    else:
        error = result.error
        console.print(f"[red]Update failed:[/red] {error.description if error else 'unknown error'}")
        if error is not None and error.recovery_suggestion:
            console.print(error.recovery_suggestion)
        raise typer.Exit(code=1)


@cli.command()
def lookup(
    key: str = typer.Argument(..., help="Localization key"),
    table: Optional[str] = typer.Option(None, "--table", "-t", help="Table name (default: Localizable)"),
    language: Optional[str] = typer.Option(None, "--language", "-l", help="Language code"),
    storage_dir: Optional[Path] = typer.Option(None, "--storage-dir", help="SDK storage directory"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """Resolve a key against the installed distribution."""
    with _build_sdk(None, storage_dir, debug) as sdk:
        source = _KeyEchoSource()
        sdk.intercept(source)
        console.print(sdk.resolve(key, table, language, source=source))


@cli.command()
def status(
    storage_dir: Optional[Path] = typer.Option(None, "--storage-dir", help="SDK storage directory"),
):
    """Show configuration and the installed distribution."""
    with _build_sdk(None, storage_dir, False) as sdk:
        info = sdk.status()

    table = Table(title="Lingohub SDK", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for name, value in info.items():
        table.add_row(name, "-" if value is None else str(value))
    console.print(table)


@cli.command()
def reset(
    storage_dir: Optional[Path] = typer.Option(None, "--storage-dir", help="SDK storage directory"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
):
    """Delete the installed distribution and all persisted SDK state."""
    if not yes:
        typer.confirm("Remove the installed distribution and SDK state?", abort=True)
    with _build_sdk(None, storage_dir, False) as sdk:
        sdk.reset()
    console.print("SDK state removed")


if __name__ == "__main__":
    cli()
