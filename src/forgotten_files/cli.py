"""
Forgotten Files CLI - Command-line interface.

Inspect and manage the forgotten-files namespace from the terminal, or run
the HTTP service.
"""

import os
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from forgotten_files.commands.dispatcher import CommandDispatcher
from forgotten_files.config import Settings, load_settings
from forgotten_files.core.exceptions import ForgottenFilesError

app = typer.Typer(
    name="forgotten-files",
    help="Forgotten Files - manage abandoned document conversion outputs",
    no_args_is_help=True,
)
console = Console()


def _settings(config: Optional[Path]) -> Settings:
    try:
        return load_settings(config_path=config)
    except ForgottenFilesError as e:
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(2)


def _run(config: Optional[Path], payload: dict) -> dict:
    settings = _settings(config)
    dispatcher = CommandDispatcher.from_settings(settings)
    try:
        return dispatcher.dispatch(payload)
    except ForgottenFilesError as e:
        console.print(f"[red]Storage error:[/red] {escape(str(e))}")
        raise typer.Exit(2)


ConfigOption = typer.Option(None, "--config", "-c", help="YAML configuration file")


@app.command("list")
def list_forgotten(config: Optional[Path] = ConfigOption):
    """List forgotten artifact identifiers."""
    result = _run(config, {"c": "getForgottenList"})

    table = Table(title=f"Forgotten Files ({len(result['keys'])})")
    table.add_column("Key", style="cyan")
    for key in result["keys"]:
        table.add_row(key)

    console.print(table)


@app.command("get")
def get_forgotten(
    keys: list[str] = typer.Argument(..., help="Artifact identifiers"),
    config: Optional[Path] = ConfigOption,
):
    """Issue download links for forgotten artifacts."""
    result = _run(config, {"c": "getForgotten", "key": keys})

    for url in result["url"]:
        console.print(url, soft_wrap=True)

    if result["error"]:
        console.print(
            f"[yellow]{len(keys) - len(result['url'])} of {len(keys)} key(s) not found[/yellow]"
        )
        raise typer.Exit(1)


@app.command("delete")
def delete_forgotten(
    keys: list[str] = typer.Argument(..., help="Artifact identifiers"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    config: Optional[Path] = ConfigOption,
):
    """Delete forgotten artifacts (all or nothing)."""
    if not yes:
        typer.confirm(f"Delete {len(keys)} forgotten artifact(s)?", abort=True)

    result = _run(config, {"c": "deleteForgotten", "key": keys})

    if result["error"]:
        console.print("[red]Nothing deleted:[/red] not every key exists")
        raise typer.Exit(1)

    console.print(f"[green]Deleted {len(result['deleted'])} key(s)[/green]")


@app.command("put")
def put_forgotten(
    doc_id: str = typer.Argument(..., help="Artifact identifier"),
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="File to store"),
    config: Optional[Path] = ConfigOption,
):
    """Store a file as a forgotten artifact."""
    from forgotten_files.storage.filesystem import FileSystemStorage

    settings = _settings(config)
    key = f"{doc_id}/{settings.artifact_name}{file.suffix}"
    try:
        FileSystemStorage(settings.storage_root).put(key, file.read_bytes())
    except ForgottenFilesError as e:
        console.print(f"[red]Cannot store file:[/red] {escape(str(e))}")
        raise typer.Exit(2)

    console.print(f"Stored [cyan]{key}[/cyan]")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Bind port"),
    config: Optional[Path] = ConfigOption,
):
    """Run the HTTP command service."""
    import uvicorn

    # Fail before binding; the app factory reloads settings from FF_CONFIG
    _settings(config)
    if config is not None:
        os.environ["FF_CONFIG"] = str(config.resolve())

    uvicorn.run(
        "forgotten_files.api.app:create_app",
        host=host,
        port=port,
        factory=True,
    )


@app.command()
def version():
    """Show version information."""
    from forgotten_files.version import __version__

    console.print(f"forgotten-files {__version__}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
