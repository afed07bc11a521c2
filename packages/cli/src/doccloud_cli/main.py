"""Doc Cloud CLI - Main entry point.

Provides the ``doc-cloud`` command-line interface for running the publish
pipeline outside a build host.

Usage:
    doc-cloud validate publish.json
    doc-cloud manifest publish.json --storage .doccloud
    doc-cloud publish publish.json --endpoint https://docs.example.com/api/packages
"""

import asyncio
from pathlib import Path
from typing import NoReturn, Optional

import typer

from doccloud_common import DocCloudError, configure_logging, get_settings
from doccloud_publisher import (
    DocCloudUploader,
    ProgressCounter,
    PublishConfig,
    PublishOrchestrator,
    persist_manifest,
    reset_storage,
    validate_config,
    validate_storage,
)

app = typer.Typer(
    name="doc-cloud",
    help="Package compiled documentation books and publish them to Doc Cloud.",
    add_completion=False,
)


def _fail(error: DocCloudError) -> NoReturn:
    if error.phase:
        typer.echo(f"Error during {error.phase}: {error}", err=True)
    else:
        typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(1)


def _progress_printer():
    last = {"percent": -1}

    def on_change(progress: ProgressCounter) -> None:
        percent = int(progress.percent)
        if percent != last["percent"] and progress.total:
            last["percent"] = percent
            typer.echo(f"  Publishing {percent}%")

    return on_change


@app.command()
def validate(
    config_path: Path = typer.Argument(..., help="Publish config (JSON)"),
):
    """Check a publish config and the compiled book directories.

    Examples:

        doc-cloud validate publish.json
    """
    try:
        config = PublishConfig.from_file(config_path)
        validate_config(config)
    except DocCloudError as e:
        _fail(e)

    typer.echo(f"OK: {config.name} {config.version} ({len(config.books)} books)")


@app.command()
def manifest(
    config_path: Path = typer.Argument(..., help="Publish config (JSON)"),
    storage: Optional[Path] = typer.Option(
        None, "--storage", "-s", help="Scratch directory (wiped on every run)"
    ),
):
    """Write docs.json for a publish config without packaging.

    Examples:

        doc-cloud manifest publish.json --storage build/.doccloud
    """
    storage = storage or Path(get_settings().scratch_dir)
    try:
        config = PublishConfig.from_file(config_path)
        validate_config(config)
        validate_storage(config, storage)
        reset_storage(storage)
        _, path = persist_manifest(config, storage)
    except DocCloudError as e:
        _fail(e)

    typer.echo(f"Manifest written to {path}")


@app.command()
def publish(
    config_path: Path = typer.Argument(..., help="Publish config (JSON)"),
    storage: Optional[Path] = typer.Option(
        None, "--storage", "-s", help="Scratch directory (wiped on every run)"
    ),
    endpoint: Optional[str] = typer.Option(None, "--endpoint", "-e", help="Doc Cloud URL"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Upload timeout (seconds)"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG, INFO, ..."),
):
    """Validate, package and upload the books of a publish config.

    Examples:

        doc-cloud publish publish.json

        doc-cloud publish publish.json -e https://docs.example.com/api/packages --timeout 300
    """
    settings = get_settings()
    configure_logging(level=log_level or settings.log_level, fmt=settings.log_format)

    storage = storage or Path(settings.scratch_dir)
    uploader = DocCloudUploader(
        endpoint=endpoint or settings.doc_cloud_url,
        timeout=timeout or settings.upload_timeout,
    )
    orchestrator = PublishOrchestrator(settings=settings, uploader=uploader)

    try:
        config = PublishConfig.from_file(config_path)
        result = asyncio.run(
            orchestrator.publish(config, storage, ProgressCounter(on_change=_progress_printer()))
        )
    except DocCloudError as e:
        _fail(e)

    typer.echo(f"Published {result.books_count} books from {result.archive_path}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
