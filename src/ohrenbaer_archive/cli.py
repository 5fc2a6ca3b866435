"""CLI entry point for the Ohrenbär archive."""

import asyncio
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn

from ohrenbaer_archive.catalog import load_catalog, merge_catalog, save_catalog
from ohrenbaer_archive.config.logging import setup_logging
from ohrenbaer_archive.config.schema import (
    DEFAULT_CATALOG_FILE,
    DEFAULT_DOWNLOAD_DIR,
    DEFAULT_PARALLELISM,
    DownloadOptions,
    ScrapeOptions,
)
from ohrenbaer_archive.pipeline import DownloadScheduler, ProgressReporter, RunResult
from ohrenbaer_archive.scraper import OhrenbaerScraper
from ohrenbaer_archive.utils.errors import (
    ArchiveError,
    CatalogError,
    FatalStartupError,
)

app = typer.Typer(
    name="ohrenbaer",
    help="Scrape the Ohrenbär podcast catalog and keep a local archive in sync",
    no_args_is_help=True,
)
console = Console()
# Shared by progress bars and log records
err_console = Console(stderr=True)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose (DEBUG) logging"
    ),
    log_file: Path | None = typer.Option(
        None, "--log-file", help="Write logs to file"
    ),
) -> None:
    """Ohrenbär archive - scrape episode metadata and download the episodes."""
    setup_logging(verbose=verbose, log_file=log_file, console=err_console)


@app.command("version")
def show_version() -> None:
    """Show version information."""
    from ohrenbaer_archive import __version__

    console.print(f"[bold cyan]Ohrenbär archive[/bold cyan] v{__version__}")


@app.command("scrape")
def scrape_command(
    output: Path = typer.Option(
        DEFAULT_CATALOG_FILE, "--output", "-o", help="Catalog JSON file to merge into"
    ),
    no_headless: bool = typer.Option(
        False, "--no-headless", help="Do not run the browser in headless mode"
    ),
) -> None:
    """Scrape the podcast page and merge new episodes into the catalog.

    Episodes already in the catalog are kept unchanged; new ones are appended.

    Examples:
        ohrenbaer scrape

        ohrenbaer scrape -o my-podcasts.json
    """
    options = ScrapeOptions(output=output, headless=not no_headless)

    async def run_scrape() -> None:
        try:
            # Fail on a broken catalog before launching a browser
            existing = load_catalog(options.output)

            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                MofNCompleteColumn(),
                console=err_console,
            ) as progress:
                task = progress.add_task("Scraping podcasts...", total=None)
                scraper = OhrenbaerScraper(
                    options,
                    on_article=lambda current, total: progress.update(
                        task, completed=current, total=total
                    ),
                )
                records = await scraper.scrape()

            result = merge_catalog(existing, records)
            save_catalog(options.output, result.catalog)

            console.print(
                f"[green]✓[/green] Saved {len(result.catalog)} podcasts to "
                f"{options.output.resolve()} ({result.added_count} new)"
            )

        except KeyboardInterrupt:
            console.print("\n[yellow]Cancelled by user[/yellow]")
            sys.exit(130)
        except ArchiveError as e:
            console.print(f"[red]✗[/red] Error: {escape(str(e))}")
            sys.exit(1)

    asyncio.run(run_scrape())


def _print_summary(result: RunResult, dry_run: bool) -> None:
    counts = ", ".join(f"{count} {status}" for status, count in result.status_counts().items())
    heading = "Dry run complete!" if dry_run else "Downloads complete!"
    console.print(f"\n[green]✓[/green] {heading} Processed {result.total} podcasts ({counts})")

    if result.failed_count:
        console.print(
            f"[yellow]⚠[/yellow] {result.failed_count} failed - see the log for details"
        )


@app.command("download")
def download_command(
    input_file: Path = typer.Option(
        DEFAULT_CATALOG_FILE,
        "--input",
        "-i",
        help="JSON file containing podcast information (title, releaseDate, downloadLink)",
    ),
    download_dir: Path = typer.Option(
        DEFAULT_DOWNLOAD_DIR,
        "--download-dir",
        "-d",
        help="Directory where podcast files will be saved",
    ),
    filter_pattern: str | None = typer.Option(
        None, "--filter", "-f", help="Case-insensitive regex pattern to filter podcast titles"
    ),
    parallel: int = typer.Option(
        DEFAULT_PARALLELISM,
        "--parallel",
        "-p",
        min=1,
        help="Number of podcasts to download simultaneously",
    ),
    force: bool = typer.Option(
        False, "--force", help="Overwrite existing files instead of skipping them"
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Do not download anything, just print the URLs"
    ),
    convert: bool = typer.Option(
        False,
        "--convert",
        "-c",
        help="Convert the downloaded files to M4A (AAC) to save space (requires ffmpeg)",
    ),
) -> None:
    """Download the podcasts listed in the catalog.

    Existing files are skipped unless --force is given. Failed downloads are
    logged and do not stop the remaining downloads.

    Examples:
        ohrenbaer download -i podcasts.json

        ohrenbaer download -d my-podcasts -f "Märchen"

        ohrenbaer download -p 5 --force
    """
    options = DownloadOptions(
        download_dir=download_dir,
        filter_pattern=filter_pattern,
        parallelism=parallel,
        force=force,
        dry_run=dry_run,
        convert=convert,
    )

    async def run_download() -> None:
        try:
            if not input_file.exists():
                raise CatalogError(f"Catalog file not found: {input_file}")
            catalog = load_catalog(input_file)

            scheduler = DownloadScheduler(options)
            records = scheduler.prepare(catalog)
            if not records:
                console.print("[yellow]No podcasts to download[/yellow]")
                return

            with ProgressReporter(total=len(records), console=err_console) as reporter:
                scheduler.reporter = reporter
                result = await scheduler.run_records(records)

            _print_summary(result, dry_run=options.dry_run)

        except KeyboardInterrupt:
            console.print("\n[yellow]Cancelled by user[/yellow]")
            sys.exit(130)
        except FatalStartupError as e:
            console.print(f"[red]✗[/red] Error: {escape(str(e))}")
            sys.exit(1)

    asyncio.run(run_download())


if __name__ == "__main__":
    app()
