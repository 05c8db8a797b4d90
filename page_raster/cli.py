"""
Command-line interface for page-raster.
"""

import os
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn
from rich.table import Table

from page_raster import __version__
from page_raster.config import RasterSettings
from page_raster.exceptions import PageRasterError
from page_raster.janitor import ResourceJanitor
from page_raster.pipeline import PageRasterizer
from page_raster.renderers import default_renderers
from page_raster.types import PLACEHOLDER_SOURCE
from page_raster.utils import configure_logging, format_file_size

console = Console()


@click.group()
@click.version_option(version=__version__)
def cli():
    """
    page-raster - Convert documents into per-page JPEG images.
    """
    pass


@cli.command(name="convert")
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False))
@click.option(
    '--output-dir', '-o',
    default='./pages',
    help='Directory for the page images',
    type=click.Path(file_okay=False)
)
@click.option(
    '--restricted/--unrestricted',
    default=None,
    help='Force the environment class instead of detecting it'
)
@click.option(
    '--deadline',
    type=click.FloatRange(min=0, min_open=True),
    help='Seconds allowed per page in restricted mode'
)
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def convert(input_file, output_dir, restricted, deadline, verbose):
    """
    Rasterize every page of INPUT_FILE.

    Examples:

        page-raster convert report.pdf

        page-raster convert report.pdf -o out --restricted --deadline 5
    """
    if verbose:
        configure_logging(verbose=True)

    settings = RasterSettings.from_env().with_updates(restricted=restricted, deadline=deadline)
    rasterizer = PageRasterizer(settings)
    pages = []

    try:
        data = Path(input_file).read_bytes()
        name = os.path.basename(input_file)

        mode = "restricted" if settings.is_restricted() else "unrestricted"
        console.print(f"\n[bold cyan]Converting {name} ({mode} environment)...[/bold cyan]")

        with Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task("Rendering pages", total=None)
            pages = rasterizer.split_file_into_pages(data, name)

        output_path = Path(output_dir)
        output_path.mkdir(parents=True, exist_ok=True)

        table = Table(title="Converted Pages")
        table.add_column("Page", style="cyan", justify="right")
        table.add_column("File", style="green")
        table.add_column("Source")
        table.add_column("Size", justify="right")

        for page in pages:
            (output_path / page.file_name).write_bytes(page.buffer or b"")
            source_style = "yellow" if page.source == PLACEHOLDER_SOURCE else "green"
            table.add_row(
                str(page.page_number),
                page.file_name,
                f"[{source_style}]{page.source}[/{source_style}]",
                format_file_size(page.size),
            )

        console.print(table)
        console.print(f"\n[bold green]✓ Wrote {len(pages)} page images[/bold green]")
        console.print(f"[dim]Output directory: {output_path.resolve()}[/dim]\n")

    except PageRasterError as e:
        console.print(f"\n[bold red]✗ Conversion failed:[/bold red] {e}")
        sys.exit(1)
    except Exception as e:
        console.print(f"\n[bold red]✗ Unexpected error:[/bold red] {type(e).__name__}: {e}")
        sys.exit(1)
    finally:
        rasterizer.janitor.full_cleanup(pages)


@cli.command(name="renderers")
def show_renderers():
    """
    Show which rasterization backends are installed.

    Example:

        page-raster renderers
    """
    settings = RasterSettings.from_env()

    table = Table(title="Rasterization Backends")
    table.add_column("Priority", style="cyan", justify="right")
    table.add_column("Renderer", style="cyan")
    table.add_column("Available")
    table.add_column("Executable", style="dim")

    for priority, renderer in enumerate(default_renderers(settings), start=1):
        available = renderer.is_available()
        table.add_row(
            str(priority),
            renderer.name,
            "[green]Yes[/green]" if available else "[red]No[/red]",
            renderer.executable or ", ".join(renderer.executables),
        )

    console.print()
    console.print(table)
    mode = "restricted" if settings.is_restricted() else "unrestricted"
    console.print(f"[dim]Environment: {mode}, deadline {settings.deadline}s[/dim]\n")


@cli.command(name="cleanup")
@click.argument('directory', type=click.Path(file_okay=False), required=False)
@click.option(
    '--pattern', '-p',
    help='Regular expression for file names to delete',
    type=str
)
@click.option(
    '--max-age-hours',
    type=float,
    help='Only delete temp files older than this many hours'
)
def cleanup(directory, pattern, max_age_hours):
    """
    Delete leftover renderer temp files.

    Examples:

        page-raster cleanup

        page-raster cleanup /tmp/page-raster --max-age-hours 24
    """
    settings = RasterSettings.from_env()
    target = Path(directory) if directory else settings.temp_dir
    janitor = ResourceJanitor(target, stale_age_hours=settings.stale_age_hours)

    if max_age_hours is not None:
        deleted = janitor.cleanup_by_age(target, max_age_hours)
    else:
        deleted = janitor.cleanup_by_pattern(target, pattern)

    console.print(f"[bold green]✓ Deleted {deleted} files from {target}[/bold green]")


if __name__ == '__main__':
    cli()
