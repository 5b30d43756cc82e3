"""CLI for component prop documentation."""

import logging
import sys
from pathlib import Path
from typing import Dict, List, Tuple

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from propdoc.config import load_config
from propdoc.crawler import FileCrawler
from propdoc.errors import PropDocError
from propdoc.exporters import JSONExporter
from propdoc.pipeline import DocumentationParser, ParseResult

console = Console(stderr=True)


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True
    )


def collect_files(paths: Tuple[str, ...], crawler_options: dict) -> List[Path]:
    """Expand directories into the component files below them."""
    files: List[Path] = []
    for path in map(Path, paths):
        if path.is_dir():
            crawler = FileCrawler(path, **crawler_options)
            crawled = crawler.get_all_files()
            stats = crawler.get_stats(crawled)
            console.print(f"✓ Found {stats['total_files']} component files in {path}")
            files.extend(crawled_file.path for crawled_file in crawled)
        else:
            files.append(path)
    return files


@click.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True))
@click.option("--config", default=None, help="Path to configuration file")
@click.option("--out", default=None, type=click.Path(), help="Write JSON to this file instead of stdout")
@click.option("--pretty", is_flag=True, default=False, help="Indent the JSON output")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Show resolution details")
def main(paths: Tuple[str, ...], config: str, out: str, pretty: bool, verbose: bool) -> None:
    """Extract prop documentation from Flow-typed components.

    PATHS may be component files or directories to scan.
    """
    setup_logging(verbose)
    cfg = load_config(config)

    files = collect_files(paths, {
        "ignore_patterns": cfg.crawl.ignore_patterns,
        "extensions": cfg.crawl.extensions,
        "max_file_size_mb": cfg.crawl.max_file_size_mb,
    })
    if not files:
        console.print("[yellow]No component files found[/yellow]")
        sys.exit(1)

    parser = DocumentationParser(cfg)
    results: List[ParseResult] = []
    errors: Dict[str, str] = {}

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True
    ) as progress:
        task = progress.add_task("[cyan]Documenting components...", total=len(files))
        for file_path in files:
            progress.update(task, description=f"[cyan]Documenting {file_path.name}...")
            try:
                results.append(parser.parse_file(file_path))
            except PropDocError as e:
                errors[str(file_path)] = str(e)
                console.print(f"[yellow]Warning: {e}[/yellow]")
            progress.advance(task)

    exporter = JSONExporter(cfg.export)
    if out:
        exporter.export(results, Path(out), errors, pretty=pretty or None)
    else:
        click.echo(exporter.dumps(results, errors, pretty=pretty or None))

    table = Table(title="Documented Components")
    table.add_column("File", style="cyan")
    table.add_column("Component")
    table.add_column("Props", justify="right", style="green")
    table.add_column("Composes")
    for result in results:
        for documentation in result.documentations:
            table.add_row(
                Path(result.path).name,
                documentation.display_name or "<anonymous>",
                str(len(documentation.props)),
                ", ".join(sorted(documentation.composes))
            )
    console.print(table)

    if out:
        console.print(f"[dim]Results saved to: {Path(out).absolute()}[/dim]")

    if not results:
        console.print("[bold red]Error: every file failed[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
