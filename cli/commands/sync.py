"""Sync command for running GlotPress sync cycles without the server."""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from cli.commands.serve import configure_logging, load_server_config

app = typer.Typer()
console = Console()


@app.command("once")
def sync_once(
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c", help="YAML configuration file"
    ),
    downloads_path: Optional[Path] = typer.Option(
        None, "--downloads-path", "-d", help="Directory to build language packs into"
    ),
    root_project: Optional[str] = typer.Option(
        None, "--root", "-r", help="Root GlotPress project to walk"
    ),
    show_index: bool = typer.Option(
        True, "--show-index/--no-show-index", help="Print the resulting index"
    ),
):
    """Run a single sync cycle and print what was built."""
    from wc_lang_packs.downloader import RateLimitedClient
    from wc_lang_packs.index import TranslationIndex
    from wc_lang_packs.server import build_synchronizer

    config = load_server_config(
        config_file,
        downloads_path=str(downloads_path) if downloads_path else None,
        root_project=root_project,
    )
    configure_logging(config)

    console.print(f"\n[bold]Syncing GlotPress project: {config.root_project}[/bold]\n")

    index = TranslationIndex()

    async def run_sync():
        async with RateLimitedClient(
            requests_per_minute=config.requests_per_minute,
            timeout=config.request_timeout,
            max_retries=config.max_retries,
            user_agent=config.user_agent,
        ) as client:
            synchronizer = build_synchronizer(config, client, index)
            return await synchronizer.run_cycle()

    stats = asyncio.run(run_sync())

    console.print("\n[bold]Sync Complete![/bold]")
    console.print(f"  Built: {stats.built}")
    console.print(f"  Unchanged: {stats.unchanged}")
    console.print(f"  Failed: {stats.failed}")
    console.print(f"  Projects skipped: {stats.skipped_subtrees}")
    console.print(f"  Duration: {stats.duration_seconds:.1f}s")

    if stats.errors:
        console.print(f"\n[yellow]Errors ({len(stats.errors)}):[/yellow]")
        for error in stats.errors[:10]:
            console.print(f"  - {error}")
        if len(stats.errors) > 10:
            console.print(f"  ... and {len(stats.errors) - 10} more")

    if show_index and len(index):
        table = Table(title="Language Packs")
        table.add_column("Project", style="cyan")
        table.add_column("Version")
        table.add_column("Locale")
        table.add_column("Last modified")
        table.add_column("Package", style="green")

        for slug, versions in sorted(index.dump().items()):
            for version, locales in sorted(versions.items()):
                for locale, t in sorted(locales.items()):
                    table.add_row(slug, version, locale, t["last_modified"], t["package"])

        console.print()
        console.print(table)

    if stats.total_leaves == 0 and stats.errors:
        raise typer.Exit(1)
