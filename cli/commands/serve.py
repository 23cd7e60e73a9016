"""Server command."""

from pathlib import Path
from typing import Optional

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console

app = typer.Typer()
console = Console()


def load_server_config(config_file: Optional[Path], **overrides):
    """Load the server configuration or exit with an error message."""
    from wc_lang_packs.config import ServerConfig

    try:
        return ServerConfig.load(config_file, overrides)
    except FileNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    except (yaml.YAMLError, ValidationError) as e:
        console.print(f"[red]Invalid configuration:[/red]\n{e}")
        raise typer.Exit(1)


def configure_logging(config) -> None:
    """Set up logging from the configuration or exit with an error message."""
    from wc_lang_packs.errors import FilesystemError
    from wc_lang_packs.utils.logging import setup_logging

    try:
        log_path = setup_logging(level=config.log_level, log_file=config.log_file)
    except FilesystemError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    if log_path:
        console.print(f"  Logging to: {log_path}")


@app.command("start")
def start_server(
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c", help="YAML configuration file"
    ),
    host: Optional[str] = typer.Option(None, "--host", "-h", help="Host to bind to"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to listen on"),
    mode: Optional[str] = typer.Option(
        None, "--mode", "-m", help="Check mode, 'poll' or 'notified'"
    ),
    poll_interval: Optional[float] = typer.Option(
        None, "--poll-interval", help="Seconds to sleep between GlotPress polls"
    ),
    downloads_path: Optional[Path] = typer.Option(
        None, "--downloads-path", "-d", help="Directory to build and serve language packs from"
    ),
    gp_url: Optional[str] = typer.Option(None, "--gp-url", help="Root project URL of GlotPress"),
    gp_api_url: Optional[str] = typer.Option(
        None, "--gp-api-url", help="Root API project URL of GlotPress"
    ),
    update_key: Optional[str] = typer.Option(
        None, "--update-key", help="Key to post updates if mode is notified"
    ),
    expose_db: Optional[bool] = typer.Option(
        None, "--expose-db/--no-expose-db", help="Expose /_db to dump the in-memory index"
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level"),
):
    """Start the language packs server."""
    from wc_lang_packs.errors import FilesystemError
    from wc_lang_packs.server import run_server

    config = load_server_config(
        config_file,
        host=host,
        port=port,
        mode=mode,
        poll_interval=poll_interval,
        downloads_path=str(downloads_path) if downloads_path else None,
        gp_url=gp_url,
        gp_api_url=gp_api_url,
        update_key=update_key,
        expose_db=expose_db,
        log_level=log_level,
    )
    configure_logging(config)

    console.print("\n[bold]Starting Language Packs Server[/bold]\n")
    console.print(f"  Listening at: {config.host}:{config.port}")
    console.print(f"  Update mode: {config.mode}")
    if config.mode == "poll":
        console.print(f"  Poll interval: {config.poll_interval:g}s")
    console.print(f"  Serving /downloads/ from: {config.downloads_path}")
    console.print()

    try:
        run_server(config)
    except FilesystemError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
