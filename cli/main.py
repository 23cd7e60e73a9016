"""Main CLI entry point for the WooCommerce Language Packs Server."""

import typer
from rich.console import Console
from rich.table import Table

from cli.commands import serve, sync

# Create main app
app = typer.Typer(
    name="wc-lang-packs",
    help="WooCommerce language packs built from GlotPress translations",
    add_completion=False,
)

console = Console()

# Add command groups
app.add_typer(serve.app, name="serve", help="Run the language packs server")
app.add_typer(sync.app, name="sync", help="Sync language packs from GlotPress")


@app.command()
def version():
    """Show version information."""
    from wc_lang_packs import __version__

    console.print(f"wc-lang-packs version {__version__}")


@app.command()
def locales(
    locale: str = typer.Argument(None, help="Show a single WordPress locale (e.g. 'es_ES')"),
):
    """List the known GlotPress locales."""
    from wc_lang_packs.locales import LOCALES, get_locale

    if locale:
        definition = get_locale(locale)
        if definition is None:
            console.print(f"[red]Unknown locale: {locale}[/red]")
            raise typer.Exit(1)
        rows = [definition]
    else:
        rows = list(LOCALES.values())

    table = Table(title="GlotPress Locales")
    table.add_column("WP locale", style="cyan")
    table.add_column("English name")
    table.add_column("Native name")
    table.add_column("ISO 639-1/2/3")

    for row in rows:
        table.add_row(
            row.wp_locale,
            row.english_name,
            row.native_name,
            "/".join(
                [row.lang_code_iso_639_1, row.lang_code_iso_639_2, row.lang_code_iso_639_3]
            ),
        )

    console.print(table)


if __name__ == "__main__":
    app()
