import typer
from rich.console import Console
from rich.table import Table

from .. import config

app = typer.Typer()
console = Console()


@app.command("set-url")
def set_url(url: str):
    """set the registry base URL used by every command."""
    try:
        config.set_registry_url(url)
    except RuntimeError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    console.print(f"[green]Registry URL set to {config.get_registry_url()}[/green]")


@app.command("show")
def show():
    """show the active configuration."""
    max_bytes = config.get_cache_max_bytes()

    table = Table(show_header=False)
    table.add_column(style="bold cyan")
    table.add_column()
    table.add_row("Config file", str(config.CONFIG_FILE))
    table.add_row("Registry URL", config.get_registry_url())
    table.add_row("Request timeout", f"{config.get_request_timeout()}s")
    table.add_row("Cache limit", f"{max_bytes} bytes" if max_bytes is not None else "unbounded")
    console.print(table)
