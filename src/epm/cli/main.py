import typer
import asyncio
import logging
from typing import Awaitable, Callable
from rich.console import Console

from ..config import get_cache_max_bytes
from ..domain.errors import EpmError
from ..registry.cache import ContentCache
from ..registry.http import HttpRegistry
from ..services.archive import ArchiveService
from ..services.info import InfoService
from ..ui.progress import ProgressManager
from .config_commands import app as config_app

app = typer.Typer()
console = Console()

app.add_typer(config_app, name="config", help="Show or change the registry configuration")

def _run(action: Callable[[InfoService], Awaitable[None]]):
    """build the services, run one async action against them and close the http client."""
    async def runner():
        registry_client = HttpRegistry()
        try:
            cache = ContentCache(max_bytes=get_cache_max_bytes())
            archive_service = ArchiveService(registry_client, cache, ProgressManager(console))
            await action(InfoService(registry_client, archive_service, console))
        finally:
            await registry_client.aclose()

    try:
        asyncio.run(runner())
    except EpmError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

@app.callback()
def main_callback(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log registry and cache activity")):
    """browse packages in a package registry."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

@app.command()
def search(category: str = typer.Option(None, "--category", "-c", help="Only show packages in this category")):
    """search the registry for packages."""
    _run(lambda service: service.show_search(category))

@app.command()
def categories():
    """list the registry's categories."""
    _run(lambda service: service.show_categories())

@app.command()
def info(key: str = typer.Argument(..., help="Package key, name-version")):
    """show information about a package."""
    _run(lambda service: service.show_info(key))

@app.command()
def assets(key: str = typer.Argument(..., help="Package key, name-version")):
    """download a package and list its kibana assets."""
    _run(lambda service: service.show_assets(key))

@app.command()
def cat(
    key: str = typer.Argument(..., help="Package key, name-version"),
    path: str = typer.Argument(..., help="Path of the file inside the archive"),
):
    """print one file from a package archive."""
    async def show_file(service: InfoService):
        archive_service = service.archive_service
        await archive_service.get_archive_info(key, lambda entry: entry.path == path)
        buffer = archive_service.get_asset(path)
        typer.echo(buffer.decode("utf-8", errors="replace"), nl=False)

    _run(show_file)

if __name__ == "__main__":
    app()
