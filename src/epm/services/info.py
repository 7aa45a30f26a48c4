from typing import List, Optional
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..archive.grouping import group_paths_by_service
from ..registry.client import RegistryClient
from .archive import ArchiveService

class InfoService:
    """fetches registry data and renders it to the console."""

    def __init__(self, registry_client: RegistryClient, archive_service: ArchiveService, console: Optional[Console] = None):
        self.registry_client = registry_client
        self.archive_service = archive_service
        self.console = console or Console()
        self.progress_manager = archive_service.progress_manager

    async def show_info(self, key: str):
        """
        fetch and display metadata for one package.

        args:
            key: package key, `name-version`
        """
        with self.progress_manager.spinner(f"fetching {key}"):
            package = await self.registry_client.fetch_info(key)

        grid = Table.grid(expand=True)
        grid.add_column(style="bold cyan", justify="right")
        grid.add_column(style="white")

        grid.add_row("Name:", package.name)
        grid.add_row("Version:", package.version)
        if package.title:
            grid.add_row("Title:", package.title)
        grid.add_row("Description:", package.description or "No description provided.")
        if package.type:
            grid.add_row("Type:", package.type)
        if package.categories:
            grid.add_row("Categories:", ", ".join(package.categories))
        grid.add_row("Download:", package.download)

        self.console.print(Panel(grid, title=f"📦 Package Info: {package.pkgkey}", border_style="cyan"))

    async def show_search(self, category: Optional[str] = None):
        with self.progress_manager.spinner("searching the registry"):
            results = await self.registry_client.fetch_list(category)
        if not results:
            self.console.print("[yellow]No packages found.[/yellow]")
            return

        table = Table(title="Packages")
        table.add_column("Name", style="cyan")
        table.add_column("Version")
        table.add_column("Description")
        for result in results:
            table.add_row(result.name, result.version, result.description)
        self.console.print(table)

    async def show_categories(self):
        with self.progress_manager.spinner("fetching categories"):
            categories = await self.registry_client.fetch_categories()
        table = Table(title="Categories")
        table.add_column("Id", style="cyan")
        table.add_column("Title")
        table.add_column("Packages", justify="right")
        for category in categories:
            table.add_row(category.id, category.title, str(category.count))
        self.console.print(table)

    async def show_assets(self, key: str) -> List[str]:
        """download a package archive and list its kibana assets by service and type."""
        paths = await self.archive_service.get_archive_info(key)
        grouped = group_paths_by_service(paths)

        kibana = grouped["kibana"]
        if not kibana:
            self.console.print(f"[yellow]No kibana assets in {key}.[/yellow]")
            return paths

        table = Table(title=f"Kibana assets in {key}")
        table.add_column("Type", style="cyan")
        table.add_column("File")
        table.add_column("Dataset")
        for asset_type, assets in kibana.items():
            for parts in assets:
                table.add_row(asset_type, parts.file, parts.dataset or "")
        self.console.print(table)
        return paths
