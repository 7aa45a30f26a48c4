from abc import ABC, abstractmethod
from typing import Callable, List, Optional
import httpx
from ..domain.models import CategorySummaryItem, RegistryPackage, RegistrySearchResult

ProgressCallback = Callable[[int, Optional[int]], None]

class RegistryClient(ABC):
    @abstractmethod
    async def fetch_list(self, category: Optional[str] = None) -> List[RegistrySearchResult]:
        """Search the registry, optionally restricted to one category."""
        pass

    @abstractmethod
    async def fetch_info(self, key: str) -> RegistryPackage:
        """Get metadata for a package by its `name-version` key."""
        pass

    @abstractmethod
    async def fetch_file(self, file_path: str) -> httpx.Response:
        """Open a streamed response for a registry-relative file. The caller closes it."""
        pass

    @abstractmethod
    async def fetch_categories(self) -> List[CategorySummaryItem]:
        """List the registry's categories."""
        pass

    @abstractmethod
    async def fetch_archive(self, file_path: str, progress: Optional[ProgressCallback] = None) -> bytes:
        """Download a registry-relative file into memory."""
        pass
