import asyncio
import logging
from typing import Dict, List, Optional
from ..archive.extract import EntryFilter, untar_buffer
from ..archive.paths import parse_path
from ..domain.errors import ArchiveUnavailable, AssetNotFound, RegistryResponseInvalid, RegistryUnavailable
from ..domain.models import ArchiveEntry, archive_key
from ..registry.cache import ContentCache
from ..registry.client import RegistryClient
from ..ui.progress import ProgressManager

logger = logging.getLogger(__name__)

class ArchiveService:
    """fetches package archives, extracts them and keeps their files in the content cache."""

    def __init__(
        self,
        registry_client: RegistryClient,
        cache: ContentCache,
        progress_manager: ProgressManager = None
    ):
        self.registry_client = registry_client
        self.cache = cache
        self.progress_manager = progress_manager or ProgressManager()
        self._inflight: Dict[str, "asyncio.Future[bytes]"] = {}

    async def get_archive_info(self, pkgkey: str, filter: Optional[EntryFilter] = None) -> List[str]:
        """
        extract a package archive and cache the files it contains.

        args:
            pkgkey: package key, `name-version`
            filter: optional predicate over archive entries, defaults to accepting everything

        returns:
            paths of the cached files, in archive order. directories are never included.
        """
        paths: List[str] = []

        def on_entry(entry: ArchiveEntry):
            parts = parse_path(entry.path)
            if not parts.file:
                return
            if entry.buffer is not None:
                self.cache.set(entry.path, entry.buffer)
                paths.append(entry.path)

        buffer = await self.get_or_fetch_archive_buffer(pkgkey)
        await untar_buffer(buffer, filter, on_entry)
        return paths

    async def get_or_fetch_archive_buffer(self, pkgkey: str) -> bytes:
        key = archive_key(pkgkey)
        buffer = self.cache.get(key)
        if buffer:
            logger.debug(f"cache hit for {key}")
            return buffer

        # one fetch in flight per key, concurrent callers share its result
        task = self._inflight.get(key)
        if task is None or task.done():
            logger.debug(f"cache miss for {key}")
            task = asyncio.ensure_future(self._fetch_and_cache(pkgkey, key))
            self._inflight[key] = task
        try:
            return await asyncio.shield(task)
        finally:
            if task.done() and self._inflight.get(key) is task:
                del self._inflight[key]

    async def _fetch_and_cache(self, pkgkey: str, key: str) -> bytes:
        buffer = await self._fetch_archive_buffer(pkgkey)
        if not buffer:
            raise ArchiveUnavailable(pkgkey)
        self.cache.set(key, buffer)
        return buffer

    def get_asset(self, key: str) -> bytes:
        """get a cached file. get_archive_info must have cached it first."""
        buffer = self.cache.get(key)
        if buffer is None:
            raise AssetNotFound(key)
        return buffer

    async def _fetch_archive_buffer(self, pkgkey: str) -> bytes:
        try:
            package = await self.registry_client.fetch_info(pkgkey)
            with self.progress_manager.download_progress() as progress:
                task_id = progress.add_task(f"downloading {pkgkey}", total=None)

                def on_progress(downloaded: int, total: Optional[int]):
                    progress.update(task_id, completed=downloaded, total=total)

                return await self.registry_client.fetch_archive(package.download, on_progress)
        except (RegistryUnavailable, RegistryResponseInvalid) as e:
            raise ArchiveUnavailable(pkgkey, e) from e
