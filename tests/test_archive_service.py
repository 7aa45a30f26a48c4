"""test suite for ArchiveService."""
import asyncio
import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from epm.services.archive import ArchiveService
from epm.registry.cache import ContentCache
from epm.registry.http import HttpRegistry
from epm.domain.errors import ArchiveUnavailable, AssetNotFound, DecodeError, RegistryUnavailable
from epm.domain.models import RegistryPackage

SYSTEM_PACKAGE = RegistryPackage(
    name="system",
    version="1.2.0",
    download="/epr/system/system-1.2.0.tar.gz",
)


class TestArchiveService:
    @pytest.fixture
    def registry(self, system_archive):
        registry = MagicMock()
        registry.fetch_info = AsyncMock(return_value=SYSTEM_PACKAGE)
        registry.fetch_archive = AsyncMock(return_value=system_archive)
        return registry

    @pytest.fixture
    def cache(self):
        return ContentCache()

    @pytest.fixture
    def service(self, registry, cache):
        return ArchiveService(registry, cache)

    def test_returns_files_not_directories(self, service, registry):
        paths = asyncio.run(service.get_archive_info("system-1.2.0"))

        assert paths == ["system-1.2.0/kibana/dashboard/sample.json"]
        registry.fetch_info.assert_awaited_once_with("system-1.2.0")
        assert registry.fetch_archive.await_args.args[0] == "/epr/system/system-1.2.0.tar.gz"

    def test_caches_archive_and_files(self, service, cache, system_archive):
        asyncio.run(service.get_archive_info("system-1.2.0"))

        assert cache.get("system-1.2.0.tar.gz") == system_archive
        assert cache.get("system-1.2.0/kibana/dashboard/sample.json") == b'{"title": "sample"}'
        assert not cache.has("system-1.2.0/kibana/dashboard/")

    def test_second_call_uses_cache(self, service, registry):
        first = asyncio.run(service.get_archive_info("system-1.2.0"))
        second = asyncio.run(service.get_archive_info("system-1.2.0"))

        assert first == second
        assert registry.fetch_info.await_count == 1
        assert registry.fetch_archive.await_count == 1

    def test_filter_limits_cached_paths(self, service, cache, registry, make_archive):
        registry.fetch_archive.return_value = make_archive({
            "nginx-1.0.0/manifest.yml": b"name: nginx\n",
            "nginx-1.0.0/kibana/dashboard/a.json": b"{}",
            "nginx-1.0.0/kibana/visualization/b.json": b"{}",
        })

        paths = asyncio.run(service.get_archive_info(
            "nginx-1.0.0",
            lambda entry: "/dashboard/" in entry.path,
        ))

        assert paths == ["nginx-1.0.0/kibana/dashboard/a.json"]
        assert not cache.has("nginx-1.0.0/kibana/visualization/b.json")

    def test_get_asset_before_fetch(self, service):
        with pytest.raises(AssetNotFound) as exc_info:
            service.get_asset("system-1.2.0/kibana/dashboard/sample.json")
        assert exc_info.value.key == "system-1.2.0/kibana/dashboard/sample.json"

    def test_get_asset_after_fetch(self, service):
        asyncio.run(service.get_archive_info("system-1.2.0"))
        assert service.get_asset("system-1.2.0/kibana/dashboard/sample.json") == b'{"title": "sample"}'

    def test_concurrent_fetches_coalesced(self, service, registry, system_archive):
        async def slow_download(path, progress=None):
            await asyncio.sleep(0.01)
            return system_archive

        registry.fetch_archive = AsyncMock(side_effect=slow_download)

        async def fetch_twice():
            return await asyncio.gather(
                service.get_archive_info("system-1.2.0"),
                service.get_archive_info("system-1.2.0"),
            )

        first, second = asyncio.run(fetch_twice())

        assert first == second == ["system-1.2.0/kibana/dashboard/sample.json"]
        assert registry.fetch_archive.await_count == 1
        assert service._inflight == {}

    def test_concurrent_failures_across_event_loops(self, service, registry):
        """a failed shared fetch leaves nothing behind for the next event loop."""
        async def slow_empty_download(path, progress=None):
            await asyncio.sleep(0.01)
            return b""

        registry.fetch_archive = AsyncMock(side_effect=slow_empty_download)

        async def fetch_twice():
            return await asyncio.gather(
                service.get_archive_info("system-1.2.0"),
                service.get_archive_info("system-1.2.0"),
                return_exceptions=True,
            )

        for round_number in (1, 2):
            results = asyncio.run(fetch_twice())
            assert all(isinstance(r, ArchiveUnavailable) for r in results)
            assert registry.fetch_archive.await_count == round_number
            assert service._inflight == {}


class TestArchiveServiceErrors:
    def test_empty_download(self):
        registry = MagicMock()
        registry.fetch_info = AsyncMock(return_value=SYSTEM_PACKAGE)
        registry.fetch_archive = AsyncMock(return_value=b"")
        cache = ContentCache()
        service = ArchiveService(registry, cache)

        with pytest.raises(ArchiveUnavailable) as exc_info:
            asyncio.run(service.get_archive_info("system-1.2.0"))

        assert exc_info.value.pkgkey == "system-1.2.0"
        assert not cache.has("system-1.2.0.tar.gz")

    def test_registry_failure(self):
        cause = RegistryUnavailable("http://registry.test/package/system-1.2.0")
        registry = MagicMock()
        registry.fetch_info = AsyncMock(side_effect=cause)
        service = ArchiveService(registry, ContentCache())

        with pytest.raises(ArchiveUnavailable) as exc_info:
            asyncio.run(service.get_archive_info("system-1.2.0"))

        assert exc_info.value.cause is cause

    def test_corrupt_archive(self):
        registry = MagicMock()
        registry.fetch_info = AsyncMock(return_value=SYSTEM_PACKAGE)
        registry.fetch_archive = AsyncMock(return_value=b"not an archive")
        service = ArchiveService(registry, ContentCache())

        with pytest.raises(DecodeError):
            asyncio.run(service.get_archive_info("system-1.2.0"))


class TestArchiveServiceOverHttp:
    """the registry scenario end to end, counting requests at the transport."""

    def test_system_package(self, system_archive):
        requests = []

        def handler(request):
            requests.append(request.url.path)
            if request.url.path == "/package/system-1.2.0":
                return httpx.Response(200, json={
                    "name": "system",
                    "version": "1.2.0",
                    "download": "/epr/system/system-1.2.0.tar.gz",
                })
            if request.url.path == "/epr/system/system-1.2.0.tar.gz":
                return httpx.Response(200, content=system_archive)
            return httpx.Response(404)

        async def run():
            async with HttpRegistry("http://registry.test", transport=httpx.MockTransport(handler)) as registry:
                service = ArchiveService(registry, ContentCache())
                first = await service.get_archive_info("system-1.2.0")
                second = await service.get_archive_info("system-1.2.0")
                return first, second, service.get_asset(first[0])

        first, second, asset = asyncio.run(run())

        assert first == second == ["system-1.2.0/kibana/dashboard/sample.json"]
        assert asset == b'{"title": "sample"}'
        assert requests == ["/package/system-1.2.0", "/epr/system/system-1.2.0.tar.gz"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
