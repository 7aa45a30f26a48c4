import logging
from typing import Callable, List, Optional, Union
import httpx
from pydantic import TypeAdapter, ValidationError
from ..config import get_registry_url, get_request_timeout
from ..domain.errors import RegistryResponseInvalid
from ..domain.models import CategorySummaryItem, RegistryPackage, RegistrySearchResult
from .client import RegistryClient, ProgressCallback
from .requests import fetch_json, get_response, stream_to_buffer

logger = logging.getLogger(__name__)

_search_results = TypeAdapter(List[RegistrySearchResult])
_categories = TypeAdapter(List[CategorySummaryItem])

class HttpRegistry(RegistryClient):
    """
    client for a package registry served over plain http.

    the base url is looked up on every call so a changed configuration takes
    effect without rebuilding the client.
    """

    def __init__(
        self,
        registry_url: Union[str, Callable[[], str]] = get_registry_url,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._registry_url = registry_url
        if timeout is None:
            timeout = get_request_timeout()
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            transport=transport,
            follow_redirects=True,
        )

    @property
    def base_url(self) -> str:
        url = self._registry_url() if callable(self._registry_url) else self._registry_url
        return url.rstrip("/")

    async def fetch_list(self, category: Optional[str] = None) -> List[RegistrySearchResult]:
        url = f"{self.base_url}/search"
        if category:
            url = f"{url}?{httpx.QueryParams({'category': category})}"
        data = await fetch_json(self.client, url)
        return self._validate(_search_results.validate_python, data, url)

    async def fetch_info(self, key: str) -> RegistryPackage:
        url = f"{self.base_url}/package/{key}"
        data = await fetch_json(self.client, url)
        return self._validate(RegistryPackage.model_validate, data, url)

    async def fetch_file(self, file_path: str) -> httpx.Response:
        return await get_response(self.client, f"{self.base_url}{file_path}")

    async def fetch_categories(self) -> List[CategorySummaryItem]:
        url = f"{self.base_url}/categories"
        data = await fetch_json(self.client, url)
        return self._validate(_categories.validate_python, data, url)

    async def fetch_archive(self, file_path: str, progress: Optional[ProgressCallback] = None) -> bytes:
        url = f"{self.base_url}{file_path}"
        logger.info(f"downloading {url}")
        response = await get_response(self.client, url)
        return await stream_to_buffer(response, progress)

    async def aclose(self):
        await self.client.aclose()

    async def __aenter__(self) -> "HttpRegistry":
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    @staticmethod
    def _validate(validate, data, url: str):
        try:
            return validate(data)
        except ValidationError as e:
            raise RegistryResponseInvalid(url, e) from e
