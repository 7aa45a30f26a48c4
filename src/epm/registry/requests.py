"""low level http helpers shared by registry clients."""
import json
import logging
from typing import Any, Optional
import httpx
from ..domain.errors import RegistryUnavailable, RegistryResponseInvalid
from .client import ProgressCallback

logger = logging.getLogger(__name__)

async def get_response(client: httpx.AsyncClient, url: str) -> httpx.Response:
    """
    open a streamed GET response.

    the body is not read. the caller owns the response and must close it.

    raises:
        RegistryUnavailable: on network errors or a non-2xx status
    """
    logger.debug(f"GET {url}")
    try:
        request = client.build_request("GET", url)
        response = await client.send(request, stream=True)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise RegistryUnavailable(url, e) from e

    try:
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        await response.aclose()
        raise RegistryUnavailable(url, e) from e
    return response

async def fetch_url(client: httpx.AsyncClient, url: str) -> str:
    """GET a url and return the body as text."""
    response = await get_response(client, url)
    try:
        await response.aread()
    except httpx.HTTPError as e:
        raise RegistryUnavailable(url, e) from e
    finally:
        await response.aclose()
    return response.text

async def fetch_json(client: httpx.AsyncClient, url: str) -> Any:
    """GET a url and parse the body as JSON."""
    text = await fetch_url(client, url)
    try:
        return json.loads(text)
    except ValueError as e:
        raise RegistryResponseInvalid(url, e) from e

async def stream_to_buffer(response: httpx.Response, progress: Optional[ProgressCallback] = None) -> bytes:
    """
    drain a streamed response into memory.

    args:
        response: an open streamed response, closed on return
        progress: optional callback receiving (downloaded, total); total is None when unknown
    """
    total = None
    if "content-length" in response.headers:
        total = int(response.headers["content-length"])

    chunks = []
    downloaded = 0
    try:
        async for chunk in response.aiter_bytes():
            chunks.append(chunk)
            downloaded += len(chunk)
            if progress:
                progress(downloaded, total)
    except httpx.HTTPError as e:
        raise RegistryUnavailable(str(response.url), e) from e
    finally:
        await response.aclose()
    return b"".join(chunks)
