import logging
from typing import Any, Optional

import httpx

from .exceptions import FeedAPIError, FeedConnectionError, FeedError

logger = logging.getLogger("reelfeed")

DEFAULT_TIMEOUT = 15.0


class HttpTransport:
    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._timeout = timeout
        self._http_client: Optional[httpx.AsyncClient] = client

    def _get_http_client(self) -> httpx.AsyncClient:
        if self._http_client is None or self._http_client.is_closed:
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                follow_redirects=True,
            )
        return self._http_client

    @property
    def client(self) -> httpx.AsyncClient:
        return self._get_http_client()

    async def request_json(
        self,
        method: str,
        url: str,
        json: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        response = await self._send(
            method,
            url,
            json=json,
            params=params,
            headers={"Accept": "application/json", **(headers or {})},
        )
        if not response.content:
            body: Any = None
        else:
            try:
                body = response.json()
            except ValueError:
                body = response.text
        if response.status_code >= 400:
            message = None
            if isinstance(body, dict):
                message = body.get("message")
            raise FeedAPIError(
                message or f"Request failed ({response.status_code})",
                status_code=response.status_code,
                detail=body,
            )
        return body

    async def get_text(
        self,
        url: str,
        headers: Optional[dict[str, str]] = None,
    ) -> Optional[httpx.Response]:
        """Fetch a text resource. Returns None for non-2xx responses."""
        response = await self._send("GET", url, headers=headers)
        if not response.is_success:
            logger.debug(f"[Transport] GET {url} -> {response.status_code}")
            return None
        return response

    async def _send(
        self,
        method: str,
        url: str,
        json: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> httpx.Response:
        client = self._get_http_client()
        try:
            return await client.request(
                method=method,
                url=url,
                json=json,
                params=params,
                headers=headers,
            )
        except httpx.ConnectError as e:
            logger.error(f"Failed to connect to {url}: {e}")
            raise FeedConnectionError(
                "Network request failed. Please check your internet connection."
            ) from e
        except httpx.TimeoutException as e:
            logger.error(f"Request to {url} timed out: {e}")
            raise FeedConnectionError(
                f"Request timed out after {self._timeout}s"
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Unexpected transport error for {url}: {e}")
            raise FeedError(f"Unexpected error: {e}") from e
        except (httpx.InvalidURL, ValueError) as e:
            logger.warning(f"Invalid request URL {url!r}: {e}")
            raise FeedError(f"Invalid URL: {url}") from e

    async def close(self) -> None:
        if self._http_client and not self._http_client.is_closed:
            await self._http_client.aclose()
            self._http_client = None
