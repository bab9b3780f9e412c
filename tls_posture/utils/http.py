from __future__ import annotations

import logging
import time
from typing import Optional

import httpx

from .. import __version__
from ..errors import TransportError

logger = logging.getLogger(__name__)


class HttpClient:
    def __init__(
        self,
        timeout_seconds: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.timeout = httpx.Timeout(timeout_seconds)
        self.follow_redirects = False
        self._client = httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=self.follow_redirects,
            headers={"User-Agent": f"tls-posture/{__version__}"},
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def get(self, url: str, params: Optional[dict] = None) -> httpx.Response:
        return await self.request("GET", url, params=params)

    async def request(self, method: str, url: str, params: Optional[dict] = None) -> httpx.Response:
        method = method.upper()
        start = time.monotonic()
        try:
            async with self._client.stream(method, url, params=params) as resp:
                try:
                    await resp.aread()
                except httpx.HTTPError as exc:
                    raise TransportError(f"error reading response: {exc}") from exc
        except TransportError:
            raise
        except httpx.TimeoutException as exc:
            raise TransportError(f"request timed out after {self.timeout.read}s: {url}") from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"connection error: {exc}") from exc

        logger.debug(
            "http request",
            extra={
                "url": str(resp.request.url),
                "method": method,
                "status": resp.status_code,
                "bytes_in": len(resp.content),
                "duration_ms": int((time.monotonic() - start) * 1000),
            },
        )
        return resp
