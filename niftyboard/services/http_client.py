# niftyboard/services/http_client.py
import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp

from niftyboard import config

logger = logging.getLogger(__name__)


def is_retryable_status(status: Optional[int]) -> bool:
    return status is not None and (status == 429 or status >= 500)


class ProviderError(Exception):
    """Raised when an upstream data source cannot produce usable data."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class HttpClient:
    def __init__(self, timeout: int = 10, retries: int = 2, backoff: float = 0.5):
        self.timeout = timeout
        self.retries = retries
        self.backoff = backoff
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        # One session per client so cookies (NSE) survive between calls
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout))
        return self._session

    async def get_json(self, url: str, params: Dict[str, Any] | None = None, headers: Dict[str, str] | None = None) -> Any:
        session = await self._get_session()
        attempt = 0
        while True:
            try:
                async with session.get(url, params=params, headers=headers) as resp:
                    if is_retryable_status(resp.status) and attempt < self.retries:
                        raise ProviderError(f"HTTP {resp.status} from {url}", status=resp.status)
                    if resp.status >= 400:
                        detail = await resp.text()
                        raise ProviderError(f"Error {resp.status}: {detail[:200] or 'Unknown error'}", status=resp.status)
                    if not (await resp.text()).strip():
                        raise ProviderError(f"Empty response from {url}", status=resp.status)
                    try:
                        return await resp.json(content_type=None)
                    except ValueError as e:
                        raise ProviderError(f"Invalid JSON from {url}: {e}", status=resp.status)
            except (aiohttp.ClientError, asyncio.TimeoutError, ProviderError) as e:
                retryable = not isinstance(e, ProviderError) or is_retryable_status(e.status)
                attempt += 1
                if not retryable or attempt > self.retries:
                    if isinstance(e, ProviderError):
                        raise
                    raise ProviderError(str(e) or e.__class__.__name__) from e
                logger.debug("[HttpClient] Retry %d for %s after: %s", attempt, url, e)
                await asyncio.sleep(self.backoff * attempt)

    async def warm_up(self, url: str, headers: Dict[str, str] | None = None) -> None:
        """Hit a page only to collect its cookies."""
        session = await self._get_session()
        try:
            async with session.get(url, headers=headers) as resp:
                await resp.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ProviderError(f"Warm-up failed for {url}: {e}") from e

    async def close(self):
        if self._session and not self._session.closed:
            await self._session.close()


http_client = HttpClient(
    timeout=config.HTTP_TIMEOUT_SECONDS,
    retries=config.HTTP_RETRY_COUNT,
    backoff=config.HTTP_RETRY_BACKOFF,
)
