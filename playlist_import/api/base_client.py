"""
Base HTTP client shared by the platform fetchers and the catalog search clients.
Includes async HTTP session, retry logic, rate limiting and error mapping.
"""

import asyncio
import logging
from typing import Dict, Any, Optional

import aiohttp
import backoff

from playlist_import.utils.rate_limiter import RateLimiter
from playlist_import.utils.cache_manager import CacheManager

logger = logging.getLogger(__name__)

BROWSER_USER_AGENT = "Mozilla/5.0"


class APIError(Exception):
    """Base exception for API errors."""
    pass


class RateLimitError(APIError):
    """Exception raised when rate limit is exceeded."""
    pass


class HTTPStatusError(APIError):
    """Exception raised for a non-success HTTP status."""

    def __init__(self, status: int, url: str):
        super().__init__(f"HTTP {status} for {url}")
        self.status = status
        self.url = url


class BaseAPIClient:
    """Base class for all outbound HTTP clients."""

    def __init__(self, base_url: str = "", rate_limit: int = 100,
                 cache_manager: Optional[CacheManager] = None,
                 timeout: int = 30, max_retry_after: int = 5):
        self.base_url = base_url.rstrip("/")
        self.rate_limiter = RateLimiter(rate_limit)
        self.cache_manager = cache_manager
        self.timeout = timeout
        self.max_retry_after = max_retry_after
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        """Async context manager entry."""
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def _ensure_session(self):
        """Ensure HTTP session is created."""
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout))

    async def close(self):
        """Close the HTTP session."""
        if self.session and not self.session.closed:
            await self.session.close()

    def _build_url(self, endpoint: str) -> str:
        if endpoint.startswith("http://") or endpoint.startswith("https://"):
            return endpoint
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    @backoff.on_exception(
        backoff.expo,
        (aiohttp.ClientConnectionError, asyncio.TimeoutError),
        max_tries=3,
        max_time=60
    )
    async def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        as_text: bool = False
    ) -> Any:
        """
        Make an HTTP request with retry logic and rate limiting.

        Args:
            method: HTTP method
            endpoint: Path relative to ``base_url`` or an absolute URL
            params: Query parameters
            headers: Extra request headers
            as_text: Return the body as text instead of decoded JSON

        Returns:
            Decoded JSON body, or the text body when ``as_text`` is set

        Raises:
            RateLimitError: On HTTP 429
            HTTPStatusError: On any other non-2xx status
        """
        await self._ensure_session()
        await self.rate_limiter.acquire()

        url = self._build_url(endpoint)

        async with self.session.request(method, url, params=params, headers=headers) as response:
            if response.status == 429:
                retry_after = min(int(response.headers.get('Retry-After', 1)), self.max_retry_after)
                logger.warning(f"Rate limited by {url}, waiting {retry_after} seconds")
                await asyncio.sleep(retry_after)
                raise RateLimitError(f"Rate limit exceeded for {url}")

            if response.status < 200 or response.status >= 300:
                raise HTTPStatusError(response.status, url)

            if as_text:
                return await response.text()
            return await response.json(content_type=None)

    async def _get_json(self, endpoint: str, **kwargs) -> Any:
        return await self._request("GET", endpoint, **kwargs)

    async def _get_text(self, endpoint: str, **kwargs) -> str:
        return await self._request("GET", endpoint, as_text=True, **kwargs)

    async def _cached_get_json(self, cache_key: Optional[str], endpoint: str,
                               ttl: int = 3600, **kwargs) -> Any:
        """GET JSON with caching support."""
        if self.cache_manager and cache_key:
            cached_result = await self.cache_manager.get(cache_key)
            if cached_result is not None:
                return cached_result

        result = await self._get_json(endpoint, **kwargs)

        if self.cache_manager and cache_key:
            await self.cache_manager.set(cache_key, result, ttl)

        return result
