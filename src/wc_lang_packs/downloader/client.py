"""Rate-limited HTTP client for the GlotPress API and export endpoint."""

import asyncio
import time
from typing import Optional

import aiohttp
from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..errors import NetworkError
from ..utils.logging import get_logger

logger = get_logger(__name__)


class RateLimitedClient:
    """HTTP client with polite rate limiting and per-request timeouts.

    Every failure leaving this class is a ``NetworkError``. With the default
    ``max_retries=1`` a request is attempted once; the next poll cycle is the
    retry.
    """

    def __init__(
        self,
        requests_per_minute: int = 120,
        timeout: float = 30,
        max_retries: int = 1,
        user_agent: str = "wc-lang-packs-server/1.0",
    ):
        """Initialize the rate-limited client.

        Args:
            requests_per_minute: Maximum requests per minute
            timeout: Total timeout of a single request in seconds
            max_retries: Maximum attempts per request (1 disables retries)
            user_agent: User-Agent header for requests
        """
        self.requests_per_minute = requests_per_minute
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.max_retries = max_retries
        self.user_agent = user_agent

        self._min_interval = 60.0 / requests_per_minute
        self._last_request_time: float = 0
        self._lock = asyncio.Lock()
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "RateLimitedClient":
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _ensure_session(self) -> None:
        """Ensure HTTP session is created."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self.timeout,
                headers={"User-Agent": self.user_agent},
            )

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def _apply_rate_limit(self) -> None:
        """Apply rate limiting by waiting if necessary."""
        async with self._lock:
            now = time.monotonic()
            elapsed = now - self._last_request_time
            if elapsed < self._min_interval:
                wait_time = self._min_interval - elapsed
                logger.debug(f"Rate limiting: waiting {wait_time:.2f}s")
                await asyncio.sleep(wait_time)
            self._last_request_time = time.monotonic()

    async def _get_once(self, url: str) -> bytes:
        await self._ensure_session()
        await self._apply_rate_limit()

        logger.debug(f"Fetching: {url}")

        async with self._session.get(url) as response:
            response.raise_for_status()
            content = await response.read()
            logger.debug(f"Fetched {len(content)} bytes from {url}")
            return content

    async def get(self, url: str) -> bytes:
        """Fetch URL content with rate limiting.

        Args:
            url: URL to fetch

        Returns:
            Response content as bytes

        Raises:
            NetworkError: If the request fails, times out or returns an
                error status on every attempt
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=1, min=2, max=30),
            retry=retry_if_exception_type((aiohttp.ClientError, asyncio.TimeoutError)),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    return await self._get_once(url)
        except aiohttp.ClientResponseError as e:
            raise NetworkError(f"GET {url} returned HTTP {e.status}") from e
        except asyncio.TimeoutError as e:
            raise NetworkError(f"GET {url} timed out after {self.timeout.total}s") from e
        except (aiohttp.ClientError, RetryError) as e:
            raise NetworkError(f"GET {url} failed: {e}") from e
