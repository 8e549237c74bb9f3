"""
Best-effort retrieval of external JavaScript resources.
Content is served from the session cache when present; inline scripts are only
ever available from the cache. Failed downloads are logged and skipped, never retried.
"""

import asyncio
from typing import Optional

import aiohttp

from jshunter.core.config import FetchConfig
from jshunter.core.logger import logger
from jshunter.models import ScanTarget, is_inline_url


class JsFetcher:

    def __init__(self, cache, config: Optional[FetchConfig] = None,
                 session: Optional[aiohttp.ClientSession] = None):
        self.cache = cache
        self.config = config or FetchConfig()
        self._session = session
        self._owns_session = session is None

    def _headers(self) -> dict:
        return {
            'User-Agent': self.config.user_agent,
            'Accept': 'application/javascript, text/javascript, */*;q=0.8',
            'Accept-Language': 'en-US,en;q=0.9',
        }

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self):
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def resolve_content(self, target: ScanTarget) -> Optional[str]:
        cached = self.cache.cache_get(target.url)
        if cached is not None:
            return cached

        if is_inline_url(target.url):
            return None

        content = await self.download(target.url)
        if content is not None:
            self.cache.cache_put(target.url, content)
        return content

    async def download(self, url: str) -> Optional[str]:
        session = await self._get_session()
        timeout = aiohttp.ClientTimeout(total=self.config.timeout)

        try:
            async with session.get(url, headers=self._headers(), timeout=timeout) as response:
                if response.status != 200:
                    logger.warning(f"Failed to download JS file: {url} (HTTP {response.status})")
                    return None

                content_length = response.headers.get('Content-Length')
                if content_length:
                    try:
                        if int(content_length) > self.config.max_file_size:
                            logger.warning(f"Skipping JS file {url}: too large ({content_length} bytes)")
                            return None
                    except ValueError:
                        pass

                raw_content = await response.read()

        except asyncio.TimeoutError:
            logger.warning(f"Timed out downloading JS file {url}")
            return None
        except aiohttp.ClientError as e:
            logger.warning(f"Error downloading JS file {url}: {str(e)[:80]}")
            return None

        if len(raw_content) > self.config.max_file_size:
            logger.warning(f"Skipping JS file {url}: too large ({len(raw_content)} bytes)")
            return None

        return raw_content.decode('utf-8', errors='replace')
