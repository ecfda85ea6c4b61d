# src/lab_value_extraction/extractors/image_source.py
"""
Report image acquisition.

An ImageSource lists the report images for a subject and downloads them.
HttpImageSource reads the subject's HTML page from a document server,
takes every <img src> in top-to-bottom order and fetches the bytes.

Authentication is not handled here; pass a ClientSession that already
carries the cookies/headers the server needs.
"""

import asyncio
import logging
import re
from typing import List, Optional, Protocol
from urllib.parse import urljoin

import aiohttp

from ..config import source_settings
from ..utils.exceptions import ImageFetchError, ImageSourceError

IMG_SRC_PATTERN = re.compile(r"""<img\s[^>]*src=["']([^"']+)["'][^>]*>""", re.IGNORECASE)


def parse_image_urls(html: str) -> List[str]:
    """<img src> values in document order (duplicates kept)."""
    if not html:
        return []
    return IMG_SRC_PATTERN.findall(html)


class ImageSource(Protocol):
    """Supplies report image URLs and bytes for a subject."""

    async def list_images(self, subject_id: str) -> List[str]:
        ...

    async def fetch_image(self, url: str) -> bytes:
        ...


class HttpImageSource:
    """
    Document-server image source over aiohttp.

    Args:
        base_url: Server root; relative image URLs resolve against it
        page_path: Path template of the subject page, with {subject_id}
        session: Optional externally managed session (cookies, auth headers)
        timeout: Total seconds per request
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        page_path: Optional[str] = None,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: Optional[float] = None,
    ):
        self.logger = logging.getLogger(__name__)
        self.base_url = (base_url or source_settings.SOURCE_BASE_URL).rstrip("/") + "/"
        self.page_path = page_path or source_settings.SOURCE_PAGE_PATH
        self.timeout = timeout or source_settings.REQUEST_TIMEOUT

        self._session = session
        self._owns_session = session is None
        self._session_loop: Optional[asyncio.AbstractEventLoop] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session for current event loop."""
        if not self._owns_session:
            return self._session

        current_loop = asyncio.get_running_loop()
        needs_new_session = (
            self._session is None
            or self._session.closed
            or self._session_loop is not current_loop
        )
        if needs_new_session:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
            self._session_loop = current_loop
        return self._session

    async def close(self):
        """Close the HTTP session if this source created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
        if self._owns_session:
            self._session = None
            self._session_loop = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def page_url(self, subject_id: str) -> str:
        return urljoin(self.base_url, self.page_path.format(subject_id=subject_id).lstrip("/"))

    def resolve(self, src: str) -> str:
        return urljoin(self.base_url, src)

    async def list_images(self, subject_id: str) -> List[str]:
        """
        Absolute URLs of the subject's report images, top to bottom.

        Raises:
            ImageSourceError: the page cannot be fetched
        """
        url = self.page_url(subject_id)
        session = await self._get_session()
        try:
            async with session.get(url) as response:
                if response.status >= 400:
                    raise ImageSourceError(
                        f"Failed to fetch images page for {subject_id}: HTTP {response.status}"
                    )
                html = await response.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ImageSourceError(f"Failed to fetch images page for {subject_id}: {e}") from e

        urls = [self.resolve(src) for src in parse_image_urls(html)]
        self.logger.info(f"Found {len(urls)} images for subject {subject_id}")
        return urls

    async def fetch_image(self, url: str) -> bytes:
        """
        Download one image.

        Raises:
            ImageFetchError: non-2xx response or transport failure
        """
        session = await self._get_session()
        try:
            async with session.get(url) as response:
                if response.status >= 400:
                    raise ImageFetchError(f"Image fetch failed: {url}", url=url, status=response.status)
                return await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ImageFetchError(f"Image fetch failed: {url}: {e}", url=url) from e
