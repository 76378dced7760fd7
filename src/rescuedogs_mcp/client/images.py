"""
Dog image fetching through the CDN's resize endpoint.

Images hosted on the rescue dogs CDN are requested through a fixed transform
preset; images hosted elsewhere are fetched as-is. Any failure degrades to
``None`` so a missing photo never fails the enclosing tool call.
"""

import asyncio
import base64
import logging
from typing import Optional, Sequence
from urllib.parse import urlsplit

import aiohttp

from rescuedogs_mcp.cache.memory import MISSING, CacheLayer
from rescuedogs_mcp.client.base import IMAGE_TIMEOUT, HttpClient, RequestDescriptor
from rescuedogs_mcp.core.models import ImageContent, ImagePreset

logger = logging.getLogger(__name__)

CDN_DOMAIN = "rescuedogs.me"


def build_transform_url(
    url: str,
    preset: ImagePreset,
    image_base: str,
    cdn_domain: str = CDN_DOMAIN,
) -> str:
    """Rewrite a CDN image URL to its resized variant.

    Args:
        url: Original image URL.
        preset: Transform preset to apply.
        image_base: Base URL of the image CDN.
        cdn_domain: Hosts equal to or under this domain are rewritten.

    Returns:
        ``{image_base}/cdn-cgi/image/{transform}{path}`` for CDN images,
        otherwise the original URL unchanged.
    """
    try:
        parts = urlsplit(url)
    except ValueError:
        return url

    host = (parts.hostname or "").lower()
    if host != cdn_domain and not host.endswith("." + cdn_domain):
        return url

    return f"{image_base.rstrip('/')}/cdn-cgi/image/{preset.transform}{parts.path}"


def _is_absolute(url: str) -> bool:
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return bool(parts.scheme and parts.netloc)


class ImageClient(HttpClient):
    """Fetches dog photos as base64 image content, with caching."""

    BASE_URL = "https://images.rescuedogs.me"

    def __init__(
        self,
        cache: CacheLayer,
        base_url: str = BASE_URL,
        session: Optional[aiohttp.ClientSession] = None,
        retry_delay: float = 0.5,
        timeout: float = IMAGE_TIMEOUT,
    ):
        """Initialize the image client.

        Args:
            cache: Cache layer for fetched images.
            base_url: Base URL of the image CDN.
            session: Optional aiohttp session.
            retry_delay: Seconds to wait before the single retry.
            timeout: Per-request timeout in seconds.
        """
        super().__init__(base_url, session, retry_delay)
        self.cache = cache
        self.timeout = timeout

    def transform_url(self, url: str, preset: ImagePreset) -> str:
        return build_transform_url(url, preset, self.base_url)

    async def fetch_dog_image(
        self,
        url: Optional[str],
        preset: ImagePreset = ImagePreset.THUMBNAIL,
    ) -> Optional[ImageContent]:
        """Fetch one image.

        Args:
            url: Absolute image URL; empty or relative values yield None.
            preset: Transform preset.

        Returns:
            ImageContent, or None if there is no URL or the fetch failed.
        """
        if not url or not _is_absolute(url):
            return None

        cached = self.cache.get_image(url, preset.value)
        if cached is not MISSING:
            return ImageContent(data=cached)

        descriptor = RequestDescriptor(
            "GET",
            self.transform_url(url, preset),
            timeout=self.timeout,
            binary=True,
        )
        result = await self._execute(descriptor)
        if not result.ok:
            logger.info("Image unavailable for %s: %s", url, result.error)
            return None

        encoded = base64.b64encode(result.value).decode("ascii")
        self.cache.set_image(url, preset.value, encoded)
        return ImageContent(data=encoded)

    async def fetch_dog_images(
        self,
        urls: Sequence[Optional[str]],
        preset: ImagePreset = ImagePreset.THUMBNAIL,
    ) -> list[Optional[ImageContent]]:
        """Fetch several images concurrently.

        Returns:
            One entry per input URL, in input order; failures are None.
        """
        return list(await asyncio.gather(*(self.fetch_dog_image(url, preset) for url in urls)))
