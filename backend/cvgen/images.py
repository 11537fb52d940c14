"""
Image fetch and encode helpers for multimodal generation.

The fetched bytes are always tagged as image/jpeg regardless of the actual
format returned by the remote server.
"""
import base64
import logging
from typing import Dict

import httpx

from .errors import ImageDownloadError

logger = logging.getLogger(__name__)

DEFAULT_MEDIA_TYPE = "image/jpeg"


class ImageFetcher:
    """Single bounded-time GET of a caller supplied image URL. No retries."""

    def __init__(self, timeout: float = 10.0):
        self.timeout = timeout

    async def fetch(self, url: str) -> bytes:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                response = await client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Image download failed for {url}: {e}")
            raise ImageDownloadError(f"Failed to download image: {e}")

        if response.status_code >= 400:
            logger.error(f"Image download failed for {url}: HTTP {response.status_code}")
            raise ImageDownloadError(f"Failed to download image: HTTP {response.status_code}")
        return response.content


def encode_image(raw: bytes) -> Dict[str, str]:
    """Base64 encode raw image bytes into the part shape the model call expects."""
    return {
        "data": base64.b64encode(raw).decode("ascii"),
        "mediaType": DEFAULT_MEDIA_TYPE,
    }
