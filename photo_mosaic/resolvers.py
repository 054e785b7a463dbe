"""Substitute-image providers keyed by colour.

A resolver turns a 6-hex-digit colour key into an image. The pipeline only
depends on :class:`SubstituteResolver`; how the image is produced (a flat
swatch, a remote tile server, a photo library) is the resolver's business,
as are its own timeout and retry policy.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from io import BytesIO
from types import TracebackType
from typing import Protocol

import httpx
from PIL import Image

from photo_mosaic.color_utils import hex_to_rgb

logger = logging.getLogger(__name__)


class SubstituteResolver(Protocol):
    def request(self, color_key: str) -> Awaitable[Image.Image]: ...


class SolidColorResolver:
    """Generate a flat swatch of the key's colour locally."""

    def __init__(self, size: tuple[int, int] = (16, 16)) -> None:
        self.size = size

    async def request(self, color_key: str) -> Image.Image:
        return Image.new("RGB", self.size, hex_to_rgb(color_key))


class HttpResolver:
    """Fetch substitutes from a tile server via ``GET {base_url}/color/{key}``.

    Any Pillow-decodable body is accepted. Non-2xx responses raise
    :class:`httpx.HTTPStatusError`; the tile cache wraps such errors.

    Use as an async context manager, or call :meth:`aclose` when done. A
    client passed in by the caller is left open.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout, follow_redirects=True,
        )

    def url_for(self, color_key: str) -> str:
        return f"{self.base_url}/color/{color_key}"

    async def request(self, color_key: str) -> Image.Image:
        url = self.url_for(color_key)
        logger.debug("GET %s", url)
        resp = await self._client.get(url)
        resp.raise_for_status()
        img = Image.open(BytesIO(resp.content))
        img.load()
        return img

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HttpResolver:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
