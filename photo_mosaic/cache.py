"""Single-flight cache of substitute-image requests, keyed by colour."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterator

from PIL import Image

from photo_mosaic.errors import ResolutionFailure
from photo_mosaic.resolvers import SubstituteResolver

logger = logging.getLogger(__name__)


class TileCache:
    """Map a colour key to one shared future of its substitute image.

    The first :meth:`resolve` for a key issues exactly one resolver request
    and stores the resulting task; every later call (pending or finished)
    gets the same task back. Lookup and insert run synchronously on the
    event-loop thread with no ``await`` in between, so concurrent callers can
    never trigger a second request for a key.

    A failed request is cached too: every awaiter of that key sees the same
    :class:`ResolutionFailure`. Entries live as long as the cache; create one
    cache per mosaic run.
    """

    def __init__(self, resolver: SubstituteResolver) -> None:
        self._resolver = resolver
        self._entries: dict[str, asyncio.Future[Image.Image]] = {}
        self.request_count = 0

    def resolve(self, color_key: str) -> asyncio.Future[Image.Image]:
        """Return the shared future for *color_key*, requesting it if new.

        Must be called from a running event loop.
        """
        entry = self._entries.get(color_key)
        if entry is None:
            self.request_count += 1
            entry = asyncio.ensure_future(self._fetch(color_key))
            self._entries[color_key] = entry
        return entry

    async def _fetch(self, color_key: str) -> Image.Image:
        logger.debug("Requesting substitute for #%s", color_key)
        try:
            return await self._resolver.request(color_key)
        except Exception as exc:
            raise ResolutionFailure(color_key) from exc

    def keys(self) -> list[str]:
        return list(self._entries)

    def __contains__(self, color_key: object) -> bool:
        return color_key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)
