"""List, iterate and fetch gists, with cache-aside reads for single gists."""

import asyncio
import logging
import weakref
from typing import AsyncIterator

import httpx

from gisty.config import Settings
from gisty.exceptions import CacheWriteError
from gisty.models.schemas import GistDocument, GistSummary
from gisty.services.document_cache import DocumentCache
from gisty.services.github_client import GitHubClient
from gisty.services.pager import GistStream, IterResult, cursor_policy
from gisty.services.urls import build_gist_url, build_list_url, with_token
from gisty.services.validation import validate_gist_id, validate_list_request

logger = logging.getLogger(__name__)


class GistService:
    """
    Entry point for reading a user's gists.

    Args:
        settings: Credentials, API base URL and cache directory
        log: Sink for non-fatal warnings; defaults to this module's logger
        transport: Optional httpx transport, used by tests
    """

    def __init__(
        self,
        settings: Settings,
        log: logging.Logger | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._settings = settings
        self._log = log or logger
        self._client = GitHubClient(settings, transport=transport)
        self._cache: DocumentCache | None = None
        if settings.cache_dir is not None:
            self._cache = DocumentCache(settings.cache_dir, self._log)
        # Entries vanish once no Get for the id holds or waits on the lock.
        self._locks: weakref.WeakValueDictionary = weakref.WeakValueDictionary()

    async def __aenter__(self) -> "GistService":
        await self.start()
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    async def start(self) -> None:
        await self._client.start()

    async def close(self) -> None:
        await self._client.close()

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def cache(self) -> DocumentCache | None:
        return self._cache

    @property
    def cache_enabled(self) -> bool:
        return self._cache is not None and self._cache.enabled

    async def list_gists(self, per_page: int, page: int) -> list[GistSummary]:
        """
        Fetch one page of the configured user's gists.

        Raises:
            GistValidationError: If credentials or pagination are invalid
            GistTransportError: If the API could not be reached
            GistDecodeError: If the response is not a list of gists
        """
        s = self._settings
        validate_list_request(s.username, s.token, per_page, page)
        url = build_list_url(s.api_base_url, s.username, s.token, page, per_page)
        return await self._client.fetch_page(url)

    def iter_gists(self) -> GistStream:
        """
        Stream every gist of the configured user, one page at a time.

        The stream ends silently on the first error or empty page. Check
        ``stream.error`` afterwards, or use iter_gist_results(), to tell the two
        apart.
        """
        return GistStream(
            self.list_gists,
            self._settings.iter_page_size,
            cursor=cursor_policy(self._settings.iter_cursor),
            log=self._log,
        )

    async def iter_gist_results(self) -> AsyncIterator[IterResult]:
        """Like iter_gists(), but yields a final IterResult carrying the error, if any."""
        async with self.iter_gists() as stream:
            async for gist in stream:
                yield IterResult(gist=gist)
            if stream.error is not None:
                yield IterResult(error=stream.error)

    async def get_gist(self, gist_id: str) -> GistDocument:
        """
        Return a gist, from the cache when possible.

        A cached gist is returned as is, without asking the API. On a miss
        the gist is fetched and written to the cache. Only one fetch per id
        is in flight at a time.

        An error answer other than 404 (a 401 for bad credentials, say) is
        still decoded and returned, usually as a gist with no files, but it
        is never cached.

        Raises:
            EmptyIDError: If gist_id is empty
            GistNotFoundError: If the API answers 404
            GistTransportError: If the API could not be reached
            GistDecodeError: If the response is not a gist
            CacheWriteError: If the gist was fetched but could not be cached;
                the gist is on the exception's ``document``
        """
        validate_gist_id(gist_id)

        lock = self._locks.setdefault(gist_id, asyncio.Lock())
        async with lock:
            return await self._get_gist(gist_id)

    async def _get_gist(self, gist_id: str) -> GistDocument:
        s = self._settings
        gist_url = build_gist_url(s.api_base_url, gist_id)

        if self.cache_enabled:
            cached = await asyncio.to_thread(self._cache.lookup, gist_id)
            if cached is not None:
                logger.debug(f"cache hit for gist {gist_id}")
                cached.url = gist_url
                return cached
            logger.debug(f"cache miss for gist {gist_id}")

        document, status = await self._client.fetch_document(with_token(gist_url, s.token), gist_id)
        document.url = gist_url

        if status >= 400:
            self._log.warning(f"not caching gist {gist_id}: API answered {status}")
            return document

        if self.cache_enabled:
            try:
                await asyncio.to_thread(self._cache.store, gist_id, document)
            except OSError as e:
                raise CacheWriteError(gist_id, document, str(e)) from e
        return document

    async def invalidate(self, gist_id: str) -> bool:
        """Drop the cached copy of a gist. Returns False if none was cached."""
        validate_gist_id(gist_id)
        if not self.cache_enabled:
            return False
        return await asyncio.to_thread(self._cache.invalidate, gist_id)

    async def clear_cache(self) -> int:
        """Drop every cached gist and return how many were removed."""
        if not self.cache_enabled:
            return 0
        return await asyncio.to_thread(self._cache.clear)

    async def check_health(self) -> bool:
        return await self._client.check_health()
