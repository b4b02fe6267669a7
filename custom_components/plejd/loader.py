"""Fetch the Plejd site from the cloud, falling back to the cached copy."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
import logging
from typing import Any

from .api import PlejdApi
from .cache import SnapshotCache
from .exceptions import PlejdError
from .models import SiteSnapshot

_LOGGER = logging.getLogger(__name__)

ExecutorJob = Callable[..., Awaitable[Any]]


class SiteLoader:
    """Pick between a fresh API fetch and the cached snapshot."""

    def __init__(
        self,
        api: PlejdApi,
        cache: SnapshotCache,
        *,
        async_add_executor_job: ExecutorJob | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._api = api
        self._cache = cache
        self._executor_job = async_add_executor_job or asyncio.to_thread
        self._logger = logger or _LOGGER

    async def acquire_snapshot(self, prefer_cache: bool = False) -> SiteSnapshot:
        """Return a site snapshot, from the cloud or the cache.

        With *prefer_cache* and a usable cache no request is made at all.
        Otherwise the cloud is asked first; when that fails the cache is
        used, and only without a cache does the failure propagate.
        """
        cached: SiteSnapshot | None = await self._executor_job(self._cache.load)

        self._logger.debug("Prefer cache? %s", prefer_cache)
        self._logger.debug(
            "Cache exists? %s",
            f"Yes, created {cached.captured_at.isoformat()}" if cached else "No",
        )

        if prefer_cache and cached is not None:
            self._logger.info(
                "Cache preferred. Skipping api requests and using api data from %s",
                cached.captured_at.isoformat(),
            )
            return cached

        try:
            snapshot = await self._api.fetch_snapshot()
        except PlejdError as exc:
            if cached is None:
                self._logger.error(
                    "Api request failed, no cached fallback available: %s", exc
                )
                raise
            self._logger.warning(
                "Failed to get api response (%s), using cached copy from %s instead",
                exc,
                cached.captured_at.isoformat(),
            )
            return cached

        await self._executor_job(self._cache.save, snapshot)
        return snapshot
