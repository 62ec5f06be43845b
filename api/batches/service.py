"""
Batch cache.

The batch list comes from an external source (`core/batch_source.py`) and is
loaded once per process, on first use. There is no refresh: a restart is the
only way to pick up a new batch list.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Sequence

from fastapi import Request
from pydantic import ValidationError

from core import batch_source
from core.errors import SourceUnavailable

from .schemas import Batch

BatchLoader = Callable[[], Awaitable[Sequence[Batch]]]

logger = logging.getLogger(__name__)


async def load_batches() -> list[Batch]:
    raw = await batch_source.fetch_batches()
    try:
        return [Batch.model_validate(item) for item in raw]
    except ValidationError as e:
        raise SourceUnavailable(f"Batch source returned an invalid batch: {e}") from e


class BatchCache:
    """
    Lazily populated, process-lifetime batch list.

    `get_or_load` holds one lock across check/populate/read, so concurrent
    first callers trigger exactly one fetch. A failed fetch leaves the cache
    empty and the next caller tries again.
    """

    def __init__(self, loader: BatchLoader = load_batches) -> None:
        self._loader = loader
        self._lock = asyncio.Lock()
        self._batches: tuple[Batch, ...] | None = None

    @property
    def is_populated(self) -> bool:
        return self._batches is not None

    async def get_or_load(self) -> tuple[Batch, ...]:
        async with self._lock:
            if self._batches is None:
                logger.debug("batch_cache_loading")
                self._batches = tuple(await self._loader())
                logger.info("batch_cache_loaded count=%s", len(self._batches))
            return self._batches


def get_batch_cache(request: Request) -> BatchCache:
    cache = getattr(request.app.state, "batch_cache", None)
    if cache is None:
        raise RuntimeError("Batch cache is not initialized. Create it in the app lifespan.")
    return cache
