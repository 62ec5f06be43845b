"""
Batch API endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from core.db import Database, get_db
from nests import service as nest_service

from .schemas import Batch
from .service import BatchCache, get_batch_cache

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/batches")
async def list_batches(cache: BatchCache = Depends(get_batch_cache)) -> list[Batch]:
    logger.debug("Requested batches list")
    return list(await cache.get_or_load())


@router.get("/batches/{program}")
async def list_batches_for_program(
    program: str,
    db: Database = Depends(get_db),
    cache: BatchCache = Depends(get_batch_cache),
) -> list[Batch]:
    """
    Batches cut from the sheet that `program` is nested on.
    """
    logger.debug("Requested batches list for program `%s`", program)
    return await nest_service.batches_for_program(program, db=db, cache=cache)
