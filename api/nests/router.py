"""
Nest API endpoints.

`POST /nest/{nest}` (program state changes) lives in `programs/router.py`.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from core.db import Database, get_db

from . import service
from .schemas import Nest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/nest/{nest}")
async def get_nest(nest: str, db: Database = Depends(get_db)) -> Nest:
    logger.debug("Requested program %s", nest)
    result = await service.resolve_nest(nest, db)
    logger.debug("Nest found program=%s sheet=%s", result.program, result.sheet.sheet_name)
    return result
