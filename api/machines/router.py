"""
Machine API endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from core.db import Database, get_db

from . import service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/machines")
async def list_machines(db: Database = Depends(get_db)) -> list[str]:
    logger.debug("Requested machines list")
    return await service.list_machines(db=db)
