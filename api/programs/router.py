"""
Program API endpoints.

The `/{machine}` route matches any single path segment, so this router must
be included after every other router (see `api/main.py`).
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status

from core.db import Database, get_db

from . import service
from .schemas import ProgramSummary, ProgramUpdateRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/nest/{nest}", status_code=status.HTTP_201_CREATED)
async def update_program(
    nest: str,
    request: ProgramUpdateRequest,
    db: Database = Depends(get_db),
) -> None:
    """
    Accept a client-reported program state. Always acknowledged with 201.
    """
    await service.update_program(nest, request, db=db)


@router.get("/{machine}")
async def list_programs(machine: str, db: Database = Depends(get_db)) -> list[ProgramSummary]:
    logger.debug("Requested programs for machine %s", machine)
    return await service.list_programs(machine, db=db)
