"""
Feedback API endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from core.db import Database, get_db
from nests.schemas import Nest

from . import service
from .schemas import FeedbackEntry

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/feedback")
async def list_feedback(db: Database = Depends(get_db)) -> list[FeedbackEntry[Nest]]:
    logger.debug("Requested feedback")
    return await service.list_feedback(db=db)


@router.delete("/feedback/{feedback_id}")
async def delete_feedback(feedback_id: int, db: Database = Depends(get_db)) -> dict:
    """
    Drop a program feedback entry once the consumer has processed it.
    """
    await service.delete_feedback(feedback_id, db=db)
    logger.info("feedback_deleted feedback_id=%s", feedback_id)
    return {"ok": True, "feedback_id": feedback_id}
