"""
Feedback relay.

The export job's result is passed through as-is: no filtering, no caching.
"""

from __future__ import annotations

from typing import Awaitable, Callable

from core.db import Database, affected_rows
from core.errors import NotFound
from nests.schemas import Nest

from . import export, repository
from .schemas import FeedbackEntry

FeedbackExporter = Callable[[Database], Awaitable[list[FeedbackEntry[Nest]]]]


async def list_feedback(
    *,
    db: Database,
    exporter: FeedbackExporter = export.export_feedback,
) -> list[FeedbackEntry[Nest]]:
    return await exporter(db)


async def delete_feedback(feedback_id: int, *, db: Database) -> None:
    status = await repository.delete_program_feedback(db, feedback_id)
    if affected_rows(status) == 0:
        raise NotFound(f"Feedback entry {feedback_id} not found.")
