"""
Feedback export job: turns program archive rows into `FeedbackEntry[Nest]`.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from core.db import Database
from core.errors import DatabaseError
from nests.schemas import Nest
from nests.service import nest_from_row

from . import repository
from .schemas import TRANS_TYPE_STATUS, FeedbackEntry

logger = logging.getLogger(__name__)


async def export_feedback(db: Database) -> list[FeedbackEntry[Nest]]:
    rows = await repository.list_program_feedback(db)

    entries: list[FeedbackEntry[Nest]] = []
    seen: set[int] = set()
    for row in rows:
        try:
            entry_id = int(row["id"])
            if entry_id in seen:
                continue
            entries.append(
                FeedbackEntry[Nest](
                    id=entry_id,
                    archive_packet_id=row.get("archive_packet_id"),
                    status=TRANS_TYPE_STATUS[row["trans_type"]],
                    payload=nest_from_row(row),
                )
            )
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            raise DatabaseError(f"Could not decode feedback row: {e}") from e
        seen.add(entry_id)

    logger.debug("feedback_exported rows=%s entries=%s", len(rows), len(entries))
    return entries
