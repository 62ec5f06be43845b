"""
Nest resolution and the batch/nest join.

Flow for `batches_for_program`:
1) Load (or reuse) the cached batch list
2) Look up the program's sheet in the nesting database
3) Keep the batches cut from that sheet, in cache order
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from batches.schemas import Batch
from batches.service import BatchCache
from core.db import Database
from core.errors import DatabaseError, NotFound

from . import repository
from .schemas import Nest, Sheet

logger = logging.getLogger(__name__)


def nest_from_row(row: dict[str, Any]) -> Nest:
    try:
        return Nest(
            program=row["program"],
            repeat_id=row.get("repeat_id"),
            machine=row.get("machine"),
            cutting_time=row.get("cutting_time"),
            sheet=Sheet(
                sheet_name=row["sheet_name"] or "",
                material_master=row.get("material_master"),
                qty=row.get("sheet_qty"),
            ),
        )
    except (KeyError, ValidationError) as e:
        raise DatabaseError(f"Could not decode nest row: {e}") from e


async def resolve_nest(program: str, db: Database) -> Nest:
    row = await repository.get_nest(db, program)
    if row is None:
        raise NotFound(f"No nest found for program {program}.")
    return nest_from_row(row)


def filter_by_sheet(batches: tuple[Batch, ...] | list[Batch], sheet_name: str) -> list[Batch]:
    return [batch for batch in batches if batch.sheet_name == sheet_name]


async def batches_for_program(program: str, *, db: Database, cache: BatchCache) -> list[Batch]:
    batches = await cache.get_or_load()
    nest = await resolve_nest(program, db)

    if nest.sheet.is_singleton:
        # TODO: decide how a singleton sheet maps to batches; until then it uses the shared-sheet match.
        logger.warning(
            "singleton_sheet_unhandled program=%s sheet=%s",
            program,
            nest.sheet.sheet_name,
        )

    matched = filter_by_sheet(batches, nest.sheet.sheet_name)
    logger.debug(
        "batches_for_program program=%s sheet=%s matched=%s",
        program,
        nest.sheet.sheet_name,
        len(matched),
    )
    return matched
