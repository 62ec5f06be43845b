"""
Program listing and the program lifecycle handler.

Clients report state changes (Initiated -> Processing -> Complete/Cancelled);
this module does not track state itself. The only side effect is on
Complete: a completion transaction written to the nesting database.

Recording a completion is best effort by default. A failed write is logged
and the operator still gets an acknowledgement (`COMPLETION_BEST_EFFORT`).
"""

from __future__ import annotations

import logging
import os
from typing import Any

from core.db import Database, affected_rows
from core.errors import DatabaseError

from . import repository
from .schemas import ProgramState, ProgramSummary, ProgramUpdateRequest

DEFAULT_SIMTRANS_DISTRICT = 1

logger = logging.getLogger(__name__)


def simtrans_district() -> int:
    raw = os.environ.get("SIMTRANS_DISTRICT", "").strip()
    if not raw:
        return DEFAULT_SIMTRANS_DISTRICT
    try:
        return int(raw)
    except ValueError:
        return DEFAULT_SIMTRANS_DISTRICT


def completion_best_effort() -> bool:
    raw = os.environ.get("COMPLETION_BEST_EFFORT", "").strip().lower()
    if not raw:
        return True
    return raw not in {"0", "false", "no", "off"}


def _summary_from_row(row: dict[str, Any]) -> ProgramSummary:
    return ProgramSummary(
        program=str(row["program"]),
        repeats=int(row["repeats"]),
        cutting_time=float(row["cutting_time"]),
    )


async def list_programs(machine: str, *, db: Database) -> list[ProgramSummary]:
    rows = await repository.list_programs(db, machine)
    try:
        return [_summary_from_row(row) for row in rows]
    except (KeyError, TypeError, ValueError) as e:
        raise DatabaseError(f"Could not decode program row for machine {machine}: {e}") from e


async def record_completion(program: str, *, db: Database, best_effort_record: bool) -> bool:
    """
    Write one completion transaction. Returns True when a row was inserted.

    With `best_effort_record` a failed write is logged and swallowed;
    otherwise the `DatabaseError` propagates.
    """
    try:
        status = await repository.insert_completion(db, program, district=simtrans_district())
    except DatabaseError:
        if not best_effort_record:
            raise
        logger.exception("completion_record_failed program=%s", program)
        return False

    if affected_rows(status) == 0:
        logger.warning("completion_record_skipped program=%s reason=no_program_row", program)
        return False
    return True


async def update_program(
    program: str,
    request: ProgramUpdateRequest,
    *,
    db: Database,
    best_effort_record: bool | None = None,
) -> None:
    if best_effort_record is None:
        best_effort_record = completion_best_effort()

    state = request.state
    if state is ProgramState.INITIATED:
        logger.debug("Program %s initiated", program)
    elif state is ProgramState.PROCESSING:
        # TODO: push the NC file to the machine controller once the transfer target is defined.
        logger.debug("Program %s is moved to processing with batch %s", program, request.batch)
    elif state is ProgramState.COMPLETE:
        logger.info("Program %s complete with batch %s", program, request.batch)
        await record_completion(program, db=db, best_effort_record=best_effort_record)
    elif state is ProgramState.CANCELLED:
        logger.debug("Program %s cancelled", program)
