"""
Program persistence (raw SQL).

`TransAct` is the SimTrans transaction table; `SN70` rows mark a program
repeat as cut.
"""

from __future__ import annotations

from typing import Any

from core.db import Database

COMPLETION_TRANS_TYPE = "SN70"


async def list_programs(db: Database, machine: str) -> list[dict[str, Any]]:
    """
    Programs on `machine` that still have repeats without a completion row.
    """
    return await db.fetch_all(
        """
        SELECT DISTINCT
            ProgramMachine.ProgramName AS program,
            ProgramMachine.CuttingTime AS cutting_time,
            rpt.Repeats                AS repeats
        FROM ProgramMachine
        INNER JOIN (
            SELECT
                Program.ProgramName     AS p,
                COUNT(Program.RepeatID) AS Repeats
            FROM Program
            WHERE NOT EXISTS (
                SELECT 1
                FROM TransAct
                WHERE TransAct.TransType = $2
                  AND TransAct.ProgramName = Program.ProgramName
                  AND TransAct.ProgramRepeat = Program.RepeatID
            )
            GROUP BY Program.ProgramName
        ) AS rpt
            ON rpt.p = ProgramMachine.ProgramName
        WHERE ProgramMachine.MachineName = $1
          AND rpt.Repeats > 0
        """,
        machine,
        COMPLETION_TRANS_TYPE,
    )


async def insert_completion(db: Database, program: str, *, district: int) -> str:
    """
    Record one completion transaction for `program`.

    The repeat id is looked up inside the same statement; no check is made
    for an existing completion row.
    """
    return await db.execute(
        """
        INSERT INTO TransAct (TransType, District, ProgramName, ProgramRepeat)
        SELECT $3, $2, Program.ProgramName, Program.RepeatID
        FROM Program
        WHERE Program.ProgramName = $1
        ORDER BY Program.RepeatID
        LIMIT 1
        """,
        program,
        district,
        COMPLETION_TRANS_TYPE,
    )
