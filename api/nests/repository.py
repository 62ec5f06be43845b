"""
Nest lookups (raw SQL).
"""

from __future__ import annotations

from typing import Any

from core.db import Database


async def get_nest(db: Database, program: str) -> dict[str, Any] | None:
    """
    First repeat of `program` together with the sheet it is nested on.

    Stock only adds material and quantity; a sheet without a stock record
    still resolves (NULL metadata).
    """
    return await db.fetch_one(
        """
        SELECT
            Program.ProgramName   AS program,
            Program.RepeatID      AS repeat_id,
            ProgramMachine.MachineName AS machine,
            ProgramMachine.CuttingTime AS cutting_time,
            SIP.SheetName         AS sheet_name,
            Stock.PrimeCode       AS material_master,
            Stock.Qty             AS sheet_qty
        FROM Program
        INNER JOIN SIP
            ON  SIP.ProgramName = Program.ProgramName
            AND SIP.RepeatID    = Program.RepeatID
        LEFT JOIN Stock
            ON Stock.SheetName = SIP.SheetName
        LEFT JOIN ProgramMachine
            ON ProgramMachine.ProgramName = Program.ProgramName
        WHERE Program.ProgramName = $1
        ORDER BY Program.RepeatID
        LIMIT 1
        """,
        program,
    )
