"""
Feedback archive access (raw SQL).

`STPrgArc` is the SimTrans program archive. Only program post/delete rows
are feedback; everything else in the archive is ignored.
"""

from __future__ import annotations

from typing import Any

from core.db import Database

from .schemas import TRANS_TYPE_STATUS


async def list_program_feedback(db: Database) -> list[dict[str, Any]]:
    """
    Program feedback rows with their sheet, oldest first.

    A program can sit on several sheets, so one archive row may come back more
    than once. Deleted programs may have no sheet rows left (NULL sheet columns).
    """
    return await db.fetch_all(
        """
        SELECT
            STPrgArc.AutoID          AS id,
            STPrgArc.ArchivePacketID AS archive_packet_id,
            STPrgArc.TransType       AS trans_type,
            STPrgArc.ProgramName     AS program,
            STPrgArc.RepeatID        AS repeat_id,
            STPrgArc.MachineName     AS machine,
            STPrgArc.CuttingTime     AS cutting_time,
            SIP.SheetName            AS sheet_name,
            Stock.PrimeCode          AS material_master,
            Stock.Qty                AS sheet_qty
        FROM STPrgArc
        LEFT JOIN SIP
            ON  SIP.ProgramName = STPrgArc.ProgramName
            AND SIP.RepeatID    = STPrgArc.RepeatID
        LEFT JOIN Stock
            ON Stock.SheetName = SIP.SheetName
        WHERE STPrgArc.TransType = ANY($1::text[])
        ORDER BY STPrgArc.AutoID, SIP.SheetName
        """,
        list(TRANS_TYPE_STATUS),
    )


async def delete_program_feedback(db: Database, feedback_id: int) -> str:
    return await db.execute(
        """
        DELETE FROM STPrgArc
        WHERE AutoID = $1
        """,
        feedback_id,
    )
