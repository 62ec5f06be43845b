"""
Machine lookups (raw SQL).
"""

from __future__ import annotations

from typing import Any

from core.db import Database


async def list_machines(db: Database) -> list[dict[str, Any]]:
    return await db.fetch_all(
        """
        SELECT DISTINCT MachineName AS machine_name
        FROM ProgramMachine
        """
    )
