"""
Machine listing.
"""

from __future__ import annotations

from core.db import Database
from core.errors import DatabaseError

from . import repository


async def list_machines(*, db: Database) -> list[str]:
    rows = await repository.list_machines(db)
    try:
        # NULL machine names come back as empty strings.
        return [str(row["machine_name"] or "") for row in rows]
    except KeyError as e:
        raise DatabaseError(f"Could not decode machine row: {e}") from e
