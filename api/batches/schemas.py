"""
Pydantic schemas for sheet batches.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Batch(BaseModel):
    """
    One physical sheet-cutting batch.

    Only `sheet_name` matters to the nest join. Everything else the source
    sends (batch id, quantities, material) is kept as-is and passed through
    to clients untouched.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    sheet_name: str = Field(..., min_length=1)
