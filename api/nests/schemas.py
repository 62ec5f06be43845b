"""
Pydantic schemas for nests (a cut program placed on a sheet).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Sheet(BaseModel):
    model_config = ConfigDict(frozen=True)

    sheet_name: str
    material_master: str | None = None
    qty: int | None = None

    @property
    def is_singleton(self) -> bool:
        """
        A stock record holding exactly one sheet (drops, one-off plates).
        """
        return self.qty == 1


class Nest(BaseModel):
    model_config = ConfigDict(frozen=True)

    program: str = Field(..., min_length=1)
    repeat_id: int | None = None
    machine: str | None = None
    cutting_time: float | None = None
    sheet: Sheet
