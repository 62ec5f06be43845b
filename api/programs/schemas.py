"""
Pydantic schemas for program listing and program state changes.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ProgramState(str, Enum):
    INITIATED = "Initiated"
    PROCESSING = "Processing"
    COMPLETE = "Complete"
    CANCELLED = "Cancelled"


class ProgramUpdateRequest(BaseModel):
    # Batch the operator is running this program with.
    batch: str
    state: ProgramState


class ProgramSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    program: str
    repeats: int = Field(..., ge=0)
    cutting_time: float = Field(..., alias="cuttingTime")
