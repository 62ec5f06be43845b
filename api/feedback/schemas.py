"""
Pydantic schemas for nesting feedback.
"""

from __future__ import annotations

from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel

PayloadT = TypeVar("PayloadT")


class FeedbackStatus(str, Enum):
    CREATED = "Created"
    DELETED = "Deleted"


# Archive transaction type -> feedback status.
TRANS_TYPE_STATUS = {
    "SN100": FeedbackStatus.CREATED,  # program post
    "SN101": FeedbackStatus.DELETED,  # program delete
}


class FeedbackEntry(BaseModel, Generic[PayloadT]):
    id: int
    archive_packet_id: int | None = None
    status: FeedbackStatus
    payload: PayloadT
