from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

TrackerStatus = Literal["applied", "interviewing", "offer", "rejected"]


class TrackerEntryCreateRequest(BaseModel):
    company: str = Field(min_length=1)
    position: str = Field(min_length=1)
    link: str | None = None
    applied_date: str = Field(alias="appliedDate", min_length=1)
    status: TrackerStatus
    notes: str | None = None

    model_config = ConfigDict(populate_by_name=True)


class TrackerEntryOut(BaseModel):
    id: int
    company: str
    position: str
    link: str | None = None
    applied_date: str = Field(alias="appliedDate")
    status: TrackerStatus
    notes: str | None = None
    created_at: datetime = Field(alias="createdAt")

    model_config = ConfigDict(populate_by_name=True)


class TrackerEntryDeletedResponse(BaseModel):
    message: str
    app: TrackerEntryOut
