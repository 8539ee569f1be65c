from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

JobStatus = Literal["open", "closed"]


class JobWriteRequest(BaseModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    location: str | None = Field(default=None, min_length=1)
    salary_range: str | None = Field(default=None, min_length=1)


class JobOut(BaseModel):
    id: int
    publisher_id: int
    title: str
    description: str
    location: str | None = None
    salary_range: str | None = None
    status: JobStatus = "open"
    publisher_name: str | None = None
    created_at: datetime
    updated_at: datetime


class JobCreatedResponse(BaseModel):
    message: str
    job: JobOut
