from datetime import datetime
from typing import Annotated, Literal

from pydantic import AfterValidator, AnyUrl, BaseModel, Field, TypeAdapter, ValidationError

from jobtracker.schemas.common import MAX_ID

ApplicationStatus = Literal["pending", "received", "reviewed", "interview", "selected", "rejected"]
DecisionStatus = Literal["received", "interview", "selected", "rejected"]

_URL_ADAPTER = TypeAdapter(AnyUrl)


def _check_url(value: str) -> str:
    try:
        _URL_ADAPTER.validate_python(value)
    except ValidationError as exc:
        raise ValueError("resume_url must be a valid URL") from exc
    return value


# Validated as a URL but stored exactly as submitted.
ResumeUrl = Annotated[str, AfterValidator(_check_url)]


class ApplicationCreateRequest(BaseModel):
    job_id: int = Field(ge=1, le=MAX_ID)
    cover_letter: str | None = Field(default=None, min_length=1)
    resume_url: ResumeUrl | None = None


class ApplicationStatusRequest(BaseModel):
    status: DecisionStatus
    rejection_reason: str | None = Field(default=None, min_length=1)


class ApplicationSubmittedOut(BaseModel):
    id: int
    job_id: int
    applicant_id: int
    status: ApplicationStatus


class ApplicationSubmittedResponse(BaseModel):
    message: str
    application: ApplicationSubmittedOut


class ApplicationOut(BaseModel):
    id: int
    job_id: int
    applicant_id: int
    status: ApplicationStatus
    resume_url: str | None = None
    cover_letter: str | None = None
    approver_id: int | None = None
    rejection_reason: str | None = None
    created_at: datetime
    updated_at: datetime


class MyApplicationOut(ApplicationOut):
    title: str
    description: str
    location: str | None = None
    publisher_name: str


class JobApplicationOut(ApplicationOut):
    applicant_name: str
    applicant_email: str
