from fastapi import APIRouter, Depends, HTTPException, Path, status

from jobtracker.core.auth import Principal, Role
from jobtracker.core.security import require_roles
from jobtracker.schemas.applications import (
    ApplicationCreateRequest,
    ApplicationStatusRequest,
    ApplicationSubmittedOut,
    ApplicationSubmittedResponse,
    JobApplicationOut,
    MyApplicationOut,
)
from jobtracker.schemas.common import MAX_ID, MessageResponse
from jobtracker.services.applications import ApplicationManager, get_application_manager
from jobtracker.services.errors import AlreadyAppliedError, ForbiddenError, JobNotFoundError, NotFoundError
from jobtracker.services.repository import RepositoryUnavailableError

router = APIRouter()


@router.post("", response_model=ApplicationSubmittedResponse, status_code=status.HTTP_201_CREATED)
async def apply_for_job(
    payload: ApplicationCreateRequest,
    principal: Principal = Depends(require_roles(Role.APPLICANT)),
    applications: ApplicationManager = Depends(get_application_manager),
) -> ApplicationSubmittedResponse:
    try:
        row = await applications.apply(
            applicant_id=principal.user_id,
            job_id=payload.job_id,
            cover_letter=payload.cover_letter,
            resume_url=payload.resume_url,
        )
    except JobNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except AlreadyAppliedError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc

    return ApplicationSubmittedResponse(
        message="application submitted successfully",
        application=ApplicationSubmittedOut(**row),
    )


@router.get("/my-applications", response_model=list[MyApplicationOut])
async def list_my_applications(
    principal: Principal = Depends(require_roles(Role.APPLICANT)),
    applications: ApplicationManager = Depends(get_application_manager),
) -> list[MyApplicationOut]:
    try:
        rows = await applications.list_mine(principal.user_id)
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return [MyApplicationOut(**row) for row in rows]


@router.get("/job/{job_id}", response_model=list[JobApplicationOut])
async def list_job_applications(
    job_id: int = Path(ge=1, le=MAX_ID),
    principal: Principal = Depends(require_roles(Role.PUBLISHER)),
    applications: ApplicationManager = Depends(get_application_manager),
) -> list[JobApplicationOut]:
    try:
        rows = await applications.list_for_job(job_id=job_id, publisher_id=principal.user_id)
    except ForbiddenError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return [JobApplicationOut(**row) for row in rows]


@router.put("/{application_id}/status", response_model=MessageResponse)
async def update_application_status(
    payload: ApplicationStatusRequest,
    application_id: int = Path(ge=1, le=MAX_ID),
    principal: Principal = Depends(require_roles(Role.APPROVER)),
    applications: ApplicationManager = Depends(get_application_manager),
) -> MessageResponse:
    try:
        await applications.update_status(
            application_id=application_id,
            approver_id=principal.user_id,
            status=payload.status,
            rejection_reason=payload.rejection_reason,
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return MessageResponse(message="application status updated successfully")
