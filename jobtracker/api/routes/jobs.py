from fastapi import APIRouter, Depends, HTTPException, Path, status

from jobtracker.core.auth import Principal, Role
from jobtracker.core.security import require_roles
from jobtracker.schemas.common import MAX_ID, MessageResponse
from jobtracker.schemas.jobs import JobCreatedResponse, JobOut, JobWriteRequest
from jobtracker.services.errors import ForbiddenError, NotFoundError
from jobtracker.services.jobs import JobManager, get_job_manager
from jobtracker.services.repository import RepositoryNotFoundError, RepositoryUnavailableError

router = APIRouter()


@router.post("", response_model=JobCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_job(
    payload: JobWriteRequest,
    principal: Principal = Depends(require_roles(Role.PUBLISHER)),
    jobs: JobManager = Depends(get_job_manager),
) -> JobCreatedResponse:
    try:
        row = await jobs.create(
            publisher_id=principal.user_id,
            title=payload.title,
            description=payload.description,
            location=payload.location,
            salary_range=payload.salary_range,
        )
    except RepositoryNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="invalid principal") from exc
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc

    return JobCreatedResponse(message="job created successfully", job=JobOut(**row))


@router.get("", response_model=list[JobOut])
async def list_jobs(jobs: JobManager = Depends(get_job_manager)) -> list[JobOut]:
    try:
        rows = await jobs.list_open()
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return [JobOut(**row) for row in rows]


@router.get("/{job_id}", response_model=JobOut)
async def get_job(
    job_id: int = Path(ge=1, le=MAX_ID),
    jobs: JobManager = Depends(get_job_manager),
) -> JobOut:
    try:
        row = await jobs.get(job_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return JobOut(**row)


@router.put("/{job_id}", response_model=MessageResponse)
async def update_job(
    payload: JobWriteRequest,
    job_id: int = Path(ge=1, le=MAX_ID),
    principal: Principal = Depends(require_roles(Role.PUBLISHER)),
    jobs: JobManager = Depends(get_job_manager),
) -> MessageResponse:
    try:
        await jobs.update(
            job_id=job_id,
            publisher_id=principal.user_id,
            title=payload.title,
            description=payload.description,
            location=payload.location,
            salary_range=payload.salary_range,
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ForbiddenError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return MessageResponse(message="job updated successfully")


@router.delete("/{job_id}", response_model=MessageResponse)
async def close_job(
    job_id: int = Path(ge=1, le=MAX_ID),
    principal: Principal = Depends(require_roles(Role.PUBLISHER)),
    jobs: JobManager = Depends(get_job_manager),
) -> MessageResponse:
    try:
        await jobs.close(job_id=job_id, publisher_id=principal.user_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ForbiddenError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return MessageResponse(message="job closed successfully")
