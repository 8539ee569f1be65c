from __future__ import annotations

import logging
from typing import Any

from fastapi import Depends

from jobtracker.services.errors import AlreadyAppliedError, ForbiddenError, JobNotFoundError, NotFoundError
from jobtracker.services.repository import RepositoryConflictError, RepositoryNotFoundError, get_repository
from jobtracker.services.schema import APPLICATIONS_UNIQUE_CONSTRAINT

logger = logging.getLogger(__name__)

# Statuses an approver may set. Any decided application may be re-decided,
# but nothing returns to pending.
DECISION_STATUSES = frozenset({"received", "interview", "selected", "rejected"})


class ApplicationManager:
    def __init__(self, repository) -> None:
        self.repository = repository

    async def apply(
        self,
        *,
        applicant_id: int,
        job_id: int,
        cover_letter: str | None = None,
        resume_url: str | None = None,
    ) -> dict[str, Any]:
        async with self.repository.connection() as conn:
            job = await conn.get_job(job_id)
            if not job or job["status"] != "open":
                raise JobNotFoundError("job not found or is closed")

            if await conn.find_application(job_id=job_id, applicant_id=applicant_id):
                raise AlreadyAppliedError("you have already applied for this job")

            try:
                application = await conn.insert_application(
                    job_id=job_id,
                    applicant_id=applicant_id,
                    cover_letter=cover_letter,
                    resume_url=resume_url,
                )
            except RepositoryConflictError as exc:
                if exc.constraint != APPLICATIONS_UNIQUE_CONSTRAINT:
                    raise
                raise AlreadyAppliedError("you have already applied for this job") from exc
            except RepositoryNotFoundError as exc:
                raise JobNotFoundError("job not found or is closed") from exc

        logger.info(
            "application submitted id=%s job_id=%s applicant_id=%s",
            application["id"],
            job_id,
            applicant_id,
        )
        return application

    async def list_mine(self, applicant_id: int) -> list[dict[str, Any]]:
        async with self.repository.connection() as conn:
            return await conn.list_applications_by_applicant(applicant_id)

    async def list_for_job(self, *, job_id: int, publisher_id: int) -> list[dict[str, Any]]:
        async with self.repository.connection() as conn:
            job = await conn.get_job(job_id)
            # A missing job is reported exactly like someone else's job.
            if not job or job["publisher_id"] != publisher_id:
                raise ForbiddenError("unauthorized")
            return await conn.list_applications_for_job(job_id)

    async def update_status(
        self,
        *,
        application_id: int,
        approver_id: int,
        status: str,
        rejection_reason: str | None = None,
    ) -> dict[str, Any]:
        """Record an approver decision.

        The deciding approver replaces any previous one, and ``rejection_reason``
        is written as given, so omitting it clears a reason left by an earlier
        rejection.
        """
        if status not in DECISION_STATUSES:
            raise ValueError(f"invalid decision status: {status}")

        async with self.repository.connection() as conn:
            application = await conn.update_application_status(
                application_id=application_id,
                status=status,
                approver_id=approver_id,
                rejection_reason=rejection_reason,
            )
        if not application:
            raise NotFoundError("application not found")

        logger.info(
            "application decided id=%s status=%s approver_id=%s",
            application_id,
            status,
            approver_id,
        )
        return application


def get_application_manager(repository=Depends(get_repository)) -> ApplicationManager:
    return ApplicationManager(repository)
