from __future__ import annotations

import logging
from typing import Any

from fastapi import Depends

from jobtracker.services.errors import ForbiddenError, NotFoundError
from jobtracker.services.repository import get_repository

logger = logging.getLogger(__name__)


class JobManager:
    def __init__(self, repository) -> None:
        self.repository = repository

    async def create(
        self,
        *,
        publisher_id: int,
        title: str,
        description: str,
        location: str | None = None,
        salary_range: str | None = None,
    ) -> dict[str, Any]:
        async with self.repository.connection() as conn:
            job = await conn.insert_job(
                publisher_id=publisher_id,
                title=title,
                description=description,
                location=location,
                salary_range=salary_range,
            )
        logger.info("job created id=%s publisher_id=%s", job["id"], publisher_id)
        return job

    async def list_open(self) -> list[dict[str, Any]]:
        async with self.repository.connection() as conn:
            return await conn.list_open_jobs()

    async def get(self, job_id: int) -> dict[str, Any]:
        async with self.repository.connection() as conn:
            job = await conn.get_job(job_id)
        if not job:
            raise NotFoundError("job not found")
        return job

    async def update(
        self,
        *,
        job_id: int,
        publisher_id: int,
        title: str,
        description: str,
        location: str | None = None,
        salary_range: str | None = None,
    ) -> None:
        async with self.repository.connection() as conn:
            await self._require_owned_job(conn, job_id=job_id, publisher_id=publisher_id)
            await conn.update_job(
                job_id=job_id,
                title=title,
                description=description,
                location=location,
                salary_range=salary_range,
            )

    async def close(self, *, job_id: int, publisher_id: int) -> None:
        """Close a job for good. Jobs are never physically deleted."""
        async with self.repository.connection() as conn:
            await self._require_owned_job(conn, job_id=job_id, publisher_id=publisher_id)
            await conn.close_job(job_id)
        logger.info("job closed id=%s", job_id)

    @staticmethod
    async def _require_owned_job(conn, *, job_id: int, publisher_id: int) -> dict[str, Any]:
        job = await conn.get_job(job_id)
        if not job:
            raise NotFoundError("job not found")
        if job["publisher_id"] != publisher_id:
            raise ForbiddenError("unauthorized")
        return job


def get_job_manager(repository=Depends(get_repository)) -> JobManager:
    return JobManager(repository)
