"""Job service — job operations bound to the authenticated user.

Every method forwards identity.user_id as the owner into the
repository. There is no way to pass an owner explicitly, so a request
can only ever see or change its own jobs.
"""

import uuid
from typing import Optional

import structlog

from jobtracker.auth.dependencies import CurrentUser
from jobtracker.db.models import Job
from jobtracker.services.job_repository import JobFields, JobRepository

logger = structlog.get_logger()


class JobService:
    """Owner-scoped job operations for one request."""

    def __init__(self, repo: JobRepository, identity: CurrentUser):
        self.repo = repo
        self.identity = identity

    @property
    def owner_id(self) -> uuid.UUID:
        return self.identity.user_id

    async def list_jobs(self, status: Optional[str] = None) -> list[Job]:
        return await self.repo.list(self.owner_id, status)

    async def get_job(self, job_id: uuid.UUID) -> Job:
        return await self.repo.get(self.owner_id, job_id)

    async def create_job(self, fields: JobFields) -> Job:
        job = await self.repo.create(self.owner_id, fields)
        await self.repo.db.commit()
        logger.info(
            "jobtracker.job_created",
            job_id=str(job.id),
            user_id=str(self.owner_id),
            status=job.status,
        )
        return job

    async def update_job(self, job_id: uuid.UUID, fields: JobFields) -> Job:
        job = await self.repo.update(self.owner_id, job_id, fields)
        await self.repo.db.commit()
        logger.info(
            "jobtracker.job_updated",
            job_id=str(job.id),
            user_id=str(self.owner_id),
            status=job.status,
        )
        return job

    async def delete_job(self, job_id: uuid.UUID) -> Job:
        job = await self.repo.delete(self.owner_id, job_id)
        await self.repo.db.commit()
        logger.info(
            "jobtracker.job_deleted",
            job_id=str(job_id),
            user_id=str(self.owner_id),
        )
        return job
