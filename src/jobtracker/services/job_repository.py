"""Job repository — owner-scoped persistence for job applications.

Every method takes owner_id and puts it in the WHERE clause of the
query that loads the row. A job owned by someone else is therefore
indistinguishable from a job that doesn't exist: both raise
JobNotFoundError.

Status vocabulary:
  Applied → Interviewing → Offer / Rejected
Input is case-insensitive; storage is always Title-Case.
"""

import uuid
from dataclasses import dataclass
from datetime import date
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from jobtracker.db.models import Job, utcnow
from jobtracker.services.errors import (
    InvalidStatusError,
    JobNotFoundError,
    ValidationError,
)

JOB_STATUSES: tuple[str, ...] = ("Applied", "Interviewing", "Rejected", "Offer")

# List filter values that mean "every status"
_NO_FILTER = {"", "all"}


def canonical_status(value: str) -> str:
    """Map any casing of a known status to its stored form.

    Raises InvalidStatusError for anything outside the vocabulary.
    """
    candidate = value.strip().capitalize()
    if candidate not in JOB_STATUSES:
        raise InvalidStatusError(
            "Invalid status. Must be: Applied, Interviewing, Rejected, or Offer"
        )
    return candidate


@dataclass
class JobFields:
    """Client-supplied job fields, before validation."""
    company: Optional[str] = None
    title: Optional[str] = None
    status: Optional[str] = None
    application_date: Optional[date] = None
    notes: Optional[str] = None


@dataclass
class _CleanFields:
    company: str
    title: str
    status: str
    application_date: Optional[date]
    notes: str


def _validate(fields: JobFields) -> _CleanFields:
    company = (fields.company or "").strip()
    title = (fields.title or "").strip()
    status = (fields.status or "").strip()
    if not company or not title or not status:
        raise ValidationError("Company, title, and status are required fields")

    return _CleanFields(
        company=company,
        title=title,
        status=canonical_status(status),
        application_date=fields.application_date,
        notes=(fields.notes or "").strip(),
    )


class JobRepository:
    """CRUD for jobs, always filtered by owner.

    Writes are flushed, not committed. The caller owns the transaction.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(
        self, owner_id: uuid.UUID, status: Optional[str] = None
    ) -> list[Job]:
        """Owner's jobs, newest first, optionally filtered by status.

        An unknown status filter matches nothing rather than erroring.
        """
        q = select(Job).where(Job.owner_id == owner_id)
        if status is not None and status.strip().lower() not in _NO_FILTER:
            q = q.where(Job.status == status.strip().capitalize())
        q = q.order_by(Job.created_at.desc())

        result = await self.db.execute(q)
        return list(result.scalars().all())

    async def get(self, owner_id: uuid.UUID, job_id: uuid.UUID) -> Job:
        result = await self.db.execute(
            select(Job).where(Job.id == job_id, Job.owner_id == owner_id)
        )
        job = result.scalars().first()
        if not job:
            raise JobNotFoundError("Job not found")
        return job

    async def create(self, owner_id: uuid.UUID, fields: JobFields) -> Job:
        clean = _validate(fields)
        job = Job(
            owner_id=owner_id,
            company=clean.company,
            title=clean.title,
            status=clean.status,
            application_date=clean.application_date or date.today(),
            notes=clean.notes,
        )
        self.db.add(job)
        await self.db.flush()
        return job

    async def update(
        self, owner_id: uuid.UUID, job_id: uuid.UUID, fields: JobFields
    ) -> Job:
        """Replace a job's fields.

        Ownership is checked before the payload, so a foreign job id
        reports not-found even when the body is invalid. Unlike create,
        an omitted application_date keeps the stored date.
        """
        job = await self.get(owner_id, job_id)
        clean = _validate(fields)

        job.company = clean.company
        job.title = clean.title
        job.status = clean.status
        if clean.application_date is not None:
            job.application_date = clean.application_date
        job.notes = clean.notes
        job.updated_at = utcnow()

        try:
            await self.db.flush()
        except StaleDataError:
            # Row deleted by a concurrent request between load and flush
            raise JobNotFoundError("Job not found")
        return job

    async def delete(self, owner_id: uuid.UUID, job_id: uuid.UUID) -> Job:
        """Remove a job and return its last state.

        The DELETE repeats the owner check in its own WHERE clause. If a
        concurrent request removed the row after it was loaded, no row
        matches and the caller gets JobNotFoundError.
        """
        job = await self.get(owner_id, job_id)
        result = await self.db.execute(
            delete(Job)
            .where(Job.id == job_id, Job.owner_id == owner_id)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise JobNotFoundError("Job not found")
        self.db.expunge(job)
        return job
