"""Job API routes.

Every handler gets a JobService built from the verified CurrentUser,
so the owner of every query is the token's user, never a value from
the body or the URL. Routes only translate service errors to HTTP:

  ValidationError / InvalidStatusError → 400
  JobNotFoundError (missing or someone else's) → 404
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from jobtracker.auth.dependencies import CurrentUser, get_current_user
from jobtracker.db.engine import get_db
from jobtracker.schemas.job import JobDeleted, JobRead, JobWrite
from jobtracker.services.errors import JobNotFoundError, ValidationError
from jobtracker.services.job_repository import JobFields, JobRepository
from jobtracker.services.job_service import JobService

router = APIRouter(prefix="/jobs")


def _svc(
    identity: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> JobService:
    return JobService(JobRepository(db), identity)


def _job_id(raw: str) -> uuid.UUID:
    """Parse a path id. Malformed ids can never match a job, so they 404."""
    try:
        return uuid.UUID(raw)
    except ValueError:
        raise HTTPException(status_code=404, detail="Job not found")


def _fields(body: JobWrite) -> JobFields:
    return JobFields(
        company=body.company,
        title=body.title,
        status=body.status,
        application_date=body.application_date,
        notes=body.notes,
    )


@router.get("", response_model=list[JobRead])
async def list_jobs(
    status: Optional[str] = Query(None, description="Filter by status (or 'all')"),
    svc: JobService = Depends(_svc),
):
    return await svc.list_jobs(status)


@router.get("/{job_id}", response_model=JobRead)
async def get_job(job_id: str, svc: JobService = Depends(_svc)):
    try:
        return await svc.get_job(_job_id(job_id))
    except JobNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("", response_model=JobRead, status_code=201)
async def create_job(body: JobWrite, svc: JobService = Depends(_svc)):
    """Create a job. applicationDate defaults to today, notes to ""."""
    try:
        return await svc.create_job(_fields(body))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/{job_id}", response_model=JobRead)
async def update_job(
    job_id: str,
    body: JobWrite,
    svc: JobService = Depends(_svc),
):
    """Replace a job's fields. Omitted applicationDate keeps the stored one."""
    try:
        return await svc.update_job(_job_id(job_id), _fields(body))
    except JobNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{job_id}", response_model=JobDeleted)
async def delete_job(job_id: str, svc: JobService = Depends(_svc)):
    try:
        job = await svc.delete_job(_job_id(job_id))
    except JobNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return JobDeleted(message="Job deleted successfully", id=job.id)
