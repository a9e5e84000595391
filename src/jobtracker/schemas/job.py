"""Pydantic schemas for jobs.

JSON uses camelCase (applicationDate, createdAt, ...); Python attributes
stay snake_case. Both spellings are accepted on input.

Required-field and status checks are NOT done here; the job
repository owns those rules so every caller gets the same errors.
Schemas only enforce types (e.g. applicationDate must be a date).
"""

import uuid
from datetime import date, datetime
from typing import Any, Optional

from pydantic import field_validator

from jobtracker.schemas.common import CamelModel


class JobWrite(CamelModel):
    """Body for POST /jobs and PUT /jobs/{id}."""
    company: Optional[str] = None
    title: Optional[str] = None
    status: Optional[str] = None
    application_date: Optional[date] = None
    notes: Optional[str] = None

    @field_validator("application_date", mode="before")
    @classmethod
    def blank_date_is_missing(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class JobRead(CamelModel):
    id: uuid.UUID
    owner_id: uuid.UUID
    company: str
    title: str
    status: str
    application_date: date
    notes: str
    created_at: datetime
    updated_at: datetime


class JobDeleted(CamelModel):
    message: str
    id: uuid.UUID
