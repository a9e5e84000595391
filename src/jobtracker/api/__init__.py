"""API route aggregation.

All routers registered here get mounted in main.py under /api.

Auth for jobs is applied per-route: the job service dependency itself
requires a verified CurrentUser, so no job handler can run without one.
Health and auth routers are open.
"""

from fastapi import APIRouter

from jobtracker.api.auth import router as auth_router
from jobtracker.api.health import router as health_router
from jobtracker.api.jobs import router as jobs_router

api_router = APIRouter(prefix="/api")

# Open routes: no auth required
api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])

# Protected routes: require a valid bearer token
api_router.include_router(jobs_router, tags=["jobs"])
