"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from app.api.v1.dependencies (no manual repo/service construction).
"""

from fastapi import APIRouter

from app.api.v1.endpoints import (
    applications,
    cohorts,
    education,
    events,
    health,
    institutions,
    points,
    programs,
    resources,
    submissions,
    teams,
    upload,
    user,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(user.router, prefix="/user", tags=["user"])
api_router.include_router(education.router, prefix="/education", tags=["education"])
api_router.include_router(
    institutions.router, prefix="/institutions", tags=["institutions"]
)
api_router.include_router(programs.router, prefix="/programs", tags=["programs"])
api_router.include_router(cohorts.router, prefix="/cohorts", tags=["cohorts"])
api_router.include_router(teams.router, prefix="/teams", tags=["teams"])
api_router.include_router(
    applications.router, prefix="/applications", tags=["applications"]
)
api_router.include_router(submissions.router, prefix="/submissions", tags=["submissions"])
api_router.include_router(resources.router, prefix="/resources", tags=["resources"])
api_router.include_router(events.router, prefix="/events", tags=["events"])
api_router.include_router(points.router, prefix="/points", tags=["points"])
api_router.include_router(upload.router, prefix="/upload", tags=["upload"])
