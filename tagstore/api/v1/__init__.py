"""
API v1 routes.
"""

from fastapi import APIRouter

from tagstore.api.v1 import auth, events, projects, records, users
from tagstore.schemas.common import ErrorResponse

# Error bodies every route may return, for the OpenAPI docs
router = APIRouter(
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)

router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(users.router, prefix="/users", tags=["Users"])
router.include_router(projects.router, prefix="/projects", tags=["Projects"])
router.include_router(records.router, prefix="/records", tags=["Records"])
router.include_router(events.router, prefix="/events", tags=["Events"])
