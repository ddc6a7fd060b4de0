"""IAM presentation layer - aggregate-based organization.

Organizes presentation concerns by domain aggregate (groups, users)
following vertical slicing and DDD principles. Each aggregate package contains
its own routes and models.
"""

from __future__ import annotations

from fastapi import APIRouter

from iam.presentation import groups, users

# Auth is enforced per-endpoint (each handler declares its own Depends)
router = APIRouter(
    prefix="/iam",
    tags=["iam"],
)

router.include_router(groups.router)
router.include_router(users.router)

__all__ = ["router"]
