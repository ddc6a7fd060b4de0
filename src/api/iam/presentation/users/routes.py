"""HTTP routes for user-centric group queries."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, Response, status
from fastapi.responses import JSONResponse

from iam.application.services import HierarchyService
from iam.dependencies.authentication import get_principal
from iam.dependencies.group import get_read_hierarchy_service
from iam.domain.exceptions import CorruptHierarchyError
from iam.ports.exceptions import UserNotFoundError
from iam.presentation.groups.models import ErrorResponse
from iam.presentation.users.models import EffectiveGroupsResponse
from shared_kernel.authorization import (
    Capability,
    ForbiddenError,
    Principal,
    require_capability,
)

router = APIRouter(
    prefix="/users",
    tags=["users"],
)


@router.get(
    "/{username}/groups",
    response_model=EffectiveGroupsResponse,
    summary="List a user's effective groups",
    responses={
        401: {"description": "Authentication required"},
        403: {"description": "Administrative capability required"},
        404: {"description": "User not found"},
        409: {"model": ErrorResponse, "description": "Corrupt hierarchy"},
    },
)
async def list_effective_groups(
    username: Annotated[str, Path(min_length=1, max_length=50)],
    principal: Annotated[Principal, Depends(get_principal)],
    hierarchy: Annotated[HierarchyService, Depends(get_read_hierarchy_service)],
) -> EffectiveGroupsResponse | Response:
    """Resolve the closure of a user's groups.

    Callers may always query themselves; anyone else needs ADMIN.
    """
    if principal.username != username:
        try:
            require_capability(principal, Capability.ADMIN)
        except ForbiddenError as e:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Administrative capability required",
            ) from e

    try:
        groups = await hierarchy.effective_groups_for(username)
    except UserNotFoundError:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    except CorruptHierarchyError as e:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=ErrorResponse(type="CorruptHierarchy", message=str(e)).model_dump(),
        )

    return EffectiveGroupsResponse.from_domain(username, groups)
