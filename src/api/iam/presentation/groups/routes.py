"""HTTP routes for group management.

Mutating routes depend on get_admin_principal, so authentication and the
ADMIN check finish before any service runs. Membership not-found outcomes
return a bare 404 so callers cannot tell a missing group from a missing user.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Response, status
from fastapi.responses import JSONResponse

from iam.application.services import GroupService, HierarchyService, MembershipService
from iam.dependencies.authentication import get_admin_principal, get_principal
from iam.dependencies.group import (
    get_group_service,
    get_hierarchy_service,
    get_membership_service,
)
from iam.domain.exceptions import CorruptHierarchyError
from iam.ports.exceptions import (
    DuplicateGroupNameError,
    GroupNotFoundError,
    ParentGroupNotFoundError,
    UserNotFoundError,
)
from iam.presentation.groups.models import (
    GROUP_NAME_PATTERN,
    AddGroupMemberRequest,
    CreateGroupRequest,
    ErrorResponse,
    GroupDetailResponse,
    StatusResponse,
)
from shared_kernel.authorization import Principal

router = APIRouter(
    prefix="/groups",
    tags=["groups"],
)

GroupName = Annotated[
    str, Path(min_length=1, max_length=50, pattern=GROUP_NAME_PATTERN)
]
Username = Annotated[
    str, Path(min_length=1, max_length=50, pattern=GROUP_NAME_PATTERN)
]


def _error(status_code: int, error_type: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(type=error_type, message=message).model_dump(),
    )


@router.put(
    "",
    response_model=StatusResponse,
    summary="Create group",
    responses={
        400: {"model": ErrorResponse, "description": "Parent group not found"},
        401: {"description": "Authentication required"},
        403: {"description": "Administrative capability required"},
        409: {"model": ErrorResponse, "description": "Group name already taken"},
    },
)
async def create_group(
    request: CreateGroupRequest,
    principal: Annotated[Principal, Depends(get_admin_principal)],
    service: Annotated[GroupService, Depends(get_group_service)],
) -> StatusResponse | JSONResponse:
    """Create a new group, optionally under an existing parent.

    Args:
        request: Group name and optional parent name
        principal: Authenticated principal holding ADMIN
        service: Group service

    Returns:
        StatusResponse on success

    Responses:
        409 GroupAlreadyExists if an active group has this name
        400 ParentGroupNotFound if the parent does not resolve
    """
    try:
        await service.create_group(
            name=request.name,
            actor=principal,
            parent_name=request.parent,
        )
    except DuplicateGroupNameError as e:
        return _error(status.HTTP_409_CONFLICT, "GroupAlreadyExists", str(e))
    except ParentGroupNotFoundError as e:
        return _error(status.HTTP_400_BAD_REQUEST, "ParentGroupNotFound", str(e))
    except CorruptHierarchyError as e:
        return _error(status.HTTP_409_CONFLICT, "CorruptHierarchy", str(e))

    return StatusResponse()


@router.get(
    "/{group_name}",
    response_model=GroupDetailResponse,
    summary="Get group",
    responses={
        401: {"description": "Authentication required"},
        404: {"description": "Group not found"},
        409: {"model": ErrorResponse, "description": "Corrupt hierarchy"},
    },
)
async def get_group(
    group_name: GroupName,
    principal: Annotated[Principal, Depends(get_principal)],
    service: Annotated[GroupService, Depends(get_group_service)],
    hierarchy: Annotated[HierarchyService, Depends(get_hierarchy_service)],
) -> GroupDetailResponse | Response:
    """Get an active group with its ancestor chain."""
    try:
        group = await service.get_group(group_name)
        ancestors = await hierarchy.ancestors_of(group)
    except GroupNotFoundError:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    except CorruptHierarchyError as e:
        return _error(status.HTTP_409_CONFLICT, "CorruptHierarchy", str(e))

    return GroupDetailResponse.from_domain_with_ancestors(group, ancestors)


@router.delete(
    "/{group_name}",
    response_model=StatusResponse,
    summary="Delete group",
    responses={
        401: {"description": "Authentication required"},
        403: {"description": "Administrative capability required"},
        404: {"description": "Group not found"},
    },
)
async def delete_group(
    group_name: GroupName,
    principal: Annotated[Principal, Depends(get_admin_principal)],
    service: Annotated[GroupService, Depends(get_group_service)],
) -> StatusResponse | Response:
    """Soft-delete an active group. Memberships and child links are kept."""
    try:
        await service.delete_group(group_name, actor=principal)
    except GroupNotFoundError:
        return Response(status_code=status.HTTP_404_NOT_FOUND)

    return StatusResponse()


@router.put(
    "/{group_name}",
    response_model=StatusResponse,
    summary="Add group member",
    responses={
        401: {"description": "Authentication required"},
        403: {"description": "Administrative capability required"},
        404: {"description": "Group or user not found"},
    },
)
async def add_member(
    group_name: GroupName,
    request: AddGroupMemberRequest,
    principal: Annotated[Principal, Depends(get_admin_principal)],
    service: Annotated[MembershipService, Depends(get_membership_service)],
) -> StatusResponse | Response:
    """Add a user to a group. Adding an existing member succeeds unchanged."""
    try:
        await service.add_member(group_name, request.username, actor=principal)
    except (GroupNotFoundError, UserNotFoundError):
        return Response(status_code=status.HTTP_404_NOT_FOUND)

    return StatusResponse()


@router.delete(
    "/{group_name}/{username}",
    response_model=StatusResponse,
    summary="Remove group member",
    responses={
        401: {"description": "Authentication required"},
        403: {"description": "Administrative capability required"},
        404: {"description": "Group or user not found"},
    },
)
async def remove_member(
    group_name: GroupName,
    username: Username,
    principal: Annotated[Principal, Depends(get_admin_principal)],
    service: Annotated[MembershipService, Depends(get_membership_service)],
) -> StatusResponse | Response:
    """Remove a user from a group. Removing a non-member succeeds unchanged."""
    try:
        await service.remove_member(group_name, username, actor=principal)
    except (GroupNotFoundError, UserNotFoundError):
        return Response(status_code=status.HTTP_404_NOT_FOUND)

    return StatusResponse()
