"""
Group listing, creation, description changes and joining.
"""

from fastapi import APIRouter

from agora.core.group import GroupData
from agora.core.models import (
    ErrorResponse,
    GroupCreationRequest,
    GroupDescriptionRequest,
    JoinResponse,
)
from agora.service import groups as groups_service

from .dependencies import (
    AuthenticatedUserDependency,
    DatabaseDependency,
    LoggerDependency,
    SettingsDependency,
)

group_app = APIRouter(tags=["Groups"])


@group_app.get(
    "/list",
    summary="List the newest groups",
    responses={200: {"description": "The most recently created groups."}},
)
async def list_groups(
    settings: SettingsDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> list[GroupData]:
    groups = await groups_service.get_latest(
        conn=conn, log=log, limit=settings.group_list_length
    )
    return [g.to_core() for g in groups]


@group_app.get(
    "/{name}",
    summary="Get a group",
    description=(
        "Retrieve a group by its name. Pass `username` to find out whether "
        "that user has joined the group."
    ),
    responses={
        200: {"description": "Group details."},
        404: {"model": ErrorResponse, "description": "Group not found."},
    },
)
async def get_group(
    name: str,
    conn: DatabaseDependency,
    log: LoggerDependency,
    username: str | None = None,
) -> GroupData:
    group = await groups_service.read_by_name(group_name=name, conn=conn, log=log)
    return group.to_core(viewer_name=username)


@group_app.post(
    "/create",
    summary="Create a new group",
    description="The caller becomes the only admin of the new group.",
    responses={
        200: {"description": "Group created."},
        401: {"model": ErrorResponse, "description": "Invalid token."},
        406: {"model": ErrorResponse, "description": "Group name too short."},
        409: {"model": ErrorResponse, "description": "Group already exists."},
    },
)
async def create_group(
    content: GroupCreationRequest,
    user: AuthenticatedUserDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> GroupData:
    group = await groups_service.create(
        group_name=content.name,
        description=content.description,
        created_by=user,
        conn=conn,
        log=log,
    )
    return group.to_core(viewer_name=user.user_name)


@group_app.put(
    "/{name}/description",
    summary="Change a group's description",
    responses={
        200: {"description": "Description updated."},
        401: {"model": ErrorResponse, "description": "Invalid token."},
        403: {
            "model": ErrorResponse,
            "description": "Caller is not an admin of the group.",
        },
        404: {"model": ErrorResponse, "description": "Group not found."},
    },
)
async def update_description(
    name: str,
    content: GroupDescriptionRequest,
    user: AuthenticatedUserDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> GroupData:
    group = await groups_service.update_description(
        group_name=name,
        description=content.description,
        identity=user,
        conn=conn,
        log=log,
    )
    return group.to_core(viewer_name=user.user_name)


@group_app.post(
    "/{name}/join",
    summary="Join a group",
    responses={
        200: {"description": "Joined (or already a member)."},
        401: {"model": ErrorResponse, "description": "Invalid token."},
        404: {"model": ErrorResponse, "description": "Group not found."},
    },
)
async def join_group(
    name: str,
    user: AuthenticatedUserDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> JoinResponse:
    group = await groups_service.join(group_name=name, user=user, conn=conn, log=log)
    return JoinResponse(joined=group.group_name)
