"""
Service layer for groups.
"""

from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from structlog.typing import FilteringBoundLogger

from agora.core.errors import Conflict, NotAcceptable, NotFound
from agora.database.group import Group
from agora.database.user import User

from .ownership import authorize_group

MINIMUM_GROUP_NAME_LENGTH = 4


class GroupNotFound(NotFound):
    resource_kind = "group"


class GroupExistsError(Conflict):
    pass


async def create(
    group_name: str,
    description: str,
    created_by: User,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> Group:
    """
    Create a new group.

    Parameters
    ----------
    group_name: str
        The name of the new group. Must be unique.
    description: str
        Free text describing the group.
    created_by: User
        The user creating the group, who becomes its only admin.

    Raises
    ------
    NotAcceptable
        If the group name is too short.
    GroupExistsError
        If a group with this name already exists.
    """
    group_name = (group_name or "").strip()

    log = log.bind(group_name=group_name, user_id=created_by.user_id)

    if len(group_name) < MINIMUM_GROUP_NAME_LENGTH:
        await log.ainfo("group.create.invalid_name")
        raise NotAcceptable(
            f"Group name should be of length {MINIMUM_GROUP_NAME_LENGTH} or above!"
        )

    existing = (
        await conn.execute(select(Group.group_id).filter(Group.group_name == group_name))
    ).scalar_one_or_none()

    if existing is not None:
        await log.ainfo("group.exists")
        raise GroupExistsError(f"The Group with name {group_name} already exists!")

    group = Group(
        group_name=group_name,
        description=description or "",
        created_at=datetime.now(timezone.utc),
        admins=[created_by],
        members=[],
    )

    try:
        conn.add(group)
        await conn.flush()
    except IntegrityError as e:
        log = log.bind(error=e)
        await log.ainfo("group.exists")
        raise GroupExistsError(f"The Group with name {group_name} already exists!")

    await log.ainfo("group.created", group_id=group.group_id)

    return group


async def read_by_name(
    group_name: str,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> Group:
    """
    Read a group by its name.

    Raises
    ------
    GroupNotFound
        If the group does not exist.
    """
    result = await conn.execute(select(Group).filter(Group.group_name == group_name))
    group = result.scalar_one_or_none()

    if group is None:
        await log.adebug("group.not_found", group_name=group_name)
        raise GroupNotFound(f"Group with name {group_name} doesn't exist")

    return group


async def get_latest(
    conn: AsyncSession,
    log: FilteringBoundLogger,
    limit: int = 5,
) -> list[Group]:
    """
    Get the most recently created groups, newest first.
    """
    query = (
        select(Group)
        .order_by(Group.created_at.desc(), Group.group_id.desc())
        .limit(limit)
    )
    result = await conn.execute(query)
    groups = list(result.scalars().all())
    await log.adebug("group.listed", number_of_groups=len(groups))
    return groups


async def update_description(
    group_name: str,
    description: str,
    identity: User,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> Group:
    """
    Change a group's description. Only admins of the group may do this.

    Raises
    ------
    GroupNotFound
        If the group does not exist.
    Forbidden
        If `identity` is not an admin of the group.
    """
    log = log.bind(group_name=group_name, user_id=identity.user_id)

    group = await authorize_group(
        identity=identity, group_name=group_name, conn=conn, log=log
    )

    group.description = description
    conn.add(group)
    await conn.flush()

    await log.ainfo("group.description_updated")

    return group


async def join(
    group_name: str,
    user: User,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> Group:
    """
    Add a user to a group's members. Joining a group twice is a no-op.

    Raises
    ------
    GroupNotFound
        If the group does not exist.
    """
    log = log.bind(group_name=group_name, user_id=user.user_id)
    group = await read_by_name(group_name=group_name, conn=conn, log=log)

    if user not in group.members:
        group.members.append(user)
        await conn.flush()
        await log.ainfo("group.user_joined")
    else:
        await log.ainfo("group.user_already_member")

    return group
