"""
Ownership checks guarding every mutation of a post, comment or group.

The rule is the same for every resource: the caller may mutate it if and
only if they are one of its owners. Posts and comments are owned by their
author; groups are owned by their admins.
"""

from typing import Protocol, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession
from structlog.typing import FilteringBoundLogger

from agora.core.errors import Forbidden, NotFound
from agora.core.uuid import UUID
from agora.database.comment import Comment
from agora.database.group import Group
from agora.database.post import Post
from agora.database.user import User


class Owned(Protocol):
    def owner_ids(self) -> set[UUID]: ...


OwnedResource = TypeVar("OwnedResource", bound=Owned)


def authorize(
    identity: User, resource: OwnedResource | None, resource_kind: str
) -> OwnedResource:
    """
    Decide whether `identity` may mutate `resource`, which has already been
    fetched. Performs no mutation.

    Raises
    ------
    NotFound
        If the resource does not exist. Checked first, so nothing is revealed
        about targets that are not there.
    Forbidden
        If the identity is not among the resource's owners.
    """
    if resource is None:
        raise NotFound(resource_kind=resource_kind)

    if identity.user_id not in resource.owner_ids():
        raise Forbidden

    return resource


async def authorize_post(
    identity: User, post_id: UUID, conn: AsyncSession, log: FilteringBoundLogger
) -> Post:
    from . import posts as posts_service

    log = log.bind(user_id=identity.user_id, post_id=post_id)

    try:
        post = await posts_service.read_by_id(post_id=post_id, conn=conn)
    except posts_service.PostNotFound as e:
        await log.ainfo("ownership.post.not_found")
        raise e

    try:
        authorize(identity, post, "post")
    except Forbidden as e:
        await log.awarn("ownership.post.forbidden")
        raise e

    return post


async def authorize_comment(
    identity: User, comment_id: UUID, conn: AsyncSession, log: FilteringBoundLogger
) -> Comment:
    from . import comments as comments_service

    log = log.bind(user_id=identity.user_id, comment_id=comment_id)

    try:
        comment = await comments_service.read_by_id(comment_id=comment_id, conn=conn)
    except comments_service.CommentNotFound as e:
        await log.ainfo("ownership.comment.not_found")
        raise e

    try:
        authorize(identity, comment, "comment")
    except Forbidden as e:
        await log.awarn("ownership.comment.forbidden")
        raise e

    return comment


async def authorize_group(
    identity: User, group_name: str, conn: AsyncSession, log: FilteringBoundLogger
) -> Group:
    from . import groups as groups_service

    log = log.bind(user_id=identity.user_id, group_name=group_name)

    try:
        group = await groups_service.read_by_name(
            group_name=group_name, conn=conn, log=log
        )
    except groups_service.GroupNotFound as e:
        await log.ainfo("ownership.group.not_found")
        raise e

    try:
        authorize(identity, group, "group")
    except Forbidden as e:
        await log.awarn("ownership.group.forbidden")
        raise e

    return group
