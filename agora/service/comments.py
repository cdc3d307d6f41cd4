"""
Service layer for comments on posts.
"""

from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from structlog.typing import FilteringBoundLogger

from agora.core.errors import NotAcceptable, NotFound
from agora.core.uuid import UUID
from agora.database.comment import Comment
from agora.database.user import User

from . import posts as posts_service
from .ownership import authorize_comment


class CommentNotFound(NotFound):
    resource_kind = "comment"


async def create(
    post_id: UUID,
    body: str,
    author: User,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> Comment:
    """
    Add a comment to a post.

    Raises
    ------
    PostNotFound
        If the post does not exist.
    NotAcceptable
        If the comment is empty.
    """
    log = log.bind(post_id=post_id, user_id=author.user_id)

    if not body:
        raise NotAcceptable("Comment must not be empty")

    post = await posts_service.read_by_id(post_id=post_id, conn=conn)

    comment = Comment(
        body=body,
        created_at=datetime.now(timezone.utc),
        author_id=author.user_id,
        author=author,
        post_id=post.post_id,
    )

    conn.add(comment)
    await conn.flush()

    await log.ainfo("comment.created", comment_id=comment.comment_id)

    return comment


async def read_by_id(comment_id: UUID, conn: AsyncSession) -> Comment:
    comment = await conn.get(Comment, comment_id)

    if comment is None:
        raise CommentNotFound(f"Comment with ID {comment_id} doesn't exist")

    return comment


async def get_for_post(post_id: UUID, conn: AsyncSession) -> list[Comment]:
    """
    All comments on a post, oldest first. A post without comments (or one
    that does not exist) gives an empty list.
    """
    query = (
        select(Comment)
        .filter(Comment.post_id == post_id)
        .order_by(Comment.created_at.asc(), Comment.comment_id.asc())
    )
    return list((await conn.execute(query)).unique().scalars().all())


async def update(
    comment_id: UUID,
    body: str,
    identity: User,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> Comment:
    log = log.bind(comment_id=comment_id, user_id=identity.user_id)

    comment = await authorize_comment(
        identity=identity, comment_id=comment_id, conn=conn, log=log
    )

    if not body:
        raise NotAcceptable("Comment must not be empty")

    comment.body = body
    conn.add(comment)
    await conn.flush()

    await log.ainfo("comment.updated")

    return comment


async def delete(
    comment_id: UUID,
    identity: User,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> Comment:
    log = log.bind(comment_id=comment_id, user_id=identity.user_id)

    comment = await authorize_comment(
        identity=identity, comment_id=comment_id, conn=conn, log=log
    )

    await conn.delete(comment)
    await conn.flush()

    await log.ainfo("comment.deleted")

    return comment
