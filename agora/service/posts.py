"""
Service layer for posts.
"""

from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from structlog.typing import FilteringBoundLogger

from agora.core.errors import NotAcceptable, NotFound
from agora.core.post import PostData
from agora.core.uuid import UUID
from agora.core.vote import Direction
from agora.database.comment import Comment
from agora.database.group import Group
from agora.database.post import Post
from agora.database.user import User

from . import groups as groups_service
from .ownership import authorize_post
from .store import DatabaseVoteStore


class PostNotFound(NotFound):
    resource_kind = "post"


async def create(
    group_name: str,
    title: str,
    body: str,
    author: User,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> Post:
    """
    Post to a group.

    Raises
    ------
    NotAcceptable
        If the title is empty.
    GroupNotFound
        If there is no group called `group_name`.
    """
    log = log.bind(group_name=group_name, user_id=author.user_id)

    if not title:
        await log.ainfo("post.create.empty_title")
        raise NotAcceptable("Title must be of length bigger than 0!")

    group = await groups_service.read_by_name(group_name=group_name, conn=conn, log=log)

    post = Post(
        title=title,
        body=body or "",
        created_at=datetime.now(timezone.utc),
        author_id=author.user_id,
        author=author,
        group_id=group.group_id,
        group=group,
    )

    conn.add(post)
    await conn.flush()

    await log.ainfo("post.created", post_id=post.post_id)

    return post


async def read_by_id(post_id: UUID, conn: AsyncSession) -> Post:
    post = await conn.get(Post, post_id)

    if post is None:
        raise PostNotFound(f"Post with ID {post_id} doesn't exist")

    return post


async def count_comments(post_id: UUID, conn: AsyncSession) -> int:
    query = select(func.count()).select_from(Comment).filter(Comment.post_id == post_id)
    return (await conn.execute(query)).scalar_one()


async def to_view(
    post: Post, conn: AsyncSession, viewer_name: str | None = None
) -> PostData:
    """
    Render a post with its vote and comment counts. If `viewer_name` names a
    user, that user's vote state on the post is included too.
    """
    store = DatabaseVoteStore(conn)
    upvoted = downvoted = None

    if viewer_name:
        viewer_id = (
            await conn.execute(select(User.user_id).filter(User.user_name == viewer_name))
        ).scalar_one_or_none()

        upvoted = downvoted = False

        if viewer_id is not None:
            upvoted = await store.is_voter(post.post_id, viewer_id, Direction.UP)
            downvoted = await store.is_voter(post.post_id, viewer_id, Direction.DOWN)

    return PostData(
        post_id=post.post_id,
        title=post.title,
        body=post.body,
        created_at=post.created_at,
        author_name=post.author.user_name,
        group_name=post.group.group_name,
        upvotes=await store.count_voters(post.post_id, Direction.UP),
        downvotes=await store.count_voters(post.post_id, Direction.DOWN),
        comments=await count_comments(post.post_id, conn),
        upvoted=upvoted,
        downvoted=downvoted,
    )


async def get_page(
    conn: AsyncSession,
    log: FilteringBoundLogger,
    page: int = 1,
    page_size: int = 10,
    author_name: str | None = None,
    group_name: str | None = None,
) -> list[Post]:
    """
    Get one page of posts, newest first, optionally restricted to a single
    author or a single group. Pages start at 1; anything lower is treated
    as the first page.
    """
    page = max(page, 1)

    query = select(Post)

    if author_name is not None:
        query = query.join(User, Post.author_id == User.user_id).filter(
            User.user_name == author_name
        )

    if group_name is not None:
        query = query.join(Group, Post.group_id == Group.group_id).filter(
            Group.group_name == group_name
        )

    query = (
        query.order_by(Post.created_at.desc(), Post.post_id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )

    posts = list((await conn.execute(query)).unique().scalars().all())

    await log.adebug(
        "post.listed",
        page=page,
        author_name=author_name,
        group_name=group_name,
        number_of_posts=len(posts),
    )

    return posts


async def update(
    post_id: UUID,
    title: str,
    body: str,
    identity: User,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> Post:
    """
    Change a post's title and body. Only the author may do this.

    Raises
    ------
    PostNotFound
        If the post does not exist.
    Forbidden
        If `identity` did not write the post.
    NotAcceptable
        If the new title is empty.
    """
    log = log.bind(post_id=post_id, user_id=identity.user_id)

    post = await authorize_post(identity=identity, post_id=post_id, conn=conn, log=log)

    if not title:
        raise NotAcceptable("Title must be of length bigger than 0!")

    post.title = title
    post.body = body or ""
    conn.add(post)
    await conn.flush()

    await log.ainfo("post.updated")

    return post


async def delete(
    post_id: UUID,
    identity: User,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> Post:
    """
    Delete a post, along with its comments and votes. Only the author may do
    this.

    Raises
    ------
    PostNotFound
        If the post does not exist.
    Forbidden
        If `identity` did not write the post.
    """
    log = log.bind(post_id=post_id, user_id=identity.user_id)

    post = await authorize_post(identity=identity, post_id=post_id, conn=conn, log=log)

    await conn.delete(post)
    await conn.flush()

    await log.ainfo("post.deleted")

    return post
