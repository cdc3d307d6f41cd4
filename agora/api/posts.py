"""
Posts: listing, reading, writing and voting.
"""

from fastapi import APIRouter

from agora.core.models import ErrorResponse, PostContent
from agora.core.post import PostData
from agora.core.uuid import UUID
from agora.core.vote import Direction, VoteData
from agora.service import posts as posts_service
from agora.service import votes as votes_service

from .dependencies import (
    AuthenticatedUserDependency,
    DatabaseDependency,
    LoggerDependency,
    SettingsDependency,
    VoteStoreDependency,
)

post_app = APIRouter(tags=["Posts"])


@post_app.get(
    "",
    summary="Get the newest posts",
    description=(
        "One page of posts, newest first. Pass `username` to include that "
        "user's votes on each post."
    ),
)
async def list_posts(
    settings: SettingsDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
    page: int = 1,
    username: str | None = None,
) -> list[PostData]:
    posts = await posts_service.get_page(
        conn=conn, log=log, page=page, page_size=settings.page_size
    )
    return [
        await posts_service.to_view(p, conn=conn, viewer_name=username) for p in posts
    ]


@post_app.get("/user/{user_name}", summary="Get a user's posts")
async def list_user_posts(
    user_name: str,
    settings: SettingsDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
    page: int = 1,
    username: str | None = None,
) -> list[PostData]:
    posts = await posts_service.get_page(
        conn=conn,
        log=log,
        page=page,
        page_size=settings.page_size,
        author_name=user_name,
    )
    return [
        await posts_service.to_view(p, conn=conn, viewer_name=username) for p in posts
    ]


@post_app.get("/group/{group_name}", summary="Get the posts in a group")
async def list_group_posts(
    group_name: str,
    settings: SettingsDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
    page: int = 1,
    username: str | None = None,
) -> list[PostData]:
    posts = await posts_service.get_page(
        conn=conn,
        log=log,
        page=page,
        page_size=settings.page_size,
        group_name=group_name,
    )
    return [
        await posts_service.to_view(p, conn=conn, viewer_name=username) for p in posts
    ]


@post_app.get(
    "/{post_id}",
    summary="Get a post",
    responses={
        200: {"description": "The post with its counts."},
        404: {"model": ErrorResponse, "description": "Post not found."},
    },
)
async def get_post(
    post_id: UUID,
    conn: DatabaseDependency,
    username: str | None = None,
) -> PostData:
    post = await posts_service.read_by_id(post_id=post_id, conn=conn)
    return await posts_service.to_view(post, conn=conn, viewer_name=username)


@post_app.post(
    "/{group_name}",
    summary="Post to a group",
    responses={
        200: {"description": "Post created."},
        401: {"model": ErrorResponse, "description": "Invalid token."},
        404: {"model": ErrorResponse, "description": "Group not found."},
        406: {"model": ErrorResponse, "description": "Empty title."},
    },
)
async def create_post(
    group_name: str,
    content: PostContent,
    user: AuthenticatedUserDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> PostData:
    post = await posts_service.create(
        group_name=group_name,
        title=content.title,
        body=content.body,
        author=user,
        conn=conn,
        log=log,
    )
    return await posts_service.to_view(post, conn=conn, viewer_name=user.user_name)


@post_app.put(
    "/{post_id}",
    summary="Edit a post",
    responses={
        200: {"description": "Post updated."},
        401: {"model": ErrorResponse, "description": "Invalid token."},
        403: {"model": ErrorResponse, "description": "Caller is not the author."},
        404: {"model": ErrorResponse, "description": "Post not found."},
    },
)
async def update_post(
    post_id: UUID,
    content: PostContent,
    user: AuthenticatedUserDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> PostData:
    post = await posts_service.update(
        post_id=post_id,
        title=content.title,
        body=content.body,
        identity=user,
        conn=conn,
        log=log,
    )
    return await posts_service.to_view(post, conn=conn, viewer_name=user.user_name)


@post_app.delete(
    "/{post_id}",
    summary="Delete a post",
    description="Deletes the post together with its comments and votes.",
    responses={
        200: {"description": "Post deleted."},
        401: {"model": ErrorResponse, "description": "Invalid token."},
        403: {"model": ErrorResponse, "description": "Caller is not the author."},
        404: {"model": ErrorResponse, "description": "Post not found."},
    },
)
async def delete_post(
    post_id: UUID,
    user: AuthenticatedUserDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> PostData:
    post = await posts_service.read_by_id(post_id=post_id, conn=conn)
    view = await posts_service.to_view(post, conn=conn)

    await posts_service.delete(post_id=post_id, identity=user, conn=conn, log=log)

    return view


@post_app.post(
    "/{post_id}/vote/{direction}",
    summary="Vote on a post",
    description=(
        "Cast an `up` or `down` vote. Voting the other way switches your "
        "vote; voting the same way again changes nothing."
    ),
    responses={
        200: {"description": "The caller's vote state on the post."},
        401: {"model": ErrorResponse, "description": "Invalid token."},
        404: {"model": ErrorResponse, "description": "Post not found."},
    },
)
async def vote(
    post_id: UUID,
    direction: Direction,
    user: AuthenticatedUserDependency,
    store: VoteStoreDependency,
    log: LoggerDependency,
) -> VoteData:
    return await votes_service.cast_vote(
        identity=user, post_id=post_id, direction=direction, store=store, log=log
    )
