"""
Comments on posts.
"""

from fastapi import APIRouter

from agora.core.models import CommentContent, ErrorResponse
from agora.core.post import CommentData
from agora.core.uuid import UUID
from agora.service import comments as comments_service

from .dependencies import (
    AuthenticatedUserDependency,
    DatabaseDependency,
    LoggerDependency,
)

comment_app = APIRouter(tags=["Comments"])


@comment_app.get("/{post_id}", summary="Get all comments on a post")
async def list_comments(post_id: UUID, conn: DatabaseDependency) -> list[CommentData]:
    comments = await comments_service.get_for_post(post_id=post_id, conn=conn)
    return [c.to_core() for c in comments]


@comment_app.post(
    "/{post_id}",
    summary="Comment on a post",
    responses={
        200: {"description": "Comment created."},
        401: {"model": ErrorResponse, "description": "Invalid token."},
        404: {"model": ErrorResponse, "description": "Post not found."},
    },
)
async def create_comment(
    post_id: UUID,
    content: CommentContent,
    user: AuthenticatedUserDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> CommentData:
    comment = await comments_service.create(
        post_id=post_id, body=content.body, author=user, conn=conn, log=log
    )
    return comment.to_core()


@comment_app.put(
    "/{comment_id}",
    summary="Edit a comment",
    responses={
        200: {"description": "Comment updated."},
        401: {"model": ErrorResponse, "description": "Invalid token."},
        403: {"model": ErrorResponse, "description": "Caller is not the author."},
        404: {"model": ErrorResponse, "description": "Comment not found."},
    },
)
async def update_comment(
    comment_id: UUID,
    content: CommentContent,
    user: AuthenticatedUserDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> CommentData:
    comment = await comments_service.update(
        comment_id=comment_id, body=content.body, identity=user, conn=conn, log=log
    )
    return comment.to_core()


@comment_app.delete(
    "/{comment_id}",
    summary="Delete a comment",
    responses={
        200: {"description": "Comment deleted."},
        401: {"model": ErrorResponse, "description": "Invalid token."},
        403: {"model": ErrorResponse, "description": "Caller is not the author."},
        404: {"model": ErrorResponse, "description": "Comment not found."},
    },
)
async def delete_comment(
    comment_id: UUID,
    user: AuthenticatedUserDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> CommentData:
    comment = await comments_service.delete(
        comment_id=comment_id, identity=user, conn=conn, log=log
    )
    return comment.to_core()
