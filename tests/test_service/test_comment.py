"""
Tests the comment service layer.
"""

import pytest

from agora.core.errors import Forbidden, NotAcceptable
from agora.core.uuid import uuid7
from agora.service import comments as comments_service
from agora.service import posts as posts_service
from agora.service import user as user_service
from agora.service.ownership import authorize_comment, authorize_post


@pytest.mark.asyncio(loop_scope="session")
async def test_comments(session_manager, logger, author, reader, group):
    async with session_manager.session() as conn:
        async with conn.begin():
            post = await posts_service.create(
                group_name=group,
                title="Talk to me",
                body="",
                author=await user_service.read_by_id(user_id=author, conn=conn),
                conn=conn,
                log=logger,
            )

            POST_ID = post.post_id

    async with session_manager.session() as conn:
        async with conn.begin():
            for user_id, body in [(reader, "First"), (author, "Second")]:
                await comments_service.create(
                    post_id=POST_ID,
                    body=body,
                    author=await user_service.read_by_id(user_id=user_id, conn=conn),
                    conn=conn,
                    log=logger,
                )

    async with session_manager.session() as conn:
        async with conn.begin():
            comments = await comments_service.get_for_post(post_id=POST_ID, conn=conn)

            assert [c.body for c in comments] == ["First", "Second"]
            assert [c.to_core().author_name for c in comments] == ["reader", "author"]

            READER_COMMENT = comments[0].comment_id

            assert await comments_service.get_for_post(post_id=uuid7(), conn=conn) == []

    # Only the comment's author may touch it, not even the post's author
    with pytest.raises(Forbidden):
        async with session_manager.session() as conn:
            async with conn.begin():
                await comments_service.update(
                    comment_id=READER_COMMENT,
                    body="Rewritten",
                    identity=await user_service.read_by_id(user_id=author, conn=conn),
                    conn=conn,
                    log=logger,
                )

    with pytest.raises(Forbidden):
        async with session_manager.session() as conn:
            async with conn.begin():
                await comments_service.delete(
                    comment_id=READER_COMMENT,
                    identity=await user_service.read_by_id(user_id=author, conn=conn),
                    conn=conn,
                    log=logger,
                )

    with pytest.raises(NotAcceptable):
        async with session_manager.session() as conn:
            async with conn.begin():
                await comments_service.update(
                    comment_id=READER_COMMENT,
                    body="",
                    identity=await user_service.read_by_id(user_id=reader, conn=conn),
                    conn=conn,
                    log=logger,
                )

    async with session_manager.session() as conn:
        async with conn.begin():
            comment = await comments_service.update(
                comment_id=READER_COMMENT,
                body="First, edited",
                identity=await user_service.read_by_id(user_id=reader, conn=conn),
                conn=conn,
                log=logger,
            )
            assert comment.body == "First, edited"

    async with session_manager.session() as conn:
        async with conn.begin():
            await comments_service.delete(
                comment_id=READER_COMMENT,
                identity=await user_service.read_by_id(user_id=reader, conn=conn),
                conn=conn,
                log=logger,
            )

    async with session_manager.session() as conn:
        async with conn.begin():
            comments = await comments_service.get_for_post(post_id=POST_ID, conn=conn)
            assert [c.body for c in comments] == ["Second"]

            with pytest.raises(comments_service.CommentNotFound):
                await comments_service.read_by_id(comment_id=READER_COMMENT, conn=conn)


@pytest.mark.asyncio(loop_scope="session")
async def test_comment_invalid(session_manager, logger, reader):
    with pytest.raises(posts_service.PostNotFound):
        async with session_manager.session() as conn:
            async with conn.begin():
                await comments_service.create(
                    post_id=uuid7(),
                    body="Into the void",
                    author=await user_service.read_by_id(user_id=reader, conn=conn),
                    conn=conn,
                    log=logger,
                )

    with pytest.raises(comments_service.CommentNotFound):
        async with session_manager.session() as conn:
            async with conn.begin():
                await comments_service.delete(
                    comment_id=uuid7(),
                    identity=await user_service.read_by_id(user_id=reader, conn=conn),
                    conn=conn,
                    log=logger,
                )


@pytest.mark.asyncio(loop_scope="session")
async def test_ownership_lookups(session_manager, logger, author, reader, group):
    async with session_manager.session() as conn:
        async with conn.begin():
            user = await user_service.read_by_id(user_id=reader, conn=conn)
            post = await posts_service.create(
                group_name=group,
                title="Guarded",
                body="",
                author=await user_service.read_by_id(user_id=author, conn=conn),
                conn=conn,
                log=logger,
            )
            comment = await comments_service.create(
                post_id=post.post_id, body="Mine", author=user, conn=conn, log=logger
            )

            POST_ID = post.post_id
            COMMENT_ID = comment.comment_id

    async with session_manager.session() as conn:
        async with conn.begin():
            user = await user_service.read_by_id(user_id=reader, conn=conn)

            comment = await authorize_comment(
                identity=user, comment_id=COMMENT_ID, conn=conn, log=logger
            )
            assert comment.comment_id == COMMENT_ID

            with pytest.raises(Forbidden):
                await authorize_post(
                    identity=user, post_id=POST_ID, conn=conn, log=logger
                )

            # Missing resources are reported before ownership is considered
            with pytest.raises(comments_service.CommentNotFound) as e:
                await authorize_comment(
                    identity=user, comment_id=uuid7(), conn=conn, log=logger
                )
            assert e.value.resource_kind == "comment"

            with pytest.raises(posts_service.PostNotFound):
                await authorize_post(
                    identity=user, post_id=uuid7(), conn=conn, log=logger
                )
