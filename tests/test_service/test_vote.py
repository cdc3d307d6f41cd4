"""
Tests voting against the database store.
"""

import asyncio
import os

import pytest
from sqlalchemy import select

from agora.core.uuid import uuid7
from agora.core.vote import Direction
from agora.database.post import PostDownvote, PostUpvote
from agora.service import posts as posts_service
from agora.service import user as user_service
from agora.service import votes as votes_service
from agora.service.store import DatabaseVoteStore


async def vote(session_manager, logger, user_id, post_id, direction):
    async with session_manager.session() as conn:
        async with conn.begin():
            return await votes_service.cast_vote(
                identity=await user_service.read_by_id(user_id=user_id, conn=conn),
                post_id=post_id,
                direction=direction,
                store=DatabaseVoteStore(conn),
                log=logger,
            )


async def voters(session_manager, post_id):
    async with session_manager.session() as conn:
        async with conn.begin():
            up = await conn.execute(
                select(PostUpvote.user_id).filter(PostUpvote.post_id == post_id)
            )
            down = await conn.execute(
                select(PostDownvote.user_id).filter(PostDownvote.post_id == post_id)
            )

            return set(up.scalars().all()), set(down.scalars().all())


@pytest.mark.asyncio(loop_scope="session")
async def test_vote(session_manager, logger, author, reader, group):
    async with session_manager.session() as conn:
        async with conn.begin():
            post = await posts_service.create(
                group_name=group,
                title="Vote on me",
                body="",
                author=await user_service.read_by_id(user_id=author, conn=conn),
                conn=conn,
                log=logger,
            )

            POST_ID = post.post_id

    result = await vote(session_manager, logger, reader, POST_ID, Direction.UP)

    assert result.post_id == POST_ID
    assert result.upvoted
    assert not result.downvoted
    assert (result.upvotes, result.downvotes) == (1, 0)
    assert await voters(session_manager, POST_ID) == ({reader}, set())

    # Switching moves the vote rather than adding a second one
    result = await vote(session_manager, logger, reader, POST_ID, "down")

    assert not result.upvoted
    assert result.downvoted
    assert (result.upvotes, result.downvotes) == (0, 1)
    assert await voters(session_manager, POST_ID) == (set(), {reader})

    # Repeating a vote changes nothing
    result = await vote(session_manager, logger, reader, POST_ID, Direction.DOWN)

    assert result.downvoted
    assert (result.upvotes, result.downvotes) == (0, 1)
    assert await voters(session_manager, POST_ID) == (set(), {reader})

    # Votes from different users are independent
    result = await vote(session_manager, logger, author, POST_ID, Direction.UP)

    assert result.upvoted
    assert (result.upvotes, result.downvotes) == (1, 1)
    assert await voters(session_manager, POST_ID) == ({author}, {reader})

    async with session_manager.session() as conn:
        async with conn.begin():
            current = await votes_service.read_vote(
                store=DatabaseVoteStore(conn), post_id=POST_ID, user_id=reader
            )

            assert not current.upvoted
            assert current.downvoted


@pytest.mark.asyncio(loop_scope="session")
async def test_vote_missing_post(session_manager, logger, reader):
    POST_ID = uuid7()

    with pytest.raises(posts_service.PostNotFound):
        await vote(session_manager, logger, reader, POST_ID, Direction.UP)

    assert await voters(session_manager, POST_ID) == (set(), set())


@pytest.mark.asyncio(loop_scope="session")
async def test_store_idempotent(session_manager, logger, author, reader, group):
    async with session_manager.session() as conn:
        async with conn.begin():
            post = await posts_service.create(
                group_name=group,
                title="Stored votes",
                body="",
                author=await user_service.read_by_id(user_id=author, conn=conn),
                conn=conn,
                log=logger,
            )

            POST_ID = post.post_id

    async with session_manager.session() as conn:
        async with conn.begin():
            store = DatabaseVoteStore(conn)

            assert await store.post_exists(POST_ID)
            assert not await store.post_exists(uuid7())

            await store.add_to_voter_set(POST_ID, reader, Direction.UP)
            await store.add_to_voter_set(POST_ID, reader, Direction.UP)
            assert await store.count_voters(POST_ID, Direction.UP) == 1
            assert await store.is_voter(POST_ID, reader, Direction.UP)

            await store.remove_from_voter_set(POST_ID, reader, Direction.DOWN)
            await store.remove_from_voter_set(POST_ID, reader, Direction.UP)
            await store.remove_from_voter_set(POST_ID, reader, Direction.UP)
            assert await store.count_voters(POST_ID, Direction.UP) == 0
            assert not await store.is_voter(POST_ID, reader, Direction.UP)


@pytest.mark.skipif(
    not os.environ.get("AGORA_TEST_POSTGRES"),
    reason="sqlite serialises writers, so votes cannot interleave",
)
@pytest.mark.asyncio(loop_scope="session")
async def test_concurrent_opposite_votes(
    session_manager, logger, author, reader, group
):
    async with session_manager.session() as conn:
        async with conn.begin():
            post = await posts_service.create(
                group_name=group,
                title="Contested",
                body="",
                author=await user_service.read_by_id(user_id=author, conn=conn),
                conn=conn,
                log=logger,
            )

            POST_ID = post.post_id

    for _ in range(20):
        await asyncio.gather(
            vote(session_manager, logger, reader, POST_ID, Direction.UP),
            vote(session_manager, logger, reader, POST_ID, Direction.DOWN),
        )

        up, down = await voters(session_manager, POST_ID)

        assert up.isdisjoint(down)
        assert up | down == {reader}
