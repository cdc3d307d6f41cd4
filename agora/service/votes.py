"""
Casting votes on posts.

Every (post, user) pair is in one of three states: no vote, upvoted or
downvoted. Casting a vote moves the pair to the requested state no matter
where it started:

    None --up--> Up        None --down--> Down
    Up   --up--> Up        Up   --down--> Down
    Down --up--> Up        Down --down--> Down

There is no way to retract a vote; repeating the current direction changes
nothing.

The move is made in two store operations: add the user to the requested
voter set, then remove them from the opposite one. The removal always runs,
so whatever state a previous (possibly concurrent) call left behind, the
user ends up in exactly the set they last asked for. With the database store
both operations share the request's transaction, and the existence check locks
the post row, so concurrent votes on one post are applied one at a time.
"""

from structlog.typing import FilteringBoundLogger

from agora.core.uuid import UUID
from agora.core.vote import Direction, VoteData
from agora.database.user import User

from .posts import PostNotFound
from .store import VoteStore


async def read_vote(store: VoteStore, post_id: UUID, user_id: UUID) -> VoteData:
    """
    The membership view of one user on one post, with the current totals.
    """
    return VoteData(
        post_id=post_id,
        upvoted=await store.is_voter(post_id, user_id, Direction.UP),
        downvoted=await store.is_voter(post_id, user_id, Direction.DOWN),
        upvotes=await store.count_voters(post_id, Direction.UP),
        downvotes=await store.count_voters(post_id, Direction.DOWN),
    )


async def cast_vote(
    identity: User,
    post_id: UUID,
    direction: Direction,
    store: VoteStore,
    log: FilteringBoundLogger,
) -> VoteData:
    """
    Cast `identity`'s vote on a post.

    Parameters
    ----------
    identity: User
        The verified user casting the vote.
    post_id: UUID
        The post being voted on.
    direction: Direction
        Up or down.
    store: VoteStore
        Where the voter sets live.
    log: FilteringBoundLogger
        Logger instance.

    Raises
    ------
    PostNotFound
        If the post does not exist. Nothing has been changed in that case.
    """
    direction = Direction(direction)

    log = log.bind(post_id=post_id, user_id=identity.user_id, direction=direction.value)

    if not await store.post_exists(post_id):
        await log.ainfo("vote.post_not_found")
        raise PostNotFound(f"Post with ID {post_id} doesn't exist")

    await store.add_to_voter_set(post_id, identity.user_id, direction)
    await store.remove_from_voter_set(post_id, identity.user_id, direction.opposite)

    vote = await read_vote(store=store, post_id=post_id, user_id=identity.user_id)

    await log.ainfo("vote.cast", upvotes=vote.upvotes, downvotes=vote.downvotes)

    return vote
