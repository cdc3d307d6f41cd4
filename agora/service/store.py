"""
Storage for the two voter-membership sets of every post.

The vote engine only ever talks to a `VoteStore`. Adding a member that is
already present, or removing one that is absent, must be a no-op rather than
an error for every implementation.
"""

import abc

from sqlalchemy import delete, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from agora.core.uuid import UUID
from agora.core.vote import Direction
from agora.database.post import Post, PostDownvote, PostUpvote

VOTER_TABLES = {
    Direction.UP: PostUpvote,
    Direction.DOWN: PostDownvote,
}


class VoteStore(abc.ABC):
    """
    The base class for voter-membership storage. Downstream must implement:

    - post_exists: whether votes can be cast on the post at all.
    - add_to_voter_set: put a user into one of the post's voter sets.
    - remove_from_voter_set: take a user out of one of the post's voter sets.
    - is_voter: whether a user is in one of the post's voter sets.
    - count_voters: the size of one of the post's voter sets.
    """

    @abc.abstractmethod
    async def post_exists(self, post_id: UUID) -> bool:
        raise NotImplementedError

    @abc.abstractmethod
    async def add_to_voter_set(
        self, post_id: UUID, user_id: UUID, direction: Direction
    ) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def remove_from_voter_set(
        self, post_id: UUID, user_id: UUID, direction: Direction
    ) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def is_voter(
        self, post_id: UUID, user_id: UUID, direction: Direction
    ) -> bool:
        raise NotImplementedError

    @abc.abstractmethod
    async def count_voters(self, post_id: UUID, direction: Direction) -> int:
        raise NotImplementedError


class DatabaseVoteStore(VoteStore):
    """
    Voter sets kept as rows in the `post_upvote` and `post_downvote` link
    tables, keyed on (post_id, user_id). All operations run inside the
    transaction of the session handed in, so a vote's add and evict steps
    commit together, and `post_exists` holds the post's row lock for the
    rest of that transaction.
    """

    conn: AsyncSession

    def __init__(self, conn: AsyncSession):
        self.conn = conn

    def _insert(self, table):
        match self.conn.get_bind().dialect.name:
            case "postgresql":
                return postgresql.insert(table)
            case "sqlite":
                return sqlite.insert(table)
            case name:
                raise ValueError(f"Unsupported database dialect {name}")

    async def post_exists(self, post_id: UUID) -> bool:
        """
        Also locks the post row until the transaction ends, so concurrent
        votes on the same post run their add and evict steps one after the
        other. SQLite has no row locks but serialises writers.
        """
        query = (
            select(Post.post_id).filter(Post.post_id == post_id).with_for_update()
        )
        return (await self.conn.execute(query)).scalar_one_or_none() is not None

    async def add_to_voter_set(
        self, post_id: UUID, user_id: UUID, direction: Direction
    ) -> None:
        table = VOTER_TABLES[direction]
        statement = (
            self._insert(table.__table__)
            .values(post_id=post_id, user_id=user_id)
            .on_conflict_do_nothing()
        )
        await self.conn.execute(statement)

    async def remove_from_voter_set(
        self, post_id: UUID, user_id: UUID, direction: Direction
    ) -> None:
        table = VOTER_TABLES[direction]
        await self.conn.execute(
            delete(table).where(table.post_id == post_id, table.user_id == user_id)
        )

    async def is_voter(
        self, post_id: UUID, user_id: UUID, direction: Direction
    ) -> bool:
        table = VOTER_TABLES[direction]
        query = select(table.user_id).filter(
            table.post_id == post_id, table.user_id == user_id
        )
        return (await self.conn.execute(query)).scalar_one_or_none() is not None

    async def count_voters(self, post_id: UUID, direction: Direction) -> int:
        table = VOTER_TABLES[direction]
        query = select(func.count()).select_from(table).filter(table.post_id == post_id)
        return (await self.conn.execute(query)).scalar_one()
