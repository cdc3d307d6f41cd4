"""
The mock vote store, used for testing the vote engine without a database.
"""

from collections import defaultdict

from agora.core.uuid import UUID
from agora.core.vote import Direction
from agora.service.store import VoteStore


class MockVoteStore(VoteStore):
    """
    Voter sets held in memory. Posts must be registered with `add_post`
    before votes can be cast on them.
    """

    posts: set[UUID]
    voters: dict[tuple[UUID, Direction], set[UUID]]

    def __init__(self, post_ids: list[UUID] | None = None):
        self.posts = set(post_ids or [])
        self.voters = defaultdict(set)

    def add_post(self, post_id: UUID):
        self.posts.add(post_id)

    def members(self, post_id: UUID, direction: Direction) -> set[UUID]:
        return set(self.voters[(post_id, direction)])

    async def post_exists(self, post_id: UUID) -> bool:
        return post_id in self.posts

    async def add_to_voter_set(
        self, post_id: UUID, user_id: UUID, direction: Direction
    ) -> None:
        self.voters[(post_id, direction)].add(user_id)

    async def remove_from_voter_set(
        self, post_id: UUID, user_id: UUID, direction: Direction
    ) -> None:
        self.voters[(post_id, direction)].discard(user_id)

    async def is_voter(
        self, post_id: UUID, user_id: UUID, direction: Direction
    ) -> bool:
        return user_id in self.voters[(post_id, direction)]

    async def count_voters(self, post_id: UUID, direction: Direction) -> int:
        return len(self.voters[(post_id, direction)])
