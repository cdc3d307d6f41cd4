"""
Vote directions and the membership view returned after casting a vote.
"""

import enum

from pydantic import BaseModel

from agora.core.uuid import UUID


class Direction(str, enum.Enum):
    UP = "up"
    DOWN = "down"

    @property
    def opposite(self) -> "Direction":
        match self:
            case Direction.UP:
                return Direction.DOWN
            case Direction.DOWN:
                return Direction.UP


class VoteData(BaseModel):
    post_id: UUID
    upvoted: bool
    downvoted: bool
    upvotes: int
    downvotes: int
