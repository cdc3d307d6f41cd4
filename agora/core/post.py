"""
Core post and comment data models.
"""

from datetime import datetime

from pydantic import BaseModel

from agora.core.uuid import UUID


class PostData(BaseModel):
    post_id: UUID
    title: str
    body: str
    created_at: datetime
    author_name: str
    group_name: str
    upvotes: int
    downvotes: int
    comments: int
    # Vote state of the viewing user, if one was named.
    upvoted: bool | None = None
    downvoted: bool | None = None


class CommentData(BaseModel):
    comment_id: UUID
    post_id: UUID
    body: str
    created_at: datetime
    author_name: str
