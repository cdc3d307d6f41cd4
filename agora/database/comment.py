"""
Comment ORM
"""

from datetime import datetime

from sqlalchemy import Column, DateTime
from sqlmodel import Field, Relationship, SQLModel

from agora.core.post import CommentData
from agora.core.uuid import UUID, uuid7

from .user import User


class Comment(SQLModel, table=True):
    comment_id: UUID = Field(primary_key=True, default_factory=uuid7)

    body: str
    created_at: datetime = Field(sa_column=Column(DateTime(timezone=True)))

    author_id: UUID = Field(foreign_key="user.user_id", ondelete="CASCADE")
    author: "User" = Relationship(sa_relationship_kwargs=dict(lazy="joined"))

    post_id: UUID = Field(foreign_key="post.post_id", ondelete="CASCADE")

    def owner_ids(self) -> set[UUID]:
        return {self.author_id}

    def to_core(self) -> CommentData:
        return CommentData(
            comment_id=self.comment_id,
            post_id=self.post_id,
            body=self.body,
            created_at=self.created_at,
            author_name=self.author.user_name,
        )
