"""
ORM for posts and their two voter-membership sets.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Column, DateTime
from sqlmodel import Field, Relationship, SQLModel

from agora.core.uuid import UUID, uuid7

from .group import Group
from .user import User


class PostUpvote(SQLModel, table=True):
    """
    Membership of a user in a post's upvoter set. The composite key makes
    every user appear at most once.
    """

    __tablename__ = "post_upvote"

    post_id: Optional[UUID] = Field(
        primary_key=True, foreign_key="post.post_id", ondelete="CASCADE"
    )
    user_id: Optional[UUID] = Field(
        primary_key=True, foreign_key="user.user_id", ondelete="CASCADE"
    )


class PostDownvote(SQLModel, table=True):
    """
    Membership of a user in a post's downvoter set.
    """

    __tablename__ = "post_downvote"

    post_id: Optional[UUID] = Field(
        primary_key=True, foreign_key="post.post_id", ondelete="CASCADE"
    )
    user_id: Optional[UUID] = Field(
        primary_key=True, foreign_key="user.user_id", ondelete="CASCADE"
    )


class Post(SQLModel, table=True):
    post_id: UUID = Field(primary_key=True, default_factory=uuid7)

    title: str
    body: str = Field(default="")
    created_at: datetime = Field(sa_column=Column(DateTime(timezone=True)))

    author_id: UUID = Field(foreign_key="user.user_id", ondelete="CASCADE")
    author: "User" = Relationship(sa_relationship_kwargs=dict(lazy="joined"))

    group_id: UUID = Field(foreign_key="group.group_id", ondelete="CASCADE")
    group: "Group" = Relationship(sa_relationship_kwargs=dict(lazy="joined"))

    def owner_ids(self) -> set[UUID]:
        return {self.author_id}
