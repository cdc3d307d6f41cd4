"""
Group ORM
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Column, DateTime
from sqlmodel import Field, Relationship, SQLModel

from agora.core.group import GroupData
from agora.core.uuid import UUID, uuid7

if TYPE_CHECKING:
    from .user import User


class GroupAdmin(SQLModel, table=True):
    """
    A record of a user's right to administer a group.
    """

    __tablename__ = "group_admin"

    user_id: Optional[UUID] = Field(
        primary_key=True, foreign_key="user.user_id", ondelete="CASCADE"
    )
    group_id: Optional[UUID] = Field(
        primary_key=True, foreign_key="group.group_id", ondelete="CASCADE"
    )


class GroupMembership(SQLModel, table=True):
    """
    A record of a user having joined a group.
    """

    __tablename__ = "group_membership"

    user_id: Optional[UUID] = Field(
        primary_key=True, foreign_key="user.user_id", ondelete="CASCADE"
    )
    group_id: Optional[UUID] = Field(
        primary_key=True, foreign_key="group.group_id", ondelete="CASCADE"
    )


class Group(SQLModel, table=True):
    group_id: UUID = Field(primary_key=True, default_factory=uuid7)

    group_name: str = Field(unique=True)
    description: str = Field(default="")
    created_at: datetime = Field(sa_column=Column(DateTime(timezone=True)))

    admins: list["User"] = Relationship(
        link_model=GroupAdmin,
        sa_relationship_kwargs=dict(lazy="selectin"),
    )
    members: list["User"] = Relationship(
        link_model=GroupMembership,
        sa_relationship_kwargs=dict(lazy="selectin"),
    )

    def owner_ids(self) -> set[UUID]:
        """
        Groups are shared property: any of their admins may change them.
        """
        return {admin.user_id for admin in self.admins}

    def has_member(self, user_name: str) -> bool:
        return any(member.user_name == user_name for member in self.members)

    def to_core(self, viewer_name: str | None = None) -> GroupData:
        """
        Convert this Group ORM object to a GroupData core object. If
        `viewer_name` is given, also report whether that user has joined.
        """
        return GroupData(
            group_id=self.group_id,
            group_name=self.group_name,
            description=self.description,
            created_at=self.created_at,
            admin_names=[admin.user_name for admin in self.admins],
            member_count=len(self.members),
            joined=self.has_member(viewer_name) if viewer_name else None,
        )
