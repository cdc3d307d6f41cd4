"""
ORM for user information.
"""

from datetime import datetime

from sqlalchemy import Column, DateTime
from sqlmodel import Field, SQLModel

from agora.core.user import UserData
from agora.core.uuid import UUID, uuid7


class User(SQLModel, table=True):
    user_id: UUID = Field(primary_key=True, default_factory=uuid7)

    user_name: str = Field(unique=True)
    email: str = Field(unique=True)

    # bcrypt hash, including its salt. Only changed through the password
    # change operation.
    password_hash: str

    created_at: datetime | None = Field(
        sa_column=Column(DateTime(timezone=True)), default=None
    )

    def to_core(self) -> UserData:
        return UserData(
            user_id=self.user_id,
            user_name=self.user_name,
            email=self.email,
            created_at=self.created_at,
        )
