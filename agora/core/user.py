"""
A shared user object that is serialized. The password hash never leaves the
database layer.
"""

from datetime import datetime

from pydantic import BaseModel

from agora.core.uuid import UUID


class UserData(BaseModel):
    user_id: UUID
    user_name: str
    email: str
    created_at: datetime | None = None
