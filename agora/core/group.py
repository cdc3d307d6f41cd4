"""
Core group data models.
"""

from datetime import datetime

from pydantic import BaseModel

from agora.core.uuid import UUID


class GroupData(BaseModel):
    group_id: UUID
    group_name: str
    description: str
    created_at: datetime
    admin_names: list[str]
    member_count: int
    # Only filled in when the group is viewed on behalf of a named user.
    joined: bool | None = None
