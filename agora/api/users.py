"""
Public user profiles.
"""

from fastapi import APIRouter

from agora.core.models import ErrorResponse
from agora.core.user import UserData
from agora.service import user as user_service

from .dependencies import DatabaseDependency, LoggerDependency

user_app = APIRouter(tags=["Users"])


@user_app.get(
    "/{user_name}",
    summary="Get a user's public profile",
    responses={
        200: {"description": "The user's profile."},
        404: {"model": ErrorResponse, "description": "No such user."},
    },
)
async def get_user(
    user_name: str, conn: DatabaseDependency, log: LoggerDependency
) -> UserData:
    user = await user_service.read_by_name(user_name=user_name, conn=conn)
    await log.adebug("api.user.read", user_name=user_name)
    return user.to_core()
