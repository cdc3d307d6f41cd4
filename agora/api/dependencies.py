"""
Dependencies used by the API.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger
from structlog.typing import FilteringBoundLogger

from agora.config.settings import Settings
from agora.database.user import User
from agora.service.identity import IdentityVerifier
from agora.service.store import DatabaseVoteStore, VoteStore


@lru_cache
def SETTINGS():
    return Settings()


DATABASE_MANAGER = SETTINGS().async_manager()


async def get_async_session():
    async with DATABASE_MANAGER.session() as session:
        async with session.begin():
            yield session


def logger():
    return get_logger()


@lru_cache
def get_verifier() -> IdentityVerifier:
    settings = SETTINGS()
    return IdentityVerifier(
        secret=settings.token_secret,
        algorithm=settings.token_algorithm,
        expiry=settings.token_expiry,
    )


SettingsDependency = Annotated[Settings, Depends(SETTINGS)]
DatabaseDependency = Annotated[AsyncSession, Depends(get_async_session)]
LoggerDependency = Annotated[FilteringBoundLogger, Depends(logger)]
VerifierDependency = Annotated[IdentityVerifier, Depends(get_verifier)]


def token_from_request(request: Request) -> str | None:
    """
    Find the caller's token, either as a 'Bearer' token in the headers or
    as the `token` cookie set at login.
    """
    if "Authorization" in request.headers:
        contents = request.headers["Authorization"].split(" ")
        if len(contents) != 2 or contents[0] != "Bearer":
            return None
        return contents[1]

    return request.cookies.get("token")


async def handle_authenticated_user(
    request: Request,
    verifier: VerifierDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> User:
    """
    Resolve the caller to a user record. Raises `InvalidToken` or
    `UnknownUser`, which the exception handlers turn into 401s.
    """
    log = log.bind(client=request.client)
    return await verifier.verify(token=token_from_request(request), conn=conn, log=log)


def get_vote_store(conn: DatabaseDependency) -> VoteStore:
    return DatabaseVoteStore(conn)


AuthenticatedUserDependency = Annotated[User, Depends(handle_authenticated_user)]
VoteStoreDependency = Annotated[VoteStore, Depends(get_vote_store)]
