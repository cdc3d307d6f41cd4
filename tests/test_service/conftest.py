"""
Configuration variables and fixtures for the service layer tests.
"""

import pytest_asyncio
import structlog

from agora.config.settings import Settings
from agora.service import groups as groups_service
from agora.service import user as user_service
from agora.service.identity import IdentityVerifier

PASSWORD = "correct horse battery"


@pytest_asyncio.fixture(scope="session")
def session_manager(server_settings: Settings, database):
    yield server_settings.async_manager()


@pytest_asyncio.fixture(scope="session")
def logger():
    yield structlog.get_logger()


@pytest_asyncio.fixture(scope="session")
def verifier(server_settings: Settings):
    yield IdentityVerifier(
        secret=server_settings.token_secret,
        algorithm=server_settings.token_algorithm,
    )


async def create_user(session_manager, logger, user_name: str):
    async with session_manager.session() as conn:
        async with conn.begin():
            user = await user_service.create(
                user_name=user_name,
                email=f"{user_name}@agora.test",
                password=PASSWORD,
                conn=conn,
                log=logger,
            )

            return user.user_id


@pytest_asyncio.fixture(scope="session")
async def author(session_manager, logger):
    yield await create_user(session_manager, logger, "author")


@pytest_asyncio.fixture(scope="session")
async def reader(session_manager, logger):
    yield await create_user(session_manager, logger, "reader")


@pytest_asyncio.fixture(scope="session")
async def group(session_manager, logger, author):
    async with session_manager.session() as conn:
        async with conn.begin():
            group = await groups_service.create(
                group_name="general",
                description="Anything goes",
                created_by=await user_service.read_by_id(user_id=author, conn=conn),
                conn=conn,
                log=logger,
            )

            GROUP_NAME = group.group_name

    yield GROUP_NAME
