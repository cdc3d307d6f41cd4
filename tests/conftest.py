"""
Core configuration
"""

import os

import pytest_asyncio

from agora.config.settings import Settings

TOKEN_SECRET = "agora-test-secret-long-enough-for-hmac-sha256"


@pytest_asyncio.fixture(scope="session")
def database_container(tmp_path_factory):
    if not os.environ.get("AGORA_TEST_POSTGRES"):
        yield {
            "database_type": "sqlite",
            "database_db": str(tmp_path_factory.mktemp("database") / "agora.db"),
        }
        return

    from testcontainers.postgres import PostgresContainer

    with PostgresContainer() as container:
        yield {
            "database_type": "postgres",
            "database_user": container.username,
            "database_password": container.password,
            "database_port": container.get_exposed_port(container.port),
            "database_host": "localhost",
            "database_db": container.dbname,
            "database_echo": True,
        }


@pytest_asyncio.fixture(scope="session")
def server_settings(database_container):
    yield Settings(**database_container, token_secret=TOKEN_SECRET)


@pytest_asyncio.fixture(scope="session")
def database(server_settings: Settings):
    server_settings.sync_manager().create_all()
