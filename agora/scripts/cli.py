"""
A simple CLI for running the forum server.
"""

import os
import sys
import time
from multiprocessing import Process

import uvicorn

USAGE = "Supported commands are agora run dev, agora run prod, and agora setup"


def run_server(**kwargs):
    for k, v in kwargs.items():
        os.environ[k] = v

    from agora.config.settings import Settings

    settings = Settings()

    uvicorn.run("agora.api.app:app", host=settings.hostname, port=settings.port)


def setup():
    from agora.config.settings import Settings

    settings = Settings()
    settings.sync_manager().create_all()


def main():
    try:
        command = sys.argv[1]
    except IndexError:
        print(USAGE)
        exit(1)

    if command == "setup":
        setup()
        print("Setup complete, tables created")
        exit(0)

    if command != "run" or len(sys.argv) < 3 or sys.argv[2] not in ("dev", "prod"):
        print(USAGE)
        exit(1)

    if sys.argv[2] == "dev":
        from testcontainers.postgres import PostgresContainer

        with PostgresContainer() as container:
            print(
                f"Container details: username={container.username}, password={container.password}, port={container.get_exposed_port(container.port)}"
            )

            environment = {
                "AGORA_DATABASE_TYPE": "postgres",
                "AGORA_DATABASE_USER": container.username,
                "AGORA_DATABASE_PASSWORD": container.password,
                "AGORA_DATABASE_PORT": str(container.get_exposed_port(container.port)),
                "AGORA_DATABASE_HOST": "localhost",
                "AGORA_DATABASE_DB": container.dbname,
                "AGORA_DATABASE_ECHO": "False",
                "AGORA_CREATE_TABLES": "True",
            }

            background_process = Process(target=run_server, kwargs=environment)
            background_process.start()

            while background_process.is_alive():
                time.sleep(1)

    if sys.argv[2] == "prod":
        setup()
        run_server()
