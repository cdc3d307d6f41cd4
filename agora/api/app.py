"""
FastAPI app
"""

from importlib.metadata import version

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .auth import auth_app
from .comments import comment_app
from .dependencies import DATABASE_MANAGER, SETTINGS, logger
from .errors import add_exception_handlers
from .groups import group_app
from .posts import post_app
from .users import user_app

settings = SETTINGS()


async def lifespan(app: FastAPI):
    app.settings = settings

    if settings.create_tables:
        await DATABASE_MANAGER.create_all()
        await logger().ainfo("api.tables_created")

    yield


app = FastAPI(
    lifespan=lifespan,
    title="Agora API",
    summary=(
        "API for the Agora discussion forum: users, groups, posts, comments and votes."
    ),
    version=version("agora"),
)

app = add_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/", summary="Check that the server is up")
async def root() -> dict[str, str]:
    return {"message": "Server Is UP!"}


app.include_router(auth_app)
app.include_router(user_app, prefix="/users")
app.include_router(group_app, prefix="/groups")
app.include_router(post_app, prefix="/posts")
app.include_router(comment_app, prefix="/comments")
