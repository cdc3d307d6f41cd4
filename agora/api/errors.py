"""
Exception handlers turning the forum's failure taxonomy into JSON responses.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from structlog import get_logger

from agora.core.errors import (
    Conflict,
    ForumError,
    Forbidden,
    InvalidToken,
    NotAcceptable,
    NotFound,
    UnknownUser,
)

STATUS_CODES = {
    InvalidToken: status.HTTP_401_UNAUTHORIZED,
    UnknownUser: status.HTTP_401_UNAUTHORIZED,
    NotFound: status.HTTP_404_NOT_FOUND,
    Forbidden: status.HTTP_403_FORBIDDEN,
    Conflict: status.HTTP_409_CONFLICT,
    NotAcceptable: status.HTTP_406_NOT_ACCEPTABLE,
}


def status_code_for(exc: ForumError) -> int:
    for error_class in type(exc).__mro__:
        if error_class in STATUS_CODES:
            return STATUS_CODES[error_class]

    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def forum_error_handler(request: Request, exc: ForumError) -> JSONResponse:
    """
    Responds with the failure classification and its message.
    """
    status_code = status_code_for(exc)

    log = get_logger()
    log = log.bind(url=str(request.url), kind=exc.kind, status_code=status_code)
    await log.ainfo("api.error", message=exc.message)

    response = JSONResponse(
        status_code=status_code,
        content={"kind": exc.kind, "message": exc.message},
    )

    if isinstance(exc, (InvalidToken, UnknownUser)):
        response.delete_cookie("token")

    return response


def add_exception_handlers(app: FastAPI) -> FastAPI:
    app.add_exception_handler(ForumError, forum_error_handler)
    return app
