"""
Registration, login and password changes.
"""

from fastapi import APIRouter, Response

from agora.core.models import (
    ChangePasswordRequest,
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
)
from agora.core.user import UserData
from agora.service import user as user_service

from .dependencies import (
    AuthenticatedUserDependency,
    DatabaseDependency,
    LoggerDependency,
    VerifierDependency,
)

auth_app = APIRouter(tags=["Accounts"])


@auth_app.post(
    "/register",
    summary="Register a new user",
    responses={
        200: {"description": "The new user's public profile."},
        406: {
            "model": ErrorResponse,
            "description": "Invalid user name, email or password.",
        },
        409: {
            "model": ErrorResponse,
            "description": "User name or email already taken.",
        },
    },
)
async def register(
    content: RegisterRequest,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> UserData:
    user = await user_service.create(
        user_name=content.username,
        email=content.email,
        password=content.password,
        conn=conn,
        log=log,
    )

    return user.to_core()


@auth_app.post(
    "/login",
    summary="Exchange a user name and password for a token",
    description=(
        "The token is returned in the body and also set as the `token` cookie. "
        "Send it back either as that cookie or as a `Bearer` authorization header."
    ),
    responses={
        200: {"description": "Token issued."},
        404: {"model": ErrorResponse, "description": "No such user."},
        406: {
            "model": ErrorResponse,
            "description": "Missing credentials or wrong password.",
        },
    },
)
async def login(
    content: LoginRequest,
    response: Response,
    verifier: VerifierDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> LoginResponse:
    token = await user_service.login(
        user_name=content.username,
        password=content.password,
        verifier=verifier,
        conn=conn,
        log=log,
    )

    response.set_cookie("token", token, httponly=True)

    return LoginResponse(token=token)


@auth_app.put(
    "/change-password",
    summary="Change the caller's password",
    responses={
        200: {"description": "Password changed."},
        401: {"model": ErrorResponse, "description": "Invalid token."},
        406: {
            "model": ErrorResponse,
            "description": "Wrong current password or invalid new password.",
        },
    },
)
async def change_password(
    content: ChangePasswordRequest,
    user: AuthenticatedUserDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> UserData:
    user = await user_service.change_password(
        user=user,
        password=content.password,
        new_password=content.new_password,
        conn=conn,
        log=log,
    )

    return user.to_core()
