"""
Service layer for users: registration, lookup, login and password changes.
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from structlog.typing import FilteringBoundLogger

from agora.core.errors import Conflict, NotAcceptable, NotFound, WrongPassword
from agora.core.hashing import MAXIMUM_PASSWORD_BYTES, check_password, hash_password
from agora.core.uuid import UUID
from agora.database.user import User

if TYPE_CHECKING:
    from .identity import IdentityVerifier

MINIMUM_USER_NAME_LENGTH = 4
MINIMUM_PASSWORD_LENGTH = 8


class UserNotFound(NotFound):
    resource_kind = "user"


class UserExistsError(Conflict):
    pass


def validate_password(password: str | None):
    if not password or len(password) < MINIMUM_PASSWORD_LENGTH:
        raise NotAcceptable(
            f"Password must be of length {MINIMUM_PASSWORD_LENGTH} or above"
        )

    if len(password.encode("utf-8")) > MAXIMUM_PASSWORD_BYTES:
        raise NotAcceptable(
            f"Password must be at most {MAXIMUM_PASSWORD_BYTES} bytes long"
        )


async def create(
    user_name: str,
    email: str,
    password: str,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> User:
    """
    Registers a new user.

    Raises
    ------
    NotAcceptable
        If the user name, email or password do not pass validation.
    UserExistsError
        If the user name or email is already taken.
    """
    user_name = (user_name or "").strip()
    email = (email or "").strip()

    log = log.bind(user_name=user_name, email=email)

    if len(user_name) < MINIMUM_USER_NAME_LENGTH:
        await log.ainfo("user.create.invalid_user_name")
        raise NotAcceptable(
            f"Username must be of length {MINIMUM_USER_NAME_LENGTH} or above"
        )

    if not email:
        await log.ainfo("user.create.invalid_email")
        raise NotAcceptable("Invalid Email!")

    validate_password(password)

    existing = (
        (
            await conn.execute(
                select(User).filter(or_(User.user_name == user_name, User.email == email))
            )
        )
        .scalars()
        .first()
    )

    if existing is not None:
        taken = "username" if existing.user_name == user_name else "email"
        await log.ainfo("user.create.exists", taken=taken)
        raise UserExistsError(f"{taken} already exists")

    user = User(
        user_name=user_name,
        email=email,
        password_hash=hash_password(password),
        created_at=datetime.now(timezone.utc),
    )

    try:
        conn.add(user)
        await conn.flush()
    except IntegrityError:
        await log.ainfo("user.create.exists")
        raise UserExistsError(f"User with user name {user_name} already exists")

    log = log.bind(user_id=user.user_id)
    await log.ainfo("user.created")

    return user


async def read_by_id(user_id: UUID, conn: AsyncSession) -> User:
    res = await conn.get(User, user_id)

    if res is None:
        raise UserNotFound(f"User with ID {user_id} not found in the database")

    return res


async def read_by_name(user_name: str, conn: AsyncSession) -> User:
    query = select(User).filter(User.user_name == user_name)
    res = (await conn.execute(query)).scalar_one_or_none()

    if res is None:
        raise UserNotFound(f"User with name {user_name} doesn't exist")

    return res


async def login(
    user_name: str,
    password: str,
    verifier: "IdentityVerifier",
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> str:
    """
    Check a user's password and hand them a fresh token.

    Raises
    ------
    NotAcceptable
        If either credential is missing.
    UserNotFound
        If nobody is registered under `user_name`.
    WrongPassword
        If the password does not match.
    """
    log = log.bind(user_name=user_name)

    if not user_name:
        raise NotAcceptable("Invalid Username!")
    if not password:
        raise NotAcceptable("Invalid Password!")

    user = await read_by_name(user_name=user_name, conn=conn)

    if not check_password(password, user.password_hash):
        await log.awarn("user.login.wrong_password")
        raise WrongPassword

    token = verifier.issue(user_name=user.user_name)
    await log.ainfo("user.login", user_id=user.user_id)

    return token


async def change_password(
    user: User,
    password: str,
    new_password: str,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> User:
    """
    Replace a user's password hash. The current password must be supplied,
    and the new one must be valid and different.
    """
    log = log.bind(user_id=user.user_id)

    validate_password(new_password)

    if password == new_password:
        raise NotAcceptable("New password is the same as old one")

    if not check_password(password or "", user.password_hash):
        await log.awarn("user.password.wrong_password")
        raise WrongPassword

    user.password_hash = hash_password(new_password)
    conn.add(user)
    await conn.flush()

    await log.ainfo("user.password.changed")

    return user
