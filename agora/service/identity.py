"""
Identity verification: turn a caller-supplied token into the user it was
issued for.
"""

from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession
from structlog.typing import FilteringBoundLogger

from agora.core.errors import InvalidToken, UnknownUser
from agora.core.tokens import decode_token, sign_token
from agora.database.user import User

from . import user as user_service


class IdentityVerifier:
    """
    Issues and verifies user tokens. The signing secret is handed over at
    construction and never changes afterwards:

    verifier = IdentityVerifier(secret=settings.token_secret)
    user = await verifier.verify(token=token, conn=conn, log=log)

    Verification is read-only, so the same token may be verified any number
    of times.
    """

    secret: str
    algorithm: str
    expiry: timedelta | None

    def __init__(
        self, secret: str, algorithm: str = "HS256", expiry: timedelta | None = None
    ):
        if not secret:
            raise ValueError("A token signing secret is required")

        self.secret = secret
        self.algorithm = algorithm
        self.expiry = expiry

    def issue(self, user_name: str) -> str:
        return sign_token(
            user_name=user_name,
            secret=self.secret,
            algorithm=self.algorithm,
            expiry=self.expiry,
        )

    async def verify(
        self, token: str | None, conn: AsyncSession, log: FilteringBoundLogger
    ) -> User:
        """
        Resolve `token` to its user.

        Raises
        ------
        InvalidToken
            If the token is missing, malformed, wrongly signed, expired, or has
            no user name claim.
        UnknownUser
            If the token is valid but its user no longer exists.
        """
        if not token:
            await log.adebug("identity.no_token")
            raise InvalidToken

        try:
            user_name = decode_token(
                token=token, secret=self.secret, algorithm=self.algorithm
            )
        except InvalidToken as e:
            await log.adebug("identity.invalid_token")
            raise e

        log = log.bind(user_name=user_name)

        try:
            user = await user_service.read_by_name(user_name=user_name, conn=conn)
        except user_service.UserNotFound:
            await log.ainfo("identity.unknown_user")
            raise UnknownUser

        await log.adebug("identity.verified", user_id=user.user_id)

        return user
