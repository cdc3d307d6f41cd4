"""
Tools for encoding and decoding the signed tokens that identify users.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from cachetools import TTLCache, cached

from .errors import InvalidToken

USER_NAME_CLAIM = "username"


def build_payload(
    user_name: str, expiry: timedelta | None = None
) -> dict[str, Any]:
    """
    Build the claims for a user's token. Without an expiry the token stays
    valid for as long as the signing secret does.
    """
    current_time = datetime.now(timezone.utc)

    payload = {
        USER_NAME_CLAIM: user_name,
        "iat": current_time,
    }

    if expiry is not None:
        payload["exp"] = current_time + expiry

    return payload


def sign_token(
    user_name: str, secret: str, algorithm: str, expiry: timedelta | None = None
) -> str:
    """
    Sign a token binding to `user_name`.

    Parameters
    ----------
    user_name
        The user name to embed.
    secret
        The signing secret (usually `settings.token_secret`).
    algorithm
        The PyJWT algorithm name, e.g. HS256.
    expiry
        Optional lifetime of the token.
    """
    return jwt.encode(
        payload=build_payload(user_name=user_name, expiry=expiry),
        key=secret,
        algorithm=algorithm,
    )


@cached(cache=TTLCache(maxsize=256, ttl=60))
def decode_payload(token: str, secret: str, algorithm: str) -> dict[str, Any]:
    """
    Check a token's signature and return its claims. Results are cached, so
    callers must not modify the returned payload.
    """
    try:
        return jwt.decode(jwt=token, key=secret, algorithms=[algorithm])
    except jwt.InvalidTokenError:
        raise InvalidToken("Invalid Token!")


def decode_token(token: str, secret: str, algorithm: str) -> str:
    """
    Validate a token and return the user name it was issued for. Expiry is
    checked on every call, including when the payload comes from the cache.

    Raises
    ------
    InvalidToken
        If the token cannot be decoded, has a bad signature, has expired, or
        carries no user name.
    """
    payload = decode_payload(token=token, secret=secret, algorithm=algorithm)

    expires_at = payload.get("exp")

    if expires_at is not None and expires_at <= datetime.now(timezone.utc).timestamp():
        raise InvalidToken("Token has expired")

    user_name = payload.get(USER_NAME_CLAIM)

    if not isinstance(user_name, str) or not user_name:
        raise InvalidToken("Token does not identify a user")

    return user_name
