"""
Utilities for hashing and comparing passwords.
"""

import bcrypt

# bcrypt only considers the first 72 bytes of its input.
MAXIMUM_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    """
    Hash a password with a fresh salt. The salt and cost are embedded in the
    returned string, so it is all that needs storing.
    """
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    """
    Compare a plain text password against a stored hash. Passwords longer
    than bcrypt accepts can never have been stored, so they never match.
    """
    candidate = password.encode("utf-8")

    if len(candidate) > MAXIMUM_PASSWORD_BYTES:
        return False

    return bcrypt.checkpw(candidate, password_hash.encode("utf-8"))
