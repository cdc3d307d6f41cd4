"""
The failure taxonomy shared by every service. Each error carries a short
machine-readable `kind` alongside its human-readable message, and the API
turns them into responses with `agora.api.errors.add_exception_handlers`.
"""


class ForumError(Exception):
    kind: str = "error"
    message: str = "Something went wrong"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidToken(ForumError):
    kind = "invalid_token"
    message = "Invalid Token!"


class UnknownUser(ForumError):
    kind = "unknown_user"
    message = "User doesn't exist."


class NotFound(ForumError):
    kind = "not_found"
    resource_kind: str = "resource"

    def __init__(self, message: str | None = None, resource_kind: str | None = None):
        if resource_kind is not None:
            self.resource_kind = resource_kind
        if message is None:
            message = f"{self.resource_kind.capitalize()} doesn't exist"
        super().__init__(message)


class Forbidden(ForumError):
    kind = "forbidden"
    message = "Not Authorized!"


class Conflict(ForumError):
    kind = "conflict"
    message = "Already exists"


class NotAcceptable(ForumError):
    kind = "not_acceptable"
    message = "Invalid input"


class WrongPassword(NotAcceptable):
    message = "Wrong Password!"
