"""
Pydantic models for request/responses to APIs.
"""

from pydantic import BaseModel


class RegisterRequest(BaseModel):
    username: str
    email: str
    password: str


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    token: str


class ChangePasswordRequest(BaseModel):
    password: str
    new_password: str


class GroupCreationRequest(BaseModel):
    name: str
    description: str = ""


class GroupDescriptionRequest(BaseModel):
    description: str


class JoinResponse(BaseModel):
    joined: str


class PostContent(BaseModel):
    title: str
    body: str = ""


class CommentContent(BaseModel):
    body: str


class ErrorResponse(BaseModel):
    kind: str
    message: str
