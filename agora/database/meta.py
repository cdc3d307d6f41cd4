"""
Meta functionality for the database.
"""

from .comment import Comment
from .group import Group, GroupAdmin, GroupMembership
from .post import Post, PostDownvote, PostUpvote
from .user import User

ALL_TABLES = (
    User,
    Group,
    GroupAdmin,
    GroupMembership,
    Post,
    PostUpvote,
    PostDownvote,
    Comment,
)
