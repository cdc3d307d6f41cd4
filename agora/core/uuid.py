"""
Identifiers for every forum record. Time-ordered uuid7 values keep newer rows
sorted after older ones.
"""

from uuid import UUID as UUID

from uuid_extensions import uuid7 as uuid7

__ALL__ = ["UUID", "uuid7"]
