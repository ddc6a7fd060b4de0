"""SQLAlchemy ORM models for IAM bounded context.

These models map to database tables and are used by repository implementations.
"""

from iam.infrastructure.models.group import (
    ACTIVE_GROUP_NAME_INDEX,
    MEMBERSHIP_PAIR_CONSTRAINT,
    GroupModel,
    MembershipModel,
)
from iam.infrastructure.models.user import UserModel

__all__ = [
    "ACTIVE_GROUP_NAME_INDEX",
    "MEMBERSHIP_PAIR_CONSTRAINT",
    "GroupModel",
    "MembershipModel",
    "UserModel",
]
