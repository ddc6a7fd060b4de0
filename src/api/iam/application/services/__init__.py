"""Application services for IAM bounded context.

Application services orchestrate domain aggregates, repositories, and
other infrastructure to fulfill use cases. They are the "front door" to
the IAM context.
"""

from iam.application.services.group_service import GroupService
from iam.application.services.hierarchy_service import HierarchyService
from iam.application.services.membership_service import MembershipService

__all__ = [
    "GroupService",
    "HierarchyService",
    "MembershipService",
]
