"""Domain-Oriented Observability for IAM application layer.

Probes for the group, membership and hierarchy services.
"""

from iam.application.observability.group_service_probe import (
    DefaultGroupServiceProbe,
    GroupServiceProbe,
)
from iam.application.observability.hierarchy_service_probe import (
    DefaultHierarchyServiceProbe,
    HierarchyServiceProbe,
)
from iam.application.observability.membership_service_probe import (
    DefaultMembershipServiceProbe,
    MembershipServiceProbe,
)

__all__ = [
    "GroupServiceProbe",
    "DefaultGroupServiceProbe",
    "HierarchyServiceProbe",
    "DefaultHierarchyServiceProbe",
    "MembershipServiceProbe",
    "DefaultMembershipServiceProbe",
]
