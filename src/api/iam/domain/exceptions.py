"""Domain exceptions raised by IAM aggregates."""


class CorruptHierarchyError(Exception):
    """Raised when a group's ancestor chain loops back on itself.

    Creation-time checks keep parent chains acyclic, but stored rows can be
    changed out-of-band. Traversals raise this instead of looping.
    """

    def __init__(self, group_id: str):
        self.group_id = group_id
        super().__init__(f"Group hierarchy contains a cycle at group {group_id}")
