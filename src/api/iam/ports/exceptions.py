"""Domain exceptions for IAM bounded context.

These exceptions represent domain-level errors that can occur during
repository operations. They should be caught and handled by the
application layer.
"""


class DuplicateGroupNameError(Exception):
    """Raised when attempting to create a group whose name is already taken.

    Names are unique among active groups only. The presentation layer turns
    this into a descriptive conflict response carrying the name.
    """

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"This group already exists: {name}")


class ParentGroupNotFoundError(Exception):
    """Raised when a requested parent name does not resolve to an active group."""

    def __init__(self, parent_name: str):
        self.parent_name = parent_name
        super().__init__(f"This group does not exist: {parent_name}")


class GroupNotFoundError(Exception):
    """Raised when no active group has the requested name.

    Membership routes report this as a bare not-found response so callers
    cannot tell a missing group from a missing user.
    """

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Group not found: {name}")


class UserNotFoundError(Exception):
    """Raised when no active user has the requested username."""

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"User not found: {username}")
