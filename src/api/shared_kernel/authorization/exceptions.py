"""Authorization exceptions shared by all bounded contexts."""


class AuthorizationError(Exception):
    """Base class for authentication and capability failures.

    These are terminal for the request and are always raised before any
    domain logic runs.
    """

    pass


class UnauthenticatedError(AuthorizationError):
    """Raised when the caller could not be authenticated."""

    pass


class ForbiddenError(AuthorizationError):
    """Raised when the principal lacks a required capability."""

    def __init__(self, principal_id: str, capability: str) -> None:
        super().__init__(
            f"Principal {principal_id} lacks the {capability} capability"
        )
        self.principal_id = principal_id
        self.capability = capability
