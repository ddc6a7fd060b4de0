"""Group routes and models."""

from iam.presentation.groups.routes import router

__all__ = ["router"]
