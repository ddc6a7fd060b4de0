"""SQLAlchemy ORM model for the users table.

Users are provisioned by the identity provider; this table only stores the
metadata needed to resolve usernames into identifiers.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class UserModel(Base, TimestampMixin):
    """ORM model for users table (metadata only).

    Note: id is VARCHAR(255) to accommodate external SSO IDs (UUIDs, Auth0, etc.)
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    username: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    state: Mapped[str] = mapped_column(
        String(16), nullable=False, server_default="active"
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<UserModel(id={self.id}, username={self.username})>"
