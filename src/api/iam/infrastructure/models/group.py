"""SQLAlchemy ORM models for the groups and user_groups tables."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin

# Repositories match these names in IntegrityError messages and ON CONFLICT
# clauses, so they must stay in step with the migrations.
ACTIVE_GROUP_NAME_INDEX = "ix_groups_active_name"
MEMBERSHIP_PAIR_CONSTRAINT = "uq_user_groups_group_user"


class GroupModel(Base, TimestampMixin):
    """ORM model for groups table.

    Foreign Key Constraint:
    - parent_id references groups.id with RESTRICT delete
      Groups are soft-deleted, so rows referenced as parents never disappear

    Partial Unique Index:
    - name is unique among rows with state = 'active'; deleted groups
      release their name
    """

    __tablename__ = "groups"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    parent_id: Mapped[str | None] = mapped_column(
        String(26),
        ForeignKey("groups.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    created_by: Mapped[str] = mapped_column(String(255), nullable=False)
    state: Mapped[str] = mapped_column(String(16), nullable=False)
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        Index(
            ACTIVE_GROUP_NAME_INDEX,
            "name",
            unique=True,
            postgresql_where=text("state = 'active'"),
        ),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<GroupModel(id={self.id}, name={self.name}, state={self.state})>"


class MembershipModel(Base, TimestampMixin):
    """ORM model for user_groups table (direct memberships).

    Rows reference both sides by ID. The (group_id, user_id) pair is unique,
    which turns concurrent duplicate inserts into no-ops.
    """

    __tablename__ = "user_groups"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    group_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("groups.id", ondelete="RESTRICT"),
        nullable=False,
    )
    user_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    __table_args__ = (
        UniqueConstraint("group_id", "user_id", name=MEMBERSHIP_PAIR_CONSTRAINT),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<MembershipModel(group_id={self.group_id}, user_id={self.user_id})>"
