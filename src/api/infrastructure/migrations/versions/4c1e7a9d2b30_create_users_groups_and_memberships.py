"""create users, groups and user_groups tables

Revision ID: 4c1e7a9d2b30
Revises:
Create Date: 2026-10-18 09:12:44.103912

Groups are soft-deleted, so the parent FK uses RESTRICT and active names are
unique through a partial index. Membership pairs are unique so concurrent
inserts can use ON CONFLICT DO NOTHING.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "4c1e7a9d2b30"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users, groups and user_groups.

    Key constraints:
    - ix_groups_active_name: unique name WHERE state = 'active'
    - groups.parent_id self-FK with RESTRICT
    - uq_user_groups_group_user: one row per (group_id, user_id)
    """
    op.create_table(
        "users",
        sa.Column("id", sa.String(255), nullable=False),
        sa.Column("username", sa.String(255), nullable=False),
        sa.Column(
            "state", sa.String(16), nullable=False, server_default="active"
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("username", name="uq_users_username"),
    )

    op.create_table(
        "groups",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("parent_id", sa.String(26), nullable=True),
        sa.Column("created_by", sa.String(255), nullable=False),
        sa.Column("state", sa.String(16), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_groups"),
        sa.ForeignKeyConstraint(
            ["parent_id"],
            ["groups.id"],
            name="fk_groups_parent_id_groups",
            ondelete="RESTRICT",
        ),
    )
    op.create_index("ix_groups_parent_id", "groups", ["parent_id"])
    op.create_index(
        "ix_groups_active_name",
        "groups",
        ["name"],
        unique=True,
        postgresql_where=sa.text("state = 'active'"),
    )

    op.create_table(
        "user_groups",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("group_id", sa.String(26), nullable=False),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_user_groups"),
        sa.ForeignKeyConstraint(
            ["group_id"],
            ["groups.id"],
            name="fk_user_groups_group_id_groups",
            ondelete="RESTRICT",
        ),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            name="fk_user_groups_user_id_users",
            ondelete="RESTRICT",
        ),
        sa.UniqueConstraint(
            "group_id", "user_id", name="uq_user_groups_group_user"
        ),
    )
    op.create_index("ix_user_groups_user_id", "user_groups", ["user_id"])


def downgrade() -> None:
    """Drop user_groups, groups and users with their indexes."""
    op.drop_index("ix_user_groups_user_id", table_name="user_groups")
    op.drop_table("user_groups")
    op.drop_index("ix_groups_active_name", table_name="groups")
    op.drop_index("ix_groups_parent_id", table_name="groups")
    op.drop_table("groups")
    op.drop_table("users")
