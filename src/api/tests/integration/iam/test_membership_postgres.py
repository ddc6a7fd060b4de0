"""Integration tests for memberships and effective groups against PostgreSQL."""

from __future__ import annotations

import pytest
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from iam.ports.exceptions import GroupNotFoundError, UserNotFoundError

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]


async def _membership_count(engine: AsyncEngine, user_id: str) -> int:
    async with engine.connect() as conn:
        result = await conn.execute(
            text("SELECT count(*) FROM user_groups WHERE user_id = :user_id"),
            {"user_id": user_id},
        )
        return result.scalar_one()


async def test_repeated_add_keeps_one_row(services, engine, make_user, admin) -> None:
    alice = await make_user("user-alice", "alice")
    await services.groups.create_group("Sales", actor=admin)

    await services.members.add_member("Sales", "alice", actor=admin)
    assert await _membership_count(engine, alice) == 1

    await services.members.add_member("Sales", "alice", actor=admin)
    assert await _membership_count(engine, alice) == 1


async def test_remove_from_unknown_group_affects_nothing(
    services, engine, make_user, admin
) -> None:
    alice = await make_user("user-alice", "alice")
    await services.groups.create_group("Sales", actor=admin)
    await services.members.add_member("Sales", "alice", actor=admin)

    with pytest.raises(GroupNotFoundError):
        await services.members.remove_member("NoSuchGroup", "alice", actor=admin)

    assert await _membership_count(engine, alice) == 1


async def test_remove_is_idempotent(services, engine, make_user, admin) -> None:
    alice = await make_user("user-alice", "alice")
    await services.groups.create_group("Sales", actor=admin)
    await services.members.add_member("Sales", "alice", actor=admin)

    await services.members.remove_member("Sales", "alice", actor=admin)
    await services.members.remove_member("Sales", "alice", actor=admin)

    assert await _membership_count(engine, alice) == 0


async def test_unknown_user_rejected(services, admin) -> None:
    await services.groups.create_group("Sales", actor=admin)

    with pytest.raises(UserNotFoundError):
        await services.members.add_member("Sales", "ghost", actor=admin)


async def test_effective_groups_follow_hierarchy(
    services, new_services, make_user, admin
) -> None:
    await make_user("user-alice", "alice")
    company = await services.groups.create_group("Company", actor=admin)
    sales = await services.groups.create_group(
        "Sales", actor=admin, parent_name="Company"
    )
    emea = await services.groups.create_group("EMEA", actor=admin, parent_name="Sales")
    support = await services.groups.create_group("Support", actor=admin)
    await services.members.add_member("EMEA", "alice", actor=admin)
    await services.members.add_member("Support", "alice", actor=admin)

    effective = await new_services().hierarchy.effective_groups_for("alice")

    assert effective == {company, sales, emea, support}


async def test_deleted_group_keeps_rows_but_confers_nothing(
    services, new_services, engine, make_user, admin
) -> None:
    alice = await make_user("user-alice", "alice")
    await services.groups.create_group("Sales", actor=admin)
    await services.members.add_member("Sales", "alice", actor=admin)
    await services.groups.delete_group("Sales", actor=admin)

    effective = await new_services().hierarchy.effective_groups_for("alice")

    assert effective == set()
    assert await _membership_count(engine, alice) == 1
