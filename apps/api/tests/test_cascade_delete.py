from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import func, select
from sqlalchemy.sql.dml import Delete

from config import settings
from models.cheese import Cheese
from models.rating import Rating, rating_viewers
from models.sharing_relationship import SharingRelationship
from models.user import User
from services.cascade import (
    delete_item_cascade,
    delete_user_cascade,
    get_item_delete_impact,
    get_user_delete_impact,
)
from services.errors import NotFoundError
from services.sharing import share_rating


async def _count(session_maker, statement) -> int:
    async with session_maker() as db:
        return int((await db.execute(statement)).scalar())


async def _build_network(session_maker, seed):
    """Doomed authors two ratings (one shared with Bob) and is a viewer on one of Bob's."""
    doomed = await seed.user("Doomed")
    bob = await seed.user("Bob")
    cheese_id = await seed.cheese()
    shared_rating = await seed.rating(doomed, cheese_id)
    await seed.rating(doomed, cheese_id)
    bobs_rating = await seed.rating(bob, cheese_id)

    async with session_maker() as db:
        await share_rating(rating_id=shared_rating, requester_id=doomed, user_ids=[bob], db=db)
        await share_rating(rating_id=bobs_rating, requester_id=bob, user_ids=[doomed], db=db)
    return doomed, bob, cheese_id, bobs_rating


@pytest.mark.asyncio
async def test_user_delete_impact_preview(session_maker, seed):
    doomed, bob, _, _ = await _build_network(session_maker, seed)

    async with session_maker() as db:
        preview = await get_user_delete_impact(user_id=doomed, db=db)

    assert preview["can_delete"] is True
    assert preview["warnings"]
    impact = preview["impact"]
    assert impact["ratings_count"] == 2
    assert impact["users_affected"] == 1
    assert impact["sharings_count"] == 1
    assert impact["viewer_links_count"] == 1
    assert impact["affected_users"] == [{"id": bob, "display_name": "Bob", "ratings_count": 1}]


@pytest.mark.asyncio
async def test_user_cascade_removes_ratings_viewer_rows_and_relationships(session_maker, seed):
    doomed, bob, _, bobs_rating = await _build_network(session_maker, seed)

    async with session_maker() as db:
        result = await delete_user_cascade(user_id=doomed, db=db)

    assert result == {"deleted_user": "Doomed"}
    assert await _count(session_maker, select(func.count()).select_from(User).where(User.id == doomed)) == 0
    assert await _count(session_maker, select(func.count()).select_from(Rating).where(Rating.user_id == doomed)) == 0
    assert await _count(
        session_maker,
        select(func.count()).select_from(rating_viewers).where(rating_viewers.c.user_id == doomed),
    ) == 0
    assert await _count(session_maker, select(func.count()).select_from(SharingRelationship)) == 0
    # Bob's own rating survives, now private again.
    assert await _count(session_maker, select(func.count()).select_from(Rating).where(Rating.id == bobs_rating)) == 1
    assert await _count(session_maker, select(func.count()).select_from(rating_viewers)) == 0
    assert await _count(session_maker, select(func.count()).select_from(User).where(User.id == bob)) == 1


@pytest.mark.asyncio
async def test_user_cascade_rolls_back_when_final_step_fails(session_maker, seed):
    doomed, _, _, _ = await _build_network(session_maker, seed)
    ratings_before = await _count(session_maker, select(func.count()).select_from(Rating))
    viewers_before = await _count(session_maker, select(func.count()).select_from(rating_viewers))

    async with session_maker() as db:
        original_execute = db.execute

        async def failing_execute(statement, *args, **kwargs):
            if isinstance(statement, Delete) and statement.table.name == "users":
                raise RuntimeError("simulated storage failure")
            return await original_execute(statement, *args, **kwargs)

        with patch.object(db, "execute", side_effect=failing_execute):
            with pytest.raises(RuntimeError):
                await delete_user_cascade(user_id=doomed, db=db)

    assert await _count(session_maker, select(func.count()).select_from(User).where(User.id == doomed)) == 1
    assert await _count(session_maker, select(func.count()).select_from(Rating)) == ratings_before
    assert await _count(session_maker, select(func.count()).select_from(rating_viewers)) == viewers_before
    assert await _count(session_maker, select(func.count()).select_from(SharingRelationship)) == 2


@pytest.mark.asyncio
async def test_item_cascade_rolls_back_when_item_delete_fails(session_maker, seed):
    alice = await seed.user("Alice")
    bob = await seed.user("Bob")
    cheese_id = await seed.cheese()
    rating_id = await seed.rating(alice, cheese_id, viewers=[bob])

    async with session_maker() as db:
        original_execute = db.execute

        async def failing_execute(statement, *args, **kwargs):
            if isinstance(statement, Delete) and statement.table.name == Cheese.__tablename__:
                raise RuntimeError("simulated storage failure")
            return await original_execute(statement, *args, **kwargs)

        with patch.object(db, "execute", side_effect=failing_execute):
            with pytest.raises(RuntimeError):
                await delete_item_cascade(item_type="cheese", item_id=cheese_id, db=db)

    assert await _count(session_maker, select(func.count()).select_from(Cheese).where(Cheese.id == cheese_id)) == 1
    assert await _count(session_maker, select(func.count()).select_from(Rating).where(Rating.id == rating_id)) == 1
    assert (
        await _count(
            session_maker,
            select(func.count()).select_from(rating_viewers).where(rating_viewers.c.rating_id == rating_id),
        )
        == 1
    )


@pytest.mark.asyncio
async def test_item_cascade_and_preview(session_maker, seed):
    alice = await seed.user("Alice")
    bob = await seed.user("Bob")
    cheese_id = await seed.cheese()
    other_cheese = await seed.cheese("Brie", "Soft")
    await seed.rating(alice, cheese_id, viewers=[bob])
    await seed.rating(bob, cheese_id)
    kept = await seed.rating(alice, other_cheese, viewers=[bob])

    async with session_maker() as db:
        preview = await get_item_delete_impact(item_type="cheese", item_id=cheese_id, db=db)
        assert preview["impact"]["ratings_count"] == 2
        assert preview["impact"]["users_affected"] == 2
        assert preview["impact"]["sharings_count"] == 1

        result = await delete_item_cascade(item_type="cheese", item_id=cheese_id, db=db)
        assert result == {"ratings_deleted": 2}

        with pytest.raises(NotFoundError):
            await get_item_delete_impact(item_type="cheese", item_id=cheese_id, db=db)

    assert await _count(session_maker, select(func.count()).select_from(Cheese)) == 1
    assert await _count(session_maker, select(func.count()).select_from(Rating)) == 1
    assert await _count(
        session_maker,
        select(func.count()).select_from(rating_viewers).where(rating_viewers.c.rating_id == kept),
    ) == 1


@pytest.mark.asyncio
async def test_admin_routes_gate_and_cascade(api_client, seed, auth_header):
    client, session_maker = api_client
    admin = await seed.user("Admin", is_admin=True)
    member = await seed.user("Member")
    cheese_id = await seed.cheese()
    await seed.rating(member, cheese_id)

    forbidden = await client.delete(f"/admin/cheese/{cheese_id}", headers=auth_header(member))
    assert forbidden.status_code == 403

    preview = await client.get(f"/admin/user/{member}/delete-impact", headers=auth_header(admin))
    assert preview.status_code == 200
    assert preview.json()["impact"]["ratings_count"] == 1

    deleted = await client.delete(f"/admin/cheese/{cheese_id}", headers=auth_header(admin))
    assert deleted.status_code == 200
    assert deleted.json()["ratings_deleted"] == 1

    missing = await client.get(f"/admin/cheese/{cheese_id}/delete-impact", headers=auth_header(admin))
    assert missing.status_code == 404

    removed = await client.delete(f"/admin/user/{member}", headers=auth_header(admin))
    assert removed.status_code == 200
    assert removed.json()["deleted_user"] == "Member"
    assert await _count(session_maker, select(func.count()).select_from(User)) == 1


@pytest.mark.asyncio
async def test_admin_promote_and_demote_transitions(api_client, seed, auth_header, monkeypatch):
    client, _ = api_client
    monkeypatch.setattr(settings, "INITIAL_ADMIN_EMAIL", "root@example.com")
    root = await seed.user("Root", email="root@example.com")
    member = await seed.user("Member")

    promoted = await client.patch(f"/admin/user/{member}/promote", headers=auth_header(root))
    assert promoted.status_code == 200
    assert promoted.json()["user"]["is_admin"] is True

    again = await client.patch(f"/admin/user/{member}/promote", headers=auth_header(root))
    assert again.status_code == 409

    demoted = await client.patch(f"/admin/user/{member}/demote", headers=auth_header(root))
    assert demoted.status_code == 200

    not_admin = await client.patch(f"/admin/user/{member}/demote", headers=auth_header(root))
    assert not_admin.status_code == 409

    listing = await client.get("/admin/users/all", headers=auth_header(root))
    assert listing.status_code == 200
    assert {user["email"] for user in listing.json()} == {"root@example.com", "member@example.com"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method,path,target,detail",
    [
        ("get", "/admin/user/{id}", "routers.admin.get_user", "Failed to fetch user"),
        ("patch", "/admin/user/{id}/promote", "routers.admin.set_admin_flag", "Failed to promote user"),
        ("patch", "/admin/user/{id}/demote", "routers.admin.set_admin_flag", "Failed to demote user"),
    ],
)
async def test_admin_user_routes_report_unexpected_failures(api_client, seed, auth_header, method, path, target, detail):
    client, _ = api_client
    admin = await seed.user("Admin", is_admin=True)
    member = await seed.user("Member")

    with patch(target, new=AsyncMock(side_effect=RuntimeError("database went away"))):
        response = await client.request(method.upper(), path.format(id=member), headers=auth_header(admin))

    assert response.status_code == 500
    assert response.json()["detail"] == detail
