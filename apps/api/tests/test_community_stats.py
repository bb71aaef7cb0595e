import pytest

from services.errors import ValidationError
from services.stats import get_community_stats


@pytest.mark.asyncio
async def test_stats_ignore_visibility(session_maker, seed):
    users = [await seed.user(name) for name in ("Ann", "Ben", "Cid")]
    cheese_id = await seed.cheese()
    for user_id, grade in zip(users, (5, 3, 4)):
        await seed.rating(user_id, cheese_id, grade=grade)

    async with session_maker() as db:
        stats = await get_community_stats(item_type="cheese", item_id=cheese_id, db=db)

    assert stats == {"count": 3, "average": 4.0}


@pytest.mark.asyncio
async def test_stats_for_unrated_item(session_maker, seed):
    cheese_id = await seed.cheese()
    async with session_maker() as db:
        stats = await get_community_stats(item_type="cheese", item_id=cheese_id, db=db)
        assert stats == {"count": 0, "average": 0.0}

        with pytest.raises(ValidationError):
            await get_community_stats(item_type="mead", item_id=cheese_id, db=db)


@pytest.mark.asyncio
async def test_stats_route_payload(api_client, seed, auth_header):
    client, _ = api_client
    viewer = await seed.user("Viewer")
    author = await seed.user("Author")
    cheese_id = await seed.cheese()
    await seed.rating(author, cheese_id, grade=6)

    response = await client.get(f"/api/stats/community/cheese/{cheese_id}", headers=auth_header(viewer))

    assert response.status_code == 200
    assert response.json() == {
        "total_ratings": 1,
        "average_rating": 6.0,
        "item_type": "cheese",
        "item_id": cheese_id,
    }
