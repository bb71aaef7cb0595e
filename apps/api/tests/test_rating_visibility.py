import random
from unittest.mock import patch

import pytest
from sqlalchemy import func, select

from models.rating import rating_viewers
from services.errors import ForbiddenError, NotFoundError, ValidationError
from services.ratings import (
    create_rating,
    edit_rating,
    list_ratings_by_author,
    list_ratings_by_viewer,
    list_ratings_for_item,
    load_rating,
    remove_rating,
)
from services.sharing import hide_rating, share_rating


@pytest.mark.asyncio
async def test_visibility_matches_author_or_viewer_for_random_sharing(session_maker, seed):
    rng = random.Random(20261018)
    users = [await seed.user(f"User {index}") for index in range(5)]
    cheese_ids = [await seed.cheese(f"Cheese {index}") for index in range(3)]

    expected_viewers = {}
    for _ in range(15):
        author = rng.choice(users)
        others = [user for user in users if user != author]
        viewers = rng.sample(others, rng.randint(0, len(others)))
        cheese_id = rng.choice(cheese_ids)
        rating_id = await seed.rating(author, cheese_id, grade=rng.uniform(0, 10), viewers=viewers)
        expected_viewers[rating_id] = (author, set(viewers), cheese_id)

    async with session_maker() as db:
        for user_id in users:
            expected = {
                rating_id
                for rating_id, (author, viewers, _) in expected_viewers.items()
                if author == user_id or user_id in viewers
            }
            visible = await list_ratings_by_viewer(user_id=user_id, requester_id=user_id, db=db)
            assert {rating["id"] for rating in visible} == expected

            for rating_id in expected_viewers:
                loaded = await load_rating(rating_id, db)
                assert loaded.is_visible_to(user_id) == (rating_id in expected)

            for cheese_id in cheese_ids:
                on_item = await list_ratings_for_item(
                    item_type="cheese",
                    item_id=cheese_id,
                    requester_id=user_id,
                    db=db,
                )
                assert {rating["id"] for rating in on_item} == {
                    rating_id for rating_id in expected if expected_viewers[rating_id][2] == cheese_id
                }


@pytest.mark.asyncio
async def test_share_is_idempotent_and_skips_author_and_unknown_users(session_maker, seed):
    alice = await seed.user("Alice")
    bob = await seed.user("Bob")
    cheese_id = await seed.cheese()
    rating_id = await seed.rating(alice, cheese_id)

    async with session_maker() as db:
        first = await share_rating(
            rating_id=rating_id,
            requester_id=alice,
            user_ids=[bob, alice, "missing-user"],
            db=db,
        )
        second = await share_rating(rating_id=rating_id, requester_id=alice, user_ids=[bob], db=db)

    assert [viewer["id"] for viewer in first["viewers"]] == [bob]
    assert [viewer["id"] for viewer in second["viewers"]] == [bob]
    assert "email" not in second["viewers"][0]
    assert second["user"]["id"] == alice


@pytest.mark.asyncio
async def test_only_author_can_share_or_hide(session_maker, seed):
    alice = await seed.user("Alice")
    bob = await seed.user("Bob")
    rating_id = await seed.rating(alice, await seed.cheese())

    async with session_maker() as db:
        with pytest.raises(ForbiddenError):
            await share_rating(rating_id=rating_id, requester_id=bob, user_ids=[bob], db=db)
        with pytest.raises(ForbiddenError):
            await hide_rating(rating_id=rating_id, requester_id=bob, user_id=bob, db=db)
        with pytest.raises(NotFoundError):
            await share_rating(rating_id=rating_id + 100, requester_id=alice, user_ids=[bob], db=db)


@pytest.mark.asyncio
async def test_hide_prefers_batch_and_ignores_absent_viewers(session_maker, seed):
    alice = await seed.user("Alice")
    bob = await seed.user("Bob")
    carol = await seed.user("Carol")
    dave = await seed.user("Dave")
    rating_id = await seed.rating(alice, await seed.cheese(), viewers=[bob, carol])

    async with session_maker() as db:
        result = await hide_rating(rating_id=rating_id, requester_id=alice, user_ids=[carol], user_id=bob, db=db)
        assert [viewer["id"] for viewer in result["viewers"]] == [bob]

        unchanged = await hide_rating(rating_id=rating_id, requester_id=alice, user_id=dave, db=db)
        assert [viewer["id"] for viewer in unchanged["viewers"]] == [bob]

        with pytest.raises(ValidationError):
            await hide_rating(rating_id=rating_id, requester_id=alice, user_ids=[], db=db)


@pytest.mark.asyncio
async def test_create_then_edit_round_trip_keeps_author_and_viewers(session_maker, seed):
    alice = await seed.user("Alice")
    bob = await seed.user("Bob")
    cheese_id = await seed.cheese()
    other_cheese_id = await seed.cheese("Roquefort", "Blue")

    async with session_maker() as db:
        created = await create_rating(
            author_id=alice,
            item_type="cheese",
            item_id=cheese_id,
            grade=7.5,
            note="nutty",
            db=db,
        )
        assert created["viewers"] == []
        assert created["user"]["id"] == alice

        await share_rating(rating_id=created["id"], requester_id=alice, user_ids=[bob], db=db)
        edited = await edit_rating(
            rating_id=created["id"],
            requester_id=alice,
            changes={"grade": 8.0, "note": "better the second time", "item_id": other_cheese_id},
            db=db,
        )

    assert edited["grade"] == 8.0
    assert edited["note"] == "better the second time"
    assert edited["item_id"] == other_cheese_id
    assert edited["user_id"] == alice
    assert [viewer["id"] for viewer in edited["viewers"]] == [bob]


@pytest.mark.asyncio
async def test_create_rejects_missing_grade_unknown_type_and_missing_item(session_maker, seed):
    alice = await seed.user("Alice")
    cheese_id = await seed.cheese()

    async with session_maker() as db:
        with pytest.raises(ValidationError):
            await create_rating(author_id=alice, item_type="cheese", item_id=cheese_id, grade=None, db=db)
        with pytest.raises(ValidationError):
            await create_rating(author_id=alice, item_type="beer", item_id=cheese_id, grade=5, db=db)
        with pytest.raises(NotFoundError):
            await create_rating(author_id=alice, item_type="cheese", item_id=cheese_id + 50, grade=5, db=db)


@pytest.mark.asyncio
async def test_edit_rolls_back_when_commit_fails(session_maker, seed):
    alice = await seed.user("Alice")
    rating_id = await seed.rating(alice, await seed.cheese(), grade=6)

    async with session_maker() as db:
        with patch.object(db, "commit", side_effect=RuntimeError("disk full")):
            with patch.object(db, "rollback", wraps=db.rollback) as rollback:
                with pytest.raises(RuntimeError):
                    await edit_rating(rating_id=rating_id, requester_id=alice, changes={"grade": 9}, db=db)
        rollback.assert_awaited_once()

    async with session_maker() as db:
        assert (await load_rating(rating_id, db)).grade == 6


@pytest.mark.asyncio
async def test_edit_and_remove_require_author(session_maker, seed):
    alice = await seed.user("Alice")
    bob = await seed.user("Bob")
    rating_id = await seed.rating(alice, await seed.cheese(), viewers=[bob])

    async with session_maker() as db:
        with pytest.raises(ForbiddenError):
            await edit_rating(rating_id=rating_id, requester_id=bob, changes={"grade": 1}, db=db)
        with pytest.raises(ForbiddenError):
            await remove_rating(rating_id=rating_id, requester_id=bob, db=db)

        await remove_rating(rating_id=rating_id, requester_id=alice, db=db)
        assert await list_ratings_by_viewer(user_id=bob, requester_id=bob, db=db) == []
        leftover = await db.execute(
            select(func.count()).select_from(rating_viewers).where(rating_viewers.c.rating_id == rating_id)
        )
        assert leftover.scalar() == 0


@pytest.mark.asyncio
async def test_listings_are_self_only_and_filter_by_type(session_maker, seed):
    alice = await seed.user("Alice")
    bob = await seed.user("Bob")
    await seed.rating(alice, await seed.cheese())

    async with session_maker() as db:
        with pytest.raises(ForbiddenError):
            await list_ratings_by_author(author_id=alice, requester_id=bob, db=db)
        with pytest.raises(ForbiddenError):
            await list_ratings_by_viewer(user_id=alice, requester_id=bob, db=db)

        assert len(await list_ratings_by_author(author_id=alice, requester_id=alice, item_type="cheese", db=db)) == 1
        assert await list_ratings_by_author(author_id=alice, requester_id=alice, item_type="gin", db=db) == []
        with pytest.raises(ValidationError):
            await list_ratings_by_author(author_id=alice, requester_id=alice, item_type="whisky", db=db)
