import uuid
from typing import Dict, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from database import Base, get_db
from main import app
from models.cheese import Cheese
from models.rating import Rating, rating_viewers
from models.user import User
from routers import rate_limit
from services.session_token import create_session_token


@pytest.fixture(autouse=True)
def reset_local_rate_limit_counters():
    """Keep in-memory rate-limit state isolated between tests."""
    previous = getattr(app.state, "disable_rate_limits", False)
    app.state.disable_rate_limits = True
    rate_limit._local_counters.clear()
    yield
    rate_limit._local_counters.clear()
    app.state.disable_rate_limits = previous


@pytest_asyncio.fixture
async def session_maker(tmp_path):
    db_path = tmp_path / "alacarte.db"
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}")
    maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield maker
    await engine.dispose()


@pytest_asyncio.fixture
async def api_client(session_maker):
    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client, session_maker

    app.dependency_overrides.pop(get_db, None)


def _bearer(user_id: str, email: Optional[str] = None) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_session_token(user_id, email)['token']}"}


@pytest.fixture
def auth_header():
    """Build an Authorization header carrying a fresh session token."""
    return _bearer


class Seeder:
    """Writes fixture rows straight to the test database."""

    def __init__(self, maker):
        self.maker = maker

    async def user(
        self,
        display_name: Optional[str],
        *,
        discoverable: bool = True,
        completed: bool = True,
        is_admin: bool = False,
        email: Optional[str] = None,
    ) -> str:
        user_id = str(uuid.uuid4())
        slug = (display_name or user_id).lower().replace(" ", "-").replace(".", "")
        async with self.maker() as db:
            db.add(
                User(
                    id=user_id,
                    google_id=f"google-{user_id}",
                    email=email or f"{slug}@example.com",
                    full_name=display_name,
                    display_name=display_name,
                    discoverable=discoverable,
                    profile_completed=completed,
                    is_admin=is_admin,
                )
            )
            await db.commit()
        return user_id

    async def cheese(self, name: str = "Comté", cheese_type: str = "Pressed") -> int:
        async with self.maker() as db:
            cheese = Cheese(name=name, type=cheese_type, origin="France")
            db.add(cheese)
            await db.commit()
            return cheese.id

    async def rating(
        self,
        author_id: str,
        item_id: int,
        *,
        grade: float = 4.0,
        item_type: str = "cheese",
        viewers=(),
    ) -> int:
        async with self.maker() as db:
            rating = Rating(grade=grade, note="", user_id=author_id, item_type=item_type, item_id=item_id)
            db.add(rating)
            await db.flush()
            if viewers:
                await db.execute(
                    insert(rating_viewers),
                    [{"rating_id": rating.id, "user_id": viewer_id} for viewer_id in viewers],
                )
            await db.commit()
            return rating.id


@pytest.fixture
def seed(session_maker):
    return Seeder(session_maker)
