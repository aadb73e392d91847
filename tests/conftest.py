import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("SEED_ON_STARTUP", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import itertools
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from eduopps.core.clock import Clock
from eduopps.core.database import build_engine, build_session_factory, reset_db
from eduopps.core.permissions import SEED_ROLES
from eduopps.models import Opportunity, School, User
from eduopps.schemas.user import UserContext
from eduopps.seed import seed_roles

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class FixedClock(Clock):
    def __init__(self, now: datetime = NOW):
        self._now = now

    def now(self) -> datetime:
        return self._now


def context_for(role_name: str, user_id: int = 1, school_id: Optional[int] = None) -> UserContext:
    """A UserContext that does not need a database row"""
    return UserContext(
        id=user_id,
        school_id=school_id,
        role_name=role_name,
        role=SEED_ROLES[role_name].capabilities,
    )


class Factory:
    """Creates committed rows and leaves the session with no open transaction"""

    def __init__(self, db, roles):
        self.db = db
        self.roles = roles
        self._seq = itertools.count(1)

    async def school(self, name: Optional[str] = None) -> School:
        school = School(name=name or f"School {next(self._seq)}")
        self.db.add(school)
        await self.db.commit()
        return school

    async def user(self, role_name: str, school: Optional[School] = None, is_active: bool = True) -> UserContext:
        n = next(self._seq)
        user = User(
            email=f"{role_name}{n}@example.org",
            username=f"{role_name}{n}",
            first_name=role_name.title(),
            last_name=f"Number{n}",
            role_id=self.roles[role_name].id,
            school_id=school.id if school else None,
            is_active=is_active,
        )
        self.db.add(user)
        await self.db.commit()
        return UserContext(
            id=user.id,
            school_id=user.school_id,
            role_name=role_name,
            role=SEED_ROLES[role_name].capabilities,
            is_active=is_active,
        )

    async def opportunity(
        self,
        school: Optional[School] = None,
        created_by: Optional[UserContext] = None,
        **overrides
    ) -> Opportunity:
        n = next(self._seq)
        fields = dict(
            title=f"Opportunity {n}",
            organization="Acme Labs",
            description="Hands-on work with a real team",
            start_date=NOW + timedelta(days=30),
            end_date=NOW + timedelta(days=60),
            application_deadline=NOW + timedelta(days=14),
            location="Springfield",
            is_virtual=False,
            opportunity_type="internship",
            industry="technology",
            age_groups=["16-18"],
            school_id=school.id if school else None,
            created_by_id=created_by.id if created_by else None,
            is_global=False,
            visible_to_schools=[],
            number_of_spaces=None,
        )
        fields.update(overrides)
        opportunity = Opportunity(**fields)
        self.db.add(opportunity)
        await self.db.commit()
        await self.db.refresh(opportunity)
        await self.db.commit()
        return opportunity


@pytest.fixture
async def engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await reset_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def roles(db):
    return await seed_roles(db)


@pytest.fixture
def factory(db, roles):
    return Factory(db, roles)


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
async def schools(factory):
    north = await factory.school("Northside High")
    south = await factory.school("Southside Academy")
    return north, south
