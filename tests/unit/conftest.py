"""Shared fixtures for the unit tests.

Stores run against an in-memory SQLite database (aiosqlite). A single
connection is shared through ``StaticPool`` so every session sees the
same database.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass

import pytest
import pytest_asyncio
from sqlalchemy.pool import StaticPool

from kinderhub.cache import CacheProvider, LocalCacheLayer
from kinderhub.model import Kid, School, SchoolClass, SchoolMember, Session, User
from kinderhub.persistence.db import create_engine
from kinderhub.persistence.sqlstore import SqlStore
from kinderhub.security import anonymous_session
from kinderhub.services import App

SQLITE_URL = "sqlite+aiosqlite://"


class FakeTimer:
    """Manually advanced clock for TTL tests."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def timer() -> FakeTimer:
    return FakeTimer()


@pytest_asyncio.fixture
async def sql_store() -> AsyncIterator[SqlStore]:
    engine = create_engine(
        SQLITE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    store = SqlStore(engine)
    await store.init()
    yield store
    await store.close()


@pytest.fixture
def cache_layer(sql_store: SqlStore, timer: FakeTimer) -> LocalCacheLayer:
    return LocalCacheLayer(sql_store, provider=CacheProvider(timer=timer))


@pytest_asyncio.fixture
async def app(cache_layer: LocalCacheLayer) -> App:
    kinderhub = App(cache_layer, cache_layer=cache_layer)
    await kinderhub.seed()
    return kinderhub


@pytest.fixture
def admin() -> Session:
    return anonymous_session()


@dataclass
class World:
    """A school with one class, one kid and a few users around it."""

    school: School
    school_class: SchoolClass
    kid: Kid
    teacher: User
    parent: User
    outsider: User

    @property
    def teacher_session(self) -> Session:
        return Session(user_id=self.teacher.id)

    @property
    def parent_session(self) -> Session:
        return Session(user_id=self.parent.id)

    @property
    def outsider_session(self) -> Session:
        return Session(user_id=self.outsider.id)


async def create_user(app: App, username: str) -> User:
    return await app.store.user.save(User(username=username, email=f"{username}@example.com"))


@pytest_asyncio.fixture
async def world(app: App, admin: Session) -> World:
    teacher = await create_user(app, "teacher")
    parent = await create_user(app, "parent")
    outsider = await create_user(app, "outsider")

    school = await app.schools.create_school(admin, School(name="sunflower", description="Kindergarten"))
    await app.store.school.save_member(
        SchoolMember(school_id=school.id, user_id=teacher.id, scheme_teacher=True)
    )
    await app.store.school.save_member(
        SchoolMember(school_id=school.id, user_id=parent.id, scheme_parent=True)
    )

    school_class = await app.schools.add_class(admin, school.id, SchoolClass(name="Rabbits"))
    kid = await app.kids.create_kid(
        admin, Kid(first_name="An", last_name="Nguyen", class_id=school_class.id)
    )
    await app.kids.join_guardian(admin, kid.id, parent.id)

    return World(
        school=school,
        school_class=school_class,
        kid=kid,
        teacher=teacher,
        parent=parent,
        outsider=outsider,
    )
