"""SQL implementation of the kinderhub stores."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from kinderhub.persistence.db import create_session_factory, drop_tables, health_check, init_db
from kinderhub.persistence.sqlstore.activity_note import SqlActivityNoteStore
from kinderhub.persistence.sqlstore.emoji import SqlEmojiStore, SqlReactionStore
from kinderhub.persistence.sqlstore.event import SqlEventStore
from kinderhub.persistence.sqlstore.health import SqlHealthStore
from kinderhub.persistence.sqlstore.kid import SqlKidStore
from kinderhub.persistence.sqlstore.medicine import SqlMedicineStore
from kinderhub.persistence.sqlstore.menu import SqlMenuStore
from kinderhub.persistence.sqlstore.role import SqlRoleStore, SqlSchemeStore
from kinderhub.persistence.sqlstore.schedule import SqlScheduleStore
from kinderhub.persistence.sqlstore.school import SqlSchoolStore
from kinderhub.persistence.sqlstore.user import SqlUserStore
from kinderhub.persistence.store import Store

logger = logging.getLogger(__name__)


class SqlStore(Store):
    """Every entity store over one async engine."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.session_factory = create_session_factory(engine)

        self.school = SqlSchoolStore(self.session_factory)
        self.kid = SqlKidStore(self.session_factory)
        self.health = SqlHealthStore(self.session_factory)
        self.medicine = SqlMedicineStore(self.session_factory)
        self.menu = SqlMenuStore(self.session_factory)
        self.schedule = SqlScheduleStore(self.session_factory)
        self.event = SqlEventStore(self.session_factory)
        self.activity_note = SqlActivityNoteStore(self.session_factory)
        self.user = SqlUserStore(self.session_factory)
        self.role = SqlRoleStore(self.session_factory)
        self.scheme = SqlSchemeStore(self.session_factory)
        self.emoji = SqlEmojiStore(self.session_factory)
        self.reaction = SqlReactionStore(self.session_factory)

    async def init(self) -> None:
        await init_db(self.engine)

    async def drop_all_tables(self) -> None:
        await drop_tables(self.engine)
        logger.info("Dropped all tables")

    async def health_check(self) -> bool:
        return await health_check(self.session_factory)

    async def close(self) -> None:
        await self.engine.dispose()


__all__ = [
    "SqlActivityNoteStore",
    "SqlEmojiStore",
    "SqlEventStore",
    "SqlHealthStore",
    "SqlKidStore",
    "SqlMedicineStore",
    "SqlMenuStore",
    "SqlReactionStore",
    "SqlRoleStore",
    "SqlScheduleStore",
    "SqlSchemeStore",
    "SqlSchoolStore",
    "SqlStore",
    "SqlUserStore",
]
