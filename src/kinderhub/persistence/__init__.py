"""Persistence layer: SQL tables, store interfaces and the SQL store."""

from kinderhub.persistence.db import close_db, get_engine, init_db, session_context
from kinderhub.persistence.store import (
    EmojiStore,
    ReactionStore,
    RoleStore,
    SchemeStore,
    Store,
    UserStore,
)

__all__ = [
    "EmojiStore",
    "ReactionStore",
    "RoleStore",
    "SchemeStore",
    "Store",
    "UserStore",
    "close_db",
    "get_engine",
    "init_db",
    "session_context",
]
