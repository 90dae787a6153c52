"""Shared plumbing of the SQL sub-stores.

Every public store method opens its own transaction through
``SqlSubStore.transaction()``; the transaction is committed before the
method returns, so a caller that invalidates a cache after a write never
races the commit.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, TypeVar

from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from kinderhub.errors import AppError, BadRequestError, ConflictError, NotFoundError, StoreError
from kinderhub.persistence.db import session_context
from kinderhub.persistence.tables import Base

logger = logging.getLogger(__name__)

RowT = TypeVar("RowT", bound=Base)
ModelT = TypeVar("ModelT", bound=BaseModel)


def to_row(table: type[RowT], model: BaseModel) -> RowT:
    """Build a table row from the matching fields of ``model``."""
    data = model.model_dump(mode="json")
    return table(**{c.key: data[c.key] for c in table.__table__.columns if c.key in data})


def copy_to_row(row: Base, model: BaseModel) -> None:
    """Overwrite the columns of ``row`` with the fields of ``model``."""
    data = model.model_dump(mode="json")
    for column in row.__table__.columns:
        if column.key in data and not column.primary_key:
            setattr(row, column.key, data[column.key])


def to_model(model: type[ModelT], row: Any) -> ModelT:
    return model.model_validate(row)


class SqlSubStore:
    """Base class of the per-entity SQL stores."""

    resource_type = "Entity"

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """Run a block in one committed transaction.

        Integrity violations become ``ConflictError``, other database
        failures ``StoreError``; domain errors raised inside pass through.
        """
        try:
            async with session_context(self._session_factory) as session:
                yield session
        except AppError:
            raise
        except IntegrityError as e:
            logger.info(f"{self.resource_type} integrity violation: {e.orig}")
            raise ConflictError(self.resource_type, str(e.orig)) from e
        except SQLAlchemyError as e:
            logger.error(f"{self.resource_type} store failure: {e}")
            raise StoreError(
                code=f"store.{self.resource_type.lower()}.app_error",
                text=f"Unable to access {self.resource_type}",
                detail=str(e),
            ) from e

    def missing(self, identifier: str, where: str) -> NotFoundError:
        return NotFoundError(self.resource_type, identifier, where=where)

    def existing(self, where: str) -> BadRequestError:
        return BadRequestError(
            code=f"store.{self.resource_type.lower()}.save.existing.app_error",
            text=f"Must call update for an existing {self.resource_type}",
            where=where,
        )

    async def _get_row(
        self, session: AsyncSession, table: type[RowT], key: Any, where: str
    ) -> RowT:
        row = await session.get(table, key)
        if row is None:
            raise self.missing(key if isinstance(key, str) else "/".join(key), where)
        return row
