"""SQL stores for custom emoji and reactions."""

from __future__ import annotations

from sqlalchemy import delete, select, update

from kinderhub.model import Emoji, Reaction
from kinderhub.model.emoji import EMOJI_SORT_BY_NAME
from kinderhub.persistence.sqlstore.base import SqlSubStore, to_model, to_row
from kinderhub.persistence.store import EmojiStore, ReactionStore
from kinderhub.persistence.tables import EmojiTable, ReactionTable


class SqlEmojiStore(SqlSubStore, EmojiStore):
    resource_type = "Emoji"

    async def save(self, emoji: Emoji) -> Emoji:
        if emoji.id:
            raise self.existing("SqlEmojiStore.save")
        emoji.pre_save()
        emoji.is_valid()
        async with self.transaction() as session:
            session.add(to_row(EmojiTable, emoji))
        return emoji

    async def get(self, emoji_id: str, allow_from_cache: bool) -> Emoji:
        stmt = select(EmojiTable).where(EmojiTable.id == emoji_id, EmojiTable.delete_at == 0)
        async with self.transaction() as session:
            row = (await session.execute(stmt)).scalar_one_or_none()
            if row is None:
                raise self.missing(emoji_id, "SqlEmojiStore.get")
            return to_model(Emoji, row)

    async def get_by_name(self, name: str, allow_from_cache: bool) -> Emoji:
        stmt = select(EmojiTable).where(EmojiTable.name == name, EmojiTable.delete_at == 0)
        async with self.transaction() as session:
            row = (await session.execute(stmt)).scalar_one_or_none()
            if row is None:
                raise self.missing(name, "SqlEmojiStore.get_by_name")
            return to_model(Emoji, row)

    async def get_multiple_by_name(self, names: list[str]) -> list[Emoji]:
        if not names:
            return []
        stmt = select(EmojiTable).where(EmojiTable.name.in_(names), EmojiTable.delete_at == 0)
        async with self.transaction() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [to_model(Emoji, row) for row in rows]

    async def get_list(self, offset: int, limit: int, sort: str) -> list[Emoji]:
        stmt = select(EmojiTable).where(EmojiTable.delete_at == 0)
        if sort == EMOJI_SORT_BY_NAME:
            stmt = stmt.order_by(EmojiTable.name)
        else:
            stmt = stmt.order_by(EmojiTable.create_at, EmojiTable.id)
        stmt = stmt.offset(offset).limit(limit)
        async with self.transaction() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [to_model(Emoji, row) for row in rows]

    async def delete(self, emoji: Emoji, time: int) -> None:
        stmt = (
            update(EmojiTable)
            .where(EmojiTable.id == emoji.id, EmojiTable.delete_at == 0)
            .values(delete_at=time, update_at=time)
        )
        async with self.transaction() as session:
            result = await session.execute(stmt)
            if result.rowcount == 0:
                raise self.missing(emoji.id, "SqlEmojiStore.delete")

    async def search(self, name: str, prefix_only: bool, limit: int) -> list[Emoji]:
        pattern = f"{name}%" if prefix_only else f"%{name}%"
        stmt = (
            select(EmojiTable)
            .where(EmojiTable.name.like(pattern), EmojiTable.delete_at == 0)
            .order_by(EmojiTable.name)
            .limit(limit)
        )
        async with self.transaction() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [to_model(Emoji, row) for row in rows]


class SqlReactionStore(SqlSubStore, ReactionStore):
    resource_type = "Reaction"

    async def save(self, reaction: Reaction) -> Reaction:
        """Insert a reaction; saving the same reaction twice is a no-op."""
        reaction.is_valid()
        async with self.transaction() as session:
            existing = (
                await session.execute(
                    select(ReactionTable).where(
                        ReactionTable.user_id == reaction.user_id,
                        ReactionTable.target_id == reaction.target_id,
                        ReactionTable.emoji_name == reaction.emoji_name,
                    )
                )
            ).scalar_one_or_none()
            if existing is not None:
                return to_model(Reaction, existing)
            reaction.pre_save()
            session.add(to_row(ReactionTable, reaction))
        return reaction

    async def delete(self, reaction: Reaction) -> Reaction:
        stmt = delete(ReactionTable).where(
            ReactionTable.user_id == reaction.user_id,
            ReactionTable.target_id == reaction.target_id,
            ReactionTable.emoji_name == reaction.emoji_name,
        )
        async with self.transaction() as session:
            await session.execute(stmt)
        return reaction

    async def get_for_target(self, target_id: str, allow_from_cache: bool) -> list[Reaction]:
        stmt = (
            select(ReactionTable)
            .where(ReactionTable.target_id == target_id)
            .order_by(ReactionTable.create_at, ReactionTable.id)
        )
        async with self.transaction() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [to_model(Reaction, row) for row in rows]

    async def delete_all_with_emoji_name(self, emoji_name: str) -> None:
        async with self.transaction() as session:
            await session.execute(delete(ReactionTable).where(ReactionTable.emoji_name == emoji_name))

    async def permanent_delete_batch(self, end_time: int, limit: int) -> int:
        async with self.transaction() as session:
            ids = (
                await session.execute(
                    select(ReactionTable.id)
                    .where(ReactionTable.create_at < end_time)
                    .order_by(ReactionTable.create_at)
                    .limit(limit)
                )
            ).scalars().all()
            if not ids:
                return 0
            await session.execute(delete(ReactionTable).where(ReactionTable.id.in_(ids)))
            return len(ids)
