"""Custom emoji and reactions."""

from __future__ import annotations

from kinderhub.errors import BadRequestError, ConflictError, NotFoundError
from kinderhub.model import Emoji, Reaction, Session, get_millis
from kinderhub.model.emoji import SYSTEM_EMOJI_NAMES
from kinderhub.security.rbac import Permission
from kinderhub.services.base import Service


class EmojiService(Service):
    async def create_emoji(self, session: Session, emoji: Emoji) -> Emoji:
        await self.permissions.require(session, Permission.CREATE_EMOJIS, "create_emoji")
        if emoji.name in SYSTEM_EMOJI_NAMES:
            raise BadRequestError(
                code="api.emoji.create.system_name.app_error",
                text="The name is used by a system emoji",
                where="EmojiService.create_emoji",
                detail=f"name={emoji.name}",
            )
        try:
            await self.store.emoji.get_by_name(emoji.name, False)
        except NotFoundError:
            pass
        else:
            raise ConflictError("Emoji", emoji.name, where="EmojiService.create_emoji")
        emoji.creator_id = session.user_id
        return await self.store.emoji.save(emoji)

    async def get_emoji(self, session: Session, emoji_id: str) -> Emoji:
        return await self.store.emoji.get(emoji_id, True)

    async def get_emoji_by_name(self, session: Session, name: str) -> Emoji:
        return await self.store.emoji.get_by_name(name, True)

    async def get_emoji_list(self, session: Session, page: int, per_page: int, sort: str) -> list[Emoji]:
        return await self.store.emoji.get_list(page * per_page, per_page, sort)

    async def search_emoji(self, session: Session, term: str, prefix_only: bool, limit: int) -> list[Emoji]:
        return await self.store.emoji.search(term, prefix_only, limit)

    async def delete_emoji(self, session: Session, emoji_id: str) -> None:
        """Delete an emoji and every reaction that uses it."""
        emoji = await self.store.emoji.get(emoji_id, False)
        await self.permissions.require(session, Permission.DELETE_EMOJIS, "delete_emoji")
        if emoji.creator_id != session.user_id:
            await self.permissions.require(session, Permission.DELETE_OTHERS_EMOJIS, "delete_emoji")
        await self.store.emoji.delete(emoji, get_millis())
        await self.store.reaction.delete_all_with_emoji_name(emoji.name)

    # -------------------------------------------------------------------------
    # Reactions
    # -------------------------------------------------------------------------

    async def _check_reaction(self, session: Session, reaction: Reaction, where: str) -> None:
        if reaction.user_id != session.user_id:
            await self.permissions.require(session, Permission.EDIT_OTHER_USERS, where)

    async def _check_target(self, target_id: str) -> None:
        """A reaction targets an event or an activity note."""
        try:
            await self.store.event.get(target_id)
            return
        except NotFoundError:
            pass
        await self.store.activity_note.get(target_id)

    async def _check_emoji_name(self, name: str) -> None:
        if name in SYSTEM_EMOJI_NAMES:
            return
        try:
            await self.store.emoji.get_by_name(name, True)
        except NotFoundError:
            raise BadRequestError(
                code="api.reaction.save.emoji.app_error",
                text="Unknown emoji",
                where="EmojiService.save_reaction",
                detail=f"emoji_name={name}",
            ) from None

    async def save_reaction(self, session: Session, reaction: Reaction) -> Reaction:
        await self.permissions.require(session, Permission.ADD_REACTION, "save_reaction")
        await self._check_reaction(session, reaction, "save_reaction")
        await self._check_target(reaction.target_id)
        await self._check_emoji_name(reaction.emoji_name)
        return await self.store.reaction.save(reaction)

    async def delete_reaction(self, session: Session, reaction: Reaction) -> Reaction:
        await self.permissions.require(session, Permission.REMOVE_REACTION, "delete_reaction")
        await self._check_reaction(session, reaction, "delete_reaction")
        return await self.store.reaction.delete(reaction)

    async def get_reactions(self, session: Session, target_id: str) -> list[Reaction]:
        return await self.store.reaction.get_for_target(target_id, True)
