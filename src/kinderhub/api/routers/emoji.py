"""Custom emoji and reaction endpoints.

- POST   /api/v4/emoji                                   - Create emoji
- GET    /api/v4/emoji                                   - List emoji
- POST   /api/v4/emoji/search                            - Search emoji
- GET    /api/v4/emoji/name/{emoji_name}                 - Emoji by name
- GET    /api/v4/emoji/{emoji_id}                        - Get emoji
- DELETE /api/v4/emoji/{emoji_id}                        - Delete emoji
- POST   /api/v4/reactions                               - Add reaction
- GET    /api/v4/targets/{target_id}/reactions           - Reactions on a target
- DELETE /api/v4/users/{user_id}/targets/{target_id}/reactions/{emoji_name}
"""

from __future__ import annotations

from fastapi import APIRouter, Query
from pydantic import BaseModel

from kinderhub.api.deps import AppDep, SessionDep
from kinderhub.model import Emoji, Reaction

router = APIRouter(prefix="/api/v4", tags=["emoji"])

DEFAULT_PER_PAGE = 60
MAX_PER_PAGE = 200
SEARCH_LIMIT = 100


class EmojiSearch(BaseModel):
    term: str
    prefix_only: bool = False


@router.post("/emoji", status_code=201)
async def create_emoji(emoji: Emoji, app: AppDep, session: SessionDep) -> Emoji:
    return await app.emoji.create_emoji(session, emoji)


@router.get("/emoji")
async def get_emoji_list(
    app: AppDep,
    session: SessionDep,
    page: int = Query(default=0, ge=0),
    per_page: int = Query(default=DEFAULT_PER_PAGE, ge=1, le=MAX_PER_PAGE),
    sort: str = "",
) -> list[Emoji]:
    return await app.emoji.get_emoji_list(session, page, per_page, sort)


@router.post("/emoji/search")
async def search_emoji(search: EmojiSearch, app: AppDep, session: SessionDep) -> list[Emoji]:
    return await app.emoji.search_emoji(session, search.term, search.prefix_only, SEARCH_LIMIT)


@router.get("/emoji/name/{emoji_name}")
async def get_emoji_by_name(emoji_name: str, app: AppDep, session: SessionDep) -> Emoji:
    return await app.emoji.get_emoji_by_name(session, emoji_name)


@router.get("/emoji/{emoji_id}")
async def get_emoji(emoji_id: str, app: AppDep, session: SessionDep) -> Emoji:
    return await app.emoji.get_emoji(session, emoji_id)


@router.delete("/emoji/{emoji_id}")
async def delete_emoji(emoji_id: str, app: AppDep, session: SessionDep) -> dict[str, str]:
    await app.emoji.delete_emoji(session, emoji_id)
    return {"status": "OK"}


@router.post("/reactions", status_code=201)
async def save_reaction(reaction: Reaction, app: AppDep, session: SessionDep) -> Reaction:
    return await app.emoji.save_reaction(session, reaction)


@router.get("/targets/{target_id}/reactions")
async def get_reactions(target_id: str, app: AppDep, session: SessionDep) -> list[Reaction]:
    return await app.emoji.get_reactions(session, target_id)


@router.delete("/users/{user_id}/targets/{target_id}/reactions/{emoji_name}")
async def delete_reaction(
    user_id: str, target_id: str, emoji_name: str, app: AppDep, session: SessionDep
) -> dict[str, str]:
    reaction = Reaction(user_id=user_id, target_id=target_id, emoji_name=emoji_name)
    await app.emoji.delete_reaction(session, reaction)
    return {"status": "OK"}
