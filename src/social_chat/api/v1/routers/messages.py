from __future__ import annotations

from fastapi import APIRouter, Query

from social_chat.api.deps import UoWDep
from social_chat.api.v1.schemas.message import MessageHistoryResponse, MessageResponse
from social_chat.config import settings
from social_chat.infrastructure.db.repositories._cursor import encode_cursor
from social_chat.services import message_service

router = APIRouter(prefix="/api/v1/messages", tags=["messages"])


@router.get("/{user_id}/{peer_id}", response_model=MessageHistoryResponse)
async def list_history(
    user_id: str,
    peer_id: str,
    uow: UoWDep,
    cursor: str | None = Query(None),
    limit: int = Query(settings.HISTORY_PAGE_LIMIT, ge=1, le=200),
) -> MessageHistoryResponse:
    messages = await message_service.list_history(user_id, peer_id, cursor, limit, uow)
    # A full page may be followed by more.
    next_cursor = None
    if len(messages) == limit:
        next_cursor = encode_cursor(messages[-1].created_at, messages[-1].id)
    return MessageHistoryResponse(
        items=[MessageResponse.model_validate(m) for m in messages],
        next_cursor=next_cursor,
    )
