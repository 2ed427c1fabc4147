from __future__ import annotations

from fastapi import APIRouter

from social_chat.api.deps import ManagerDep
from social_chat.api.v1.schemas.presence import PresenceResponse

router = APIRouter(prefix="/api/v1/presence", tags=["presence"])


@router.get("", response_model=PresenceResponse)
async def online_users(manager: ManagerDep) -> PresenceResponse:
    return PresenceResponse(online=manager.online_users())
