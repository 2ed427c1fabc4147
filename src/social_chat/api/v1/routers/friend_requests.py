from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter

from social_chat.api.deps import UoWDep
from social_chat.api.v1.schemas.friend_request import FriendRequestResponse, SendFriendRequest
from social_chat.services import friend_service

router = APIRouter(prefix="/api/v1", tags=["friends"])


@router.post("/friend-requests", response_model=FriendRequestResponse, status_code=201)
async def send_friend_request(body: SendFriendRequest, uow: UoWDep) -> FriendRequestResponse:
    request = await friend_service.send_request(body.from_user_id, body.to_user_id, uow)
    return FriendRequestResponse.model_validate(request, from_attributes=True)


@router.get("/users/{user_id}/friend-requests", response_model=list[FriendRequestResponse])
async def list_pending_requests(user_id: str, uow: UoWDep) -> list[FriendRequestResponse]:
    requests = await friend_service.list_pending(user_id, uow)
    return [FriendRequestResponse.model_validate(r, from_attributes=True) for r in requests]


@router.post("/friend-requests/{request_id}/accept", response_model=FriendRequestResponse)
async def accept_friend_request(request_id: UUID, uow: UoWDep) -> FriendRequestResponse:
    request = await friend_service.accept_request(request_id, uow)
    return FriendRequestResponse.model_validate(request, from_attributes=True)
