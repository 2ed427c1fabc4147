from __future__ import annotations

import dataclasses
import uuid

from social_chat.application.exceptions import ConflictError, NotFoundError, ValidationError
from social_chat.application.ports.clock import Clock, SystemClock
from social_chat.application.uow import UnitOfWork
from social_chat.domain.entities.friend_request import FriendRequest
from social_chat.domain.value_objects.enums import FriendRequestStatus, IntegrationEvent

_system_clock = SystemClock()


async def send_request(
    from_user_id: str,
    to_user_id: str,
    uow: UnitOfWork,
    *,
    clock: Clock = _system_clock,
) -> FriendRequest:
    if from_user_id == to_user_id:
        raise ValidationError("Cannot send a friend request to yourself")

    sender = await uow.users.get_by_id(from_user_id)
    if sender is None or await uow.users.get_by_id(to_user_id) is None:
        raise NotFoundError("User not found")
    if to_user_id in sender.friends:
        raise ConflictError("Already friends")
    if await uow.friend_requests.get_pending(from_user_id, to_user_id) is not None:
        raise ConflictError("Friend request already pending")

    request = FriendRequest(
        id=uuid.uuid4(),
        from_user_id=from_user_id,
        to_user_id=to_user_id,
        status=FriendRequestStatus.PENDING,
        created_at=clock.now(),
    )
    request = await uow.friend_requests_w.create(request)
    await uow.outbox.add(
        IntegrationEvent.FRIEND_REQUEST_CREATED,
        {
            "request_id": str(request.id),
            "from_user_id": from_user_id,
            "to_user_id": to_user_id,
        },
    )
    await uow.commit()
    return request


async def list_pending(user_id: str, uow: UnitOfWork) -> list[FriendRequest]:
    """Incoming requests still awaiting an answer."""
    return await uow.friend_requests.list_pending_for(user_id)


async def accept_request(request_id: uuid.UUID, uow: UnitOfWork) -> FriendRequest:
    request = await uow.friend_requests.get_by_id(request_id)
    if request is None:
        raise NotFoundError("Friend request not found")
    if request.status != FriendRequestStatus.PENDING:
        raise ConflictError("Friend request already answered")

    await uow.friend_requests_w.set_status(request_id, FriendRequestStatus.ACCEPTED)
    await uow.users_w.add_friendship(request.from_user_id, request.to_user_id)
    await uow.outbox.add(
        IntegrationEvent.FRIEND_REQUEST_ACCEPTED,
        {
            "request_id": str(request_id),
            "from_user_id": request.from_user_id,
            "to_user_id": request.to_user_id,
        },
    )
    await uow.commit()
    return dataclasses.replace(request, status=FriendRequestStatus.ACCEPTED)
