from __future__ import annotations

from social_chat.domain.entities.friend_request import FriendRequest
from social_chat.infrastructure.db.models.friend_request import FriendRequestModel


def model_to_entity(model: FriendRequestModel) -> FriendRequest:
    return FriendRequest(
        id=model.id,
        from_user_id=model.from_user_id,
        to_user_id=model.to_user_id,
        status=model.status,
        created_at=model.created_at,
    )


def entity_to_model(entity: FriendRequest) -> FriendRequestModel:
    return FriendRequestModel(
        id=entity.id,
        from_user_id=entity.from_user_id,
        to_user_id=entity.to_user_id,
        status=entity.status,
        created_at=entity.created_at,
    )
