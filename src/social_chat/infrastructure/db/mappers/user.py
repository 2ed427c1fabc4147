from __future__ import annotations

from social_chat.domain.entities.user import User
from social_chat.infrastructure.db.models.user import UserModel


def model_to_entity(model: UserModel, friends: list[str] | None = None) -> User:
    return User(
        id=model.id,
        username=model.username,
        email=model.email,
        fullname=model.fullname,
        phone=model.phone,
        avatar=model.avatar,
        created_at=model.created_at,
        friends=list(friends or []),
    )


def entity_to_model(entity: User) -> UserModel:
    return UserModel(
        id=entity.id,
        username=entity.username,
        email=entity.email,
        fullname=entity.fullname,
        phone=entity.phone,
        avatar=entity.avatar,
        created_at=entity.created_at,
    )
