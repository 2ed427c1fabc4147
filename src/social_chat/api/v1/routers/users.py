from __future__ import annotations

from fastapi import APIRouter, Query

from social_chat.api.deps import UoWDep
from social_chat.api.v1.schemas.user import CreateUserRequest, UpdateProfileRequest, UserResponse
from social_chat.services import user_service

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(body: CreateUserRequest, uow: UoWDep) -> UserResponse:
    user = await user_service.create_user(
        body.username, body.email, body.fullname, body.phone, uow,
    )
    return UserResponse.model_validate(user, from_attributes=True)


@router.get("", response_model=list[UserResponse])
async def list_users(
    uow: UoWDep,
    limit: int = Query(100, ge=1, le=500),
) -> list[UserResponse]:
    users = await user_service.list_users(limit, uow)
    return [UserResponse.model_validate(u, from_attributes=True) for u in users]


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, uow: UoWDep) -> UserResponse:
    user = await user_service.get_user(user_id, uow)
    return UserResponse.model_validate(user, from_attributes=True)


@router.patch("/{user_id}", response_model=UserResponse)
async def update_profile(
    user_id: str,
    body: UpdateProfileRequest,
    uow: UoWDep,
) -> UserResponse:
    user = await user_service.update_profile(
        user_id,
        uow,
        fullname=body.fullname,
        email=body.email,
        phone=body.phone,
        avatar=body.avatar,
    )
    return UserResponse.model_validate(user, from_attributes=True)
