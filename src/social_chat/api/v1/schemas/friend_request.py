from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field


class SendFriendRequest(BaseModel):
    from_user_id: str = Field(validation_alias=AliasChoices("from_user_id", "from"))
    to_user_id: str = Field(validation_alias=AliasChoices("to_user_id", "to"))


class FriendRequestResponse(BaseModel):
    id: UUID
    from_user_id: str
    to_user_id: str
    status: str
    created_at: datetime

    model_config = {"from_attributes": True}
