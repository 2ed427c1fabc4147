"""Import all models so Base.metadata sees every table."""
from social_chat.infrastructure.db.models.friend_request import FriendRequestModel
from social_chat.infrastructure.db.models.message import MessageModel
from social_chat.infrastructure.db.models.outbox import OutboxEventModel
from social_chat.infrastructure.db.models.user import FriendshipModel, UserModel

__all__ = [
    "FriendRequestModel",
    "FriendshipModel",
    "MessageModel",
    "OutboxEventModel",
    "UserModel",
]
