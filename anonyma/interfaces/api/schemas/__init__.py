from .auth import IdentityRead, RegisterRequest, Token
from .broadcast import (
    BroadcastCreate,
    BroadcastRead,
    BroadcastViewResponse,
    CommentCreate,
    CommentRead,
)
from .conversation import ConversationRead, ThreadDeletedResponse, TypingStatusRead
from .message import (
    MessageCreate,
    MessageCreated,
    MessageEditRead,
    MessageEditRequest,
    MessageRead,
    PinStatusResponse,
    ReactionAggregateRead,
    ReactionRequest,
    ReplyCreate,
)
from .user import (
    BlockStatusResponse,
    PreferencesRead,
    PreferencesUpdate,
    ProfileUpdate,
    UserRead,
)

__all__ = [
    "BlockStatusResponse",
    "BroadcastCreate",
    "BroadcastRead",
    "BroadcastViewResponse",
    "CommentCreate",
    "CommentRead",
    "ConversationRead",
    "IdentityRead",
    "MessageCreate",
    "MessageCreated",
    "MessageEditRead",
    "MessageEditRequest",
    "MessageRead",
    "PinStatusResponse",
    "PreferencesRead",
    "PreferencesUpdate",
    "ProfileUpdate",
    "ReactionAggregateRead",
    "ReactionRequest",
    "RegisterRequest",
    "ReplyCreate",
    "ThreadDeletedResponse",
    "Token",
    "TypingStatusRead",
    "UserRead",
]
