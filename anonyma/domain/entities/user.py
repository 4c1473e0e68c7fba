"""Domain entities representing users and resolved identities."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    """Core attributes describing an application user."""

    id: int | None
    username: str
    password: str | None
    created_at: datetime | None
    is_active: bool = True
    bio: str | None = None
    avatar_url: str | None = None

    def to_identity(self) -> "Identity":
        """Return the :class:`Identity` handed to the messaging core."""

        if self.id is None:
            raise ValueError("Persisted users are required to build an identity")
        return Identity(user_id=self.id, username=self.username)


@dataclass(frozen=True)
class Identity:
    """Authenticated caller as resolved by the auth collaborator."""

    user_id: int
    username: str


@dataclass
class UserPreferences:
    """Client display settings; stored for the owner, never enforced."""

    user_id: int
    theme: str = "dark"
    notification_sound: bool = True
    browser_notifications: bool = True
    show_read_receipts: bool = True
    show_typing_indicators: bool = True
    updated_at: datetime | None = None


__all__ = ["User", "Identity", "UserPreferences"]
