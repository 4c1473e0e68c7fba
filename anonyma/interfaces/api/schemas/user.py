"""User schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class UserRead(BaseModel):
    id: int
    username: str
    created_at: datetime | None
    bio: str | None = None
    avatar_url: str | None = None

    model_config = ConfigDict(from_attributes=True)


class ProfileUpdate(BaseModel):
    """Omitted fields keep their current value; empty strings clear bio and avatar."""

    username: str | None = Field(default=None, min_length=1, max_length=64)
    bio: str | None = None
    avatar_url: str | None = None


class BlockStatusResponse(BaseModel):
    user_id: int
    blocked: bool


class PreferencesRead(BaseModel):
    theme: str
    notification_sound: bool
    browser_notifications: bool
    show_read_receipts: bool
    show_typing_indicators: bool
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class PreferencesUpdate(BaseModel):
    theme: Literal["dark", "light"] | None = None
    notification_sound: bool | None = None
    browser_notifications: bool | None = None
    show_read_receipts: bool | None = None
    show_typing_indicators: bool | None = None
