"""Use cases for the caller's stored display preferences.

Preferences are kept for the owning client only; the server reads none of
them when delivering messages or events.
"""

from dataclasses import replace

from sqlalchemy.orm import Session

from anonyma.domain.entities import Identity, UserPreferences
from anonyma.domain.errors import InvalidInputError
from anonyma.infrastructure.repositories import UserPreferenceRepository

THEMES = ("dark", "light")


def get_preferences(session: Session, *, identity: Identity) -> UserPreferences:
    """Return the stored preferences, or the defaults if none were saved."""

    stored = UserPreferenceRepository(session).get(identity.user_id)
    return stored if stored is not None else UserPreferences(user_id=identity.user_id)


def update_preferences(
    session: Session,
    *,
    identity: Identity,
    theme: str | None = None,
    notification_sound: bool | None = None,
    browser_notifications: bool | None = None,
    show_read_receipts: bool | None = None,
    show_typing_indicators: bool | None = None,
) -> UserPreferences:
    if theme is not None and theme not in THEMES:
        raise InvalidInputError("Tema no soportado")

    current = get_preferences(session, identity=identity)
    changes = {
        "theme": theme,
        "notification_sound": notification_sound,
        "browser_notifications": browser_notifications,
        "show_read_receipts": show_read_receipts,
        "show_typing_indicators": show_typing_indicators,
    }
    updated = replace(
        current, **{field: value for field, value in changes.items() if value is not None}
    )
    return UserPreferenceRepository(session).save(updated)
