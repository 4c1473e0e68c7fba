"""Common validation helpers for message use cases."""

from anonyma.domain.errors import InvalidInputError

DEFAULT_SEARCH_LIMIT = 50
MAX_SEARCH_LIMIT = 100


def ensure_message_content(content: str | None) -> str:
    """Return ``content`` unchanged or raise when it is blank after trimming."""

    if content is None or not content.strip():
        raise InvalidInputError("El mensaje no puede estar vacío")
    return content


def clamp_limit(limit: int | None, *, default: int, maximum: int) -> int:
    if limit is None:
        return default
    return max(1, min(int(limit), maximum))
