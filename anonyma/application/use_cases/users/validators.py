"""Common validation helpers for user use cases."""

from anonyma.domain.errors import InvalidInputError

MIN_PASSWORD_LENGTH = 6
MAX_USERNAME_LENGTH = 64


def ensure_valid_username(username: str) -> str:
    """Return ``username`` without surrounding blanks or raise ``InvalidInputError``."""

    normalized = (username or "").strip()
    if not normalized:
        raise InvalidInputError("El nombre de usuario es obligatorio")
    if len(normalized) > MAX_USERNAME_LENGTH:
        raise InvalidInputError(
            f"El nombre de usuario no puede superar {MAX_USERNAME_LENGTH} caracteres"
        )
    return normalized


def ensure_valid_password(password: str) -> str:
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise InvalidInputError(
            f"La contraseña debe tener al menos {MIN_PASSWORD_LENGTH} caracteres"
        )
    return password


MAX_BIO_LENGTH = 500
MAX_AVATAR_URL_LENGTH = 512
AVATAR_URL_SCHEMES = ("http://", "https://")


def ensure_valid_bio(bio: str) -> str | None:
    """Return the trimmed ``bio``; an empty value clears it."""

    normalized = bio.strip()
    if len(normalized) > MAX_BIO_LENGTH:
        raise InvalidInputError(
            f"La biografía no puede superar {MAX_BIO_LENGTH} caracteres"
        )
    return normalized or None


def ensure_valid_avatar_url(avatar_url: str) -> str | None:
    normalized = avatar_url.strip()
    if not normalized:
        return None
    if len(normalized) > MAX_AVATAR_URL_LENGTH:
        raise InvalidInputError(
            f"La URL del avatar no puede superar {MAX_AVATAR_URL_LENGTH} caracteres"
        )
    if not normalized.lower().startswith(AVATAR_URL_SCHEMES):
        raise InvalidInputError("La URL del avatar debe usar http o https")
    return normalized
