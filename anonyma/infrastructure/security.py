"""Security helpers for hashing and token generation."""

from datetime import datetime, timedelta, timezone
from hashlib import sha256

from jose import JWTError, jwt
from passlib.context import CryptContext

from anonyma.config import get_settings
from anonyma.domain.entities import User

ALGORITHM = "HS256"

# Ajusta "rounds" (PASSWORD_HASH_ROUNDS) según tu presupuesto de CPU.
pwd_context = CryptContext(
    schemes=["pbkdf2_sha256"],
    deprecated="auto",
    pbkdf2_sha256__rounds=get_settings().password_hash_rounds,
)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def password_signature(user: User) -> str:
    """Fingerprint that invalidates issued tokens once the account changes."""

    return sha256(f"{user.password}:{int(user.is_active)}".encode()).hexdigest()


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    settings = get_settings()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    return jwt.encode({**data, "exp": expire}, settings.secret_key, algorithm=ALGORITHM)


def create_user_token(user: User) -> str:
    return create_access_token(
        {
            "sub": str(user.id),
            "username": user.username,
            "pwd_sig": password_signature(user),
        }
    )


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, get_settings().secret_key, algorithms=[ALGORITHM])
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc


__all__ = [
    "create_access_token",
    "create_user_token",
    "decode_access_token",
    "get_password_hash",
    "password_signature",
    "verify_password",
]
