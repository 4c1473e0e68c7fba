"""FastAPI dependency utilities."""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from starlette.requests import HTTPConnection

from anonyma.domain.entities import Identity
from anonyma.infrastructure.database import SessionLocal, get_db
from anonyma.infrastructure.notifications import (
    NotificationHub,
    RealtimeEventPublisher,
    notification_hub,
    realtime_event_publisher,
)
from anonyma.infrastructure.repositories import UserRepository
from anonyma.infrastructure.security import decode_access_token, password_signature

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token", auto_error=False)


def _unauthorized(detail: str = "Credenciales inválidas") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def resolve_identity(token: str, db: Session) -> Identity:
    """Resolve the authenticated identity for the provided token."""

    try:
        payload = decode_access_token(token)
    except ValueError as exc:
        raise _unauthorized() from exc

    subject = payload.get("sub")
    signature_claim = payload.get("pwd_sig")
    if subject is None or not isinstance(signature_claim, str):
        raise _unauthorized()
    try:
        user_id = int(subject)
    except (TypeError, ValueError) as exc:
        raise _unauthorized() from exc

    user = UserRepository(db).get(user_id)
    if user is None:
        raise _unauthorized("Usuario no encontrado")

    # The signature covers the password hash and the active flag.
    if signature_claim != password_signature(user):
        raise _unauthorized()

    return user.to_identity()


def get_current_identity(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> Identity:
    """Return the authenticated caller or reject the request with 401."""

    return resolve_identity(token, db)


def get_optional_identity(
    token: str | None = Depends(optional_oauth2_scheme),
    db: Session = Depends(get_db),
) -> Identity | None:
    """Return the caller when a token is sent; ``None`` means an unknown sender.

    A token that is present but invalid is still rejected.
    """

    if not token:
        return None
    return resolve_identity(token, db)


def extract_stream_token(connection: HTTPConnection) -> str | None:
    """Return the bearer token from the header or the ``token`` query parameter.

    Browsers cannot attach headers to ``EventSource`` connections.
    """

    authorization = connection.headers.get("authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return connection.query_params.get("token") or None


def resolve_stream_identity(token: str | None) -> Identity:
    """Resolve a live-stream caller with a short-lived session.

    The session is closed before streaming starts so a long-lived connection
    does not hold a database connection.
    """

    if not token:
        raise _unauthorized()
    session = SessionLocal()
    try:
        return resolve_identity(token, session)
    finally:
        session.close()


def get_stream_identity(request: Request) -> Identity:
    return resolve_stream_identity(extract_stream_token(request))


def get_notification_hub() -> NotificationHub:
    return notification_hub


def get_event_publisher() -> RealtimeEventPublisher:
    return realtime_event_publisher
