"""Rutas de cuenta, perfil, preferencias, directorio de usuarios y bloqueos."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from anonyma.application.use_cases.users import (
    block_user as block_user_uc,
    delete_account as delete_account_uc,
    get_preferences as get_preferences_uc,
    list_blocked_users as list_blocked_users_uc,
    list_users as list_users_uc,
    unblock_user as unblock_user_uc,
    update_preferences as update_preferences_uc,
    update_profile as update_profile_uc,
)
from anonyma.domain.entities import Identity
from anonyma.domain.errors import MessagingError
from anonyma.infrastructure.database import get_db
from anonyma.interfaces.api.dependencies import get_current_identity
from anonyma.interfaces.api.routes_helpers import to_http_exception
from anonyma.interfaces.api.schemas import (
    BlockStatusResponse,
    IdentityRead,
    PreferencesRead,
    PreferencesUpdate,
    ProfileUpdate,
    UserRead,
)

router = APIRouter(tags=["users"])


@router.get("/me", response_model=IdentityRead)
def read_current_identity(identity: Identity = Depends(get_current_identity)):
    """Devuelve la identidad del usuario autenticado."""

    return IdentityRead(user_id=identity.user_id, username=identity.username)


@router.post("/me", response_model=UserRead)
def update_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Actualiza el nombre de usuario, la biografía o el avatar."""

    try:
        user = update_profile_uc(
            db,
            identity=identity,
            username=payload.username,
            bio=payload.bio,
            avatar_url=payload.avatar_url,
        )
    except MessagingError as exc:
        raise to_http_exception(exc) from exc
    return UserRead.model_validate(user)


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
def delete_account(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Elimina la cuenta; los mensajes enviados quedan sin remitente."""

    try:
        delete_account_uc(db, identity=identity)
    except MessagingError as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/preferences", response_model=PreferencesRead)
def read_preferences(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    return PreferencesRead.model_validate(get_preferences_uc(db, identity=identity))


@router.post("/preferences", response_model=PreferencesRead)
def update_preferences(
    payload: PreferencesUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Guarda solo los campos enviados y devuelve las preferencias resultantes."""

    try:
        preferences = update_preferences_uc(
            db, identity=identity, **payload.model_dump(exclude_none=True)
        )
    except MessagingError as exc:
        raise to_http_exception(exc) from exc
    return PreferencesRead.model_validate(preferences)


@router.get("/users", response_model=list[UserRead])
def list_users(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Devuelve los demás usuarios a los que se puede escribir."""

    return [UserRead.model_validate(user) for user in list_users_uc(db, identity=identity)]


@router.get("/users/blocked", response_model=list[int])
def list_blocked_users(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Devuelve los identificadores de los usuarios bloqueados."""

    return list_blocked_users_uc(db, identity=identity)


@router.post("/users/{user_id}/block", response_model=BlockStatusResponse)
def block_user(
    user_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Impide que ``user_id`` inicie conversaciones o responda al usuario."""

    try:
        block_user_uc(db, identity=identity, user_id=user_id)
    except MessagingError as exc:
        raise to_http_exception(exc) from exc
    return BlockStatusResponse(user_id=user_id, blocked=True)


@router.post("/users/{user_id}/unblock", response_model=BlockStatusResponse)
def unblock_user(
    user_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    try:
        unblock_user_uc(db, identity=identity, user_id=user_id)
    except MessagingError as exc:
        raise to_http_exception(exc) from exc
    return BlockStatusResponse(user_id=user_id, blocked=False)
