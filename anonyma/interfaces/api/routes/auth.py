"""Endpoints relacionados con registro y autenticación."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from anonyma.application.use_cases.users import (
    AuthenticationStatus,
    authenticate_user,
    register_user as register_user_uc,
)
from anonyma.domain.errors import MessagingError
from anonyma.infrastructure.database import get_db
from anonyma.infrastructure.security import create_user_token
from anonyma.interfaces.api.routes_helpers import to_http_exception
from anonyma.interfaces.api.schemas import RegisterRequest, Token, UserRead

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: Session = Depends(get_db)) -> UserRead:
    """Registra un nuevo usuario con nombre y contraseña."""

    try:
        user = register_user_uc(db, username=payload.username, password=payload.password)
    except MessagingError as exc:
        raise to_http_exception(exc) from exc
    return UserRead.model_validate(user)


# Nota: se conserva la firma esperada por OAuth2PasswordRequestForm.
@router.post("/token", response_model=Token)
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    """Autentica al usuario por nombre y devuelve un token JWT."""

    user, auth_status = authenticate_user(db, form_data.username, form_data.password)

    if auth_status is AuthenticationStatus.INVALID_CREDENTIALS:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Credenciales incorrectas",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if auth_status is AuthenticationStatus.INACTIVE:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Usuario inactivo",
            headers={"WWW-Authenticate": "Bearer"},
        )

    logger.info("User %s logged in", user.id)
    return {
        "access_token": create_user_token(user),
        "token_type": "bearer",
        "user_id": user.id,
        "username": user.username,
    }
