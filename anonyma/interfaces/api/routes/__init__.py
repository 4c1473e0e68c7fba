from fastapi import FastAPI

from .auth import router as auth_router
from .broadcasts import router as broadcasts_router
from .conversations import router as conversations_router
from .events import router as events_router
from .messages import router as messages_router
from .users import router as users_router

API_PREFIX = "/api"


def register_routes(app: FastAPI) -> None:
    """Registra todos los routers de la API en la aplicación FastAPI."""

    app.include_router(auth_router)
    app.include_router(users_router, prefix=API_PREFIX)
    app.include_router(messages_router, prefix=API_PREFIX)
    app.include_router(conversations_router, prefix=API_PREFIX)
    app.include_router(broadcasts_router, prefix=API_PREFIX)
    app.include_router(events_router, prefix=API_PREFIX)
