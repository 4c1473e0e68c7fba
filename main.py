import logging
from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from anonyma.application.use_cases.maintenance import maintenance_loop
from anonyma.config import get_settings
from anonyma.infrastructure.database import engine, initialize_database
from anonyma.interfaces.api.routes import register_routes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Inicializa la base de datos y las tareas de mantenimiento; libera los recursos al cerrar."""

    initialize_database()
    async with anyio.create_task_group() as task_group:
        task_group.start_soon(maintenance_loop)
        yield
        task_group.cancel_scope.cancel()
    engine.dispose()
    logger.info("Application shut down")


def create_app() -> FastAPI:
    """Crea y configura la aplicación principal de FastAPI."""

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="Anonyma", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()
