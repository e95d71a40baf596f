import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from teamhub.bootstrap import build_notification_system
from teamhub.config import Settings, get_settings
from teamhub.interfaces.api.routes import register_routes


def create_app(settings: Settings | None = None) -> FastAPI:
    """Crea y configura la aplicación principal de FastAPI."""

    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Construye el sistema de notificaciones al arrancar y libera los recursos al cerrar."""

        system = await build_notification_system(settings)
        app.state.notifications = system
        try:
            yield
        finally:
            await system.aclose()

    app = FastAPI(title="teamhub notifications", lifespan=lifespan)

    # Orígenes permitidos para los clientes web (CORS_ORIGINS).
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
