# barbershop/main.py

import logging
from contextlib import asynccontextmanager
from logging.config import dictConfig

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from barbershop.config import get_settings
from barbershop.db import create_db_and_tables
from barbershop.errors import register_error_handlers
from barbershop.routers import (
    appointments_routes,
    auth_routes,
    barbers_routes,
    gallery_routes,
    payments_routes,
    promotions_routes,
    services_routes,
    users_routes,
)


def configure_logging(level: str = "INFO") -> None:
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {
                    "()": "pythonjsonlogger.json.JsonFormatter",
                    "fmt": "%(asctime)s %(levelname)s %(name)s %(message)s",
                }
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                    "level": level,
                }
            },
            "root": {"handlers": ["console"], "level": level},
            "loggers": {
                "barbershop": {"level": level, "propagate": True},
            },
        }
    )


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_db_and_tables()
    logger.info("database tables ready")
    yield


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Barbershop Booking API", version="0.1.0", lifespan=lifespan)

    allowed_origins = [o.strip() for o in settings.allowed_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    app.include_router(auth_routes.router)
    app.include_router(users_routes.router)
    app.include_router(services_routes.router)
    app.include_router(barbers_routes.router)
    app.include_router(appointments_routes.router)
    app.include_router(payments_routes.router)
    app.include_router(gallery_routes.router)
    app.include_router(promotions_routes.router)

    return app


app = create_app()
