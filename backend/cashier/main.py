import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from cashier.config import Settings
from cashier.db.database import Database
from cashier.routers import checkout, health, products, reports
from cashier.exceptions import AppException, app_exception_handler, generic_exception_handler


def configure_logging(level: str):
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def create_app(settings: Settings | None = None, db: Database | None = None) -> FastAPI:
    """Build the application around one Settings instance."""
    settings = settings or Settings()
    db = db or Database(settings)
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await db.connect()
        await db.create_all()
        yield
        await db.disconnect()

    app = FastAPI(
        title="Cashier API",
        version=settings.app_version,
        description="Point-of-sale backend: product catalog, checkout and sales reports",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.db = db

    # Register exception handlers
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(health.router)
    app.include_router(products.router)
    app.include_router(checkout.router)
    app.include_router(reports.router)

    return app
