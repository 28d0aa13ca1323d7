import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ticketbari.api.router import api_router
from ticketbari.core.config import Settings, get_settings
from ticketbari.core.errors import register_exception_handlers
from ticketbari.core.logging_config import configure_logging
from ticketbari.db.init_db import seed_demo_data
from ticketbari.db.session import Database
from ticketbari.services.payment_gateway import PaymentGateway

logger = logging.getLogger(__name__)


def _run_migrations_if_needed(settings: Settings) -> None:
    """Apply Alembic migrations automatically in production if enabled.

    Controlled by env var AUTO_APPLY_MIGRATIONS (default: '1'). Safe to run repeatedly.
    """
    if settings.env.lower() != "prod":
        return
    if os.getenv("AUTO_APPLY_MIGRATIONS", "1") != "1":
        return
    from alembic import command
    from alembic.config import Config

    backend_dir = Path(__file__).resolve().parents[1]
    alembic_ini = backend_dir / "alembic.ini"
    if not alembic_ini.exists():
        logger.warning("alembic.ini not found at %s, skipping auto-migrations", alembic_ini)
        return
    cfg = Config(str(alembic_ini))
    # Ensure script_location resolves correctly when launched from arbitrary CWD
    cfg.set_main_option("script_location", str(backend_dir / "alembic"))
    cfg.set_main_option("sqlalchemy.url", settings.database_url or "")
    logger.info("Applying Alembic migrations -> head")
    command.upgrade(cfg, "head")
    logger.info("Migrations applied successfully")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    database = Database(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        _run_migrations_if_needed(settings)
        if settings.auto_create_tables or settings.is_dev:
            database.create_tables()
        if settings.is_dev:
            seed_demo_data(database, settings)
        logger.info("%s started (env=%s)", settings.app_name, settings.env)
        yield
        database.dispose()

    app = FastAPI(title=settings.app_name, version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database
    app.state.payment_gateway = PaymentGateway(settings.stripe_secret_key, settings.payment_currency)

    origins = settings.cors_origins
    logger.info("Resolved CORS origins: %s", origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(api_router)
    return app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(create_app(), host="0.0.0.0", port=int(os.getenv("PORT", 8000)))
