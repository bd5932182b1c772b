"""
Player accounts backend: application entry point.
"""

from __future__ import annotations

import logging
import sys

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.auth import router as auth_router
from api.characters import router as characters_router
from api.dependencies import get_store
from api.error_handlers import register_error_handlers
from api.items import router as items_router
from api.middleware import register_middleware
from config.settings import config
from database.helpers import ensure_item_catalog
from database.session import dispose_engine, init_db

logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
    stream=sys.stdout,
)
for _noisy in ("sqlalchemy.engine", "asyncpg", "aiosqlite"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Player Accounts",
        version="1.0.0",
        description="Sign-up provisioning and bearer-token authentication.",
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app)
    register_error_handlers(app)

    # Routes
    app.include_router(auth_router)
    app.include_router(items_router)
    app.include_router(characters_router)

    @app.on_event("startup")
    async def on_startup():
        logger.info("Creating missing tables…")
        await init_db()
        await ensure_item_catalog(get_store())
        logger.info("Application ready to accept requests.")

    @app.on_event("shutdown")
    async def on_shutdown():
        await dispose_engine()

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )
