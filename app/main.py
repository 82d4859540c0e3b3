# app/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

import redis
import uvicorn
from fastapi import FastAPI
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from starlette.concurrency import run_in_threadpool
from starlette.middleware.cors import CORSMiddleware

from app.auth.stores import ChallengeStore
from app.core.config import Settings, settings
from app.core.errors import register_exception_handlers
from app.core.logging import configure_logging
from app.db.base import Base
from app.db.redis_client import create_redis_client
from app.db.session import check_connection, create_db_engine, create_session_factory
from app.notifications.email import build_notifier
from app.auth.routes.register_routes import router as register_router
from app.auth.routes.login_routes import router as login_router
from app.auth.routes.password_reset_routes import router as pass_reset_router

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings,
    *,
    engine: Optional[Engine] = None,
    redis_client: Optional[redis.Redis] = None,
    notifier=None,
) -> FastAPI:
    """
    Build the application.

    Clients not passed in are created from settings when the app starts and
    released when it stops. A user-store connection failure aborts startup;
    an unreachable OTP store is logged and the app starts without a working
    reset flow.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db_engine = engine or create_db_engine(settings)
        try:
            check_connection(db_engine)
        except SQLAlchemyError:
            logger.critical("Failed to connect to the user database", exc_info=True)
            raise
        logger.info("User database connected")

        # For quick local development. In production, manage schema with Alembic.
        Base.metadata.create_all(bind=db_engine)

        otp_client = redis_client or create_redis_client(settings)
        # ping blocks for up to REDIS_SOCKET_TIMEOUT; keep it off the event loop
        if await run_in_threadpool(ChallengeStore(otp_client).ping):
            logger.info("Connected to Redis")
        else:
            logger.error("Redis connection failed, password reset unavailable")

        app.state.settings = settings
        app.state.session_factory = create_session_factory(db_engine)
        app.state.redis = otp_client
        app.state.notifier = notifier or build_notifier(settings)

        try:
            yield
        finally:
            if redis_client is None:
                otp_client.close()
            if engine is None:
                db_engine.dispose()
            logger.info("Shutdown complete")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="1.0.0",
        description="User registration, login and OTP password reset",
        lifespan=lifespan,
    )

    # -----------------------------------------------------------------------
    # CORS middleware
    # -----------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # -----------------------------------------------------------------------
    # Routers
    # -----------------------------------------------------------------------
    app.include_router(register_router)
    app.include_router(login_router)
    app.include_router(pass_reset_router)

    # -----------------------------------------------------------------------
    # Health check
    # -----------------------------------------------------------------------
    @app.get("/health", tags=["health"])
    def health_check():
        """
        Simple health check endpoint.
        Returns {"status": "ok"} when the service is running.
        """
        return {"status": "ok"}

    return app


configure_logging(settings)
app = create_app(settings)


if __name__ == "__main__":
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)
