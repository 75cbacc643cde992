# accounts/app.py
import os
import logging
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import text

from accounts.core.config import Settings, get_settings
from accounts.core.cookies import RefreshCookiePolicy
from accounts.core.csrf import CSRF_HEADER_NAME
from accounts.core.keys import KeyProvider
from accounts.core.logging_config import setup_logging
from accounts.core.passwords import Passwords
from accounts.core.responses import install_exception_handlers, ok
from accounts.core.tokens import TokenCodec
from accounts.db.session import build_engine, create_all_tables
from accounts.routers import auth, profile, user
from accounts.services.rotation import OpenRotationLedger, RotationLedger

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    *,
    passwords: Optional[Passwords] = None,
    rotation_ledger: Optional[RotationLedger] = None,
) -> FastAPI:
    """
    Build the application and everything it holds for its lifetime.

    Key material, token codec, hasher, ledger and engine are constructed here
    exactly once and hung on app.state; request handlers reach them only
    through dependencies. Bad keys or TTLs fail here, not on the first request.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    keys = KeyProvider(settings.jwt_private_key, settings.jwt_public_key).load()

    app = FastAPI(
        title="Accounts Service",
        version=os.getenv("APP_VERSION", "0.1.0"),
    )
    app.state.settings = settings
    app.state.tokens = TokenCodec(keys, settings.access_token_ttl, settings.refresh_token_ttl)
    app.state.passwords = passwords or Passwords()
    app.state.rotation_ledger = rotation_ledger or OpenRotationLedger()
    app.state.refresh_cookie = RefreshCookiePolicy(max_age=settings.refresh_token_ttl)
    app.state.engine = build_engine(settings.database_url)

    if settings.app_env != "prod":
        # prod schema is owned by alembic
        create_all_tables(app.state.engine)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", CSRF_HEADER_NAME],
        expose_headers=[CSRF_HEADER_NAME],
        max_age=600,
    )

    install_exception_handlers(app)

    # 라우터 등록
    app.include_router(auth.auth_router)
    app.include_router(user.user_router)
    app.include_router(profile.profile_router)

    @app.get("/health")
    def health_app():
        return ok({"ok": True})

    @app.get("/health/db")
    def health_db(request: Request):
        # Migration is a deployment concern. Runtime only verifies DB connectivity.
        try:
            with request.app.state.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return ok({"ok": True})
        except Exception:
            logger.exception("DB health check failed")
            raise HTTPException(status_code=500, detail="Database connection failed")

    logger.info("Accounts service ready (env=%s, origins=%s)", settings.app_env, settings.allowed_origins)
    return app
