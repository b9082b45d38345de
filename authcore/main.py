import logging
from datetime import timedelta

import uvicorn
from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from authcore.api.exception_handlers import register_exception_handlers
from authcore.api.router import api_router
from authcore.core.config import Settings, settings
from authcore.core.logging import configure_logging
from authcore.core.security import PasswordHasher, TokenIssuer
from authcore.db.base import create_db_engine, create_session_factory
from authcore.services.email import EmailNotifier

logger = logging.getLogger(__name__)


def create_app(app_settings: Settings = settings) -> FastAPI:
    app = FastAPI(title="authcore")

    # Process-wide collaborators, built once and injected per request
    engine = create_db_engine(app_settings.database_url)
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.password_hasher = PasswordHasher(rounds=app_settings.bcrypt_rounds)
    app.state.token_issuer = TokenIssuer(app_settings.secret_key, app_settings.algorithm)
    app.state.session_token_ttl = timedelta(minutes=app_settings.access_token_expire_minutes)
    app.state.reset_token_ttl = timedelta(
        minutes=app_settings.password_reset_token_expire_minutes
    )
    app.state.notifier = EmailNotifier(
        app_settings.smtp,
        frontend_url=app_settings.frontend_url,
        link_ttl_minutes=app_settings.password_reset_token_expire_minutes,
    )

    # Requests without an Origin header are not affected by CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(api_router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()


def run() -> None:
    configure_logging(settings.log_level)
    logger.info("Server is running on port %s", settings.port)
    uvicorn.run(
        "authcore.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
