from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from signdesk.api.routes import emails, health, signatures
from signdesk.core.config import get_settings
from signdesk.core.logging import configure_logging, get_logger
from signdesk.db.session import lifespan


configure_logging()
logger = get_logger(__name__)


def create_application() -> FastAPI:
    settings = get_settings()
    application = FastAPI(title=settings.app_name, lifespan=lifespan)
    application.include_router(health.router)
    application.include_router(signatures.router)
    application.include_router(emails.router)

    if settings.allowed_origins:
        application.add_middleware(
            CORSMiddleware,
            allow_origins=[str(origin) for origin in settings.allowed_origins],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    logger.info("application.created", environment=settings.environment)
    return application


app = create_application()
