import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

# Load env from the package directory before settings are read
package_dir = os.path.dirname(os.path.abspath(__file__))
if "PYTEST_CURRENT_TEST" not in os.environ:
    load_dotenv(dotenv_path=os.path.join(package_dir, ".env"))

from subscription_hub.core.config import settings, validate_config
from subscription_hub.core.logging import LOGGER_NAME, configure_logging
from subscription_hub.core.middleware.request_id import RequestIdMiddleware
from subscription_hub.core.errors import (
    AppError,
    app_error_handler,
    http_error_handler,
    request_validation_handler,
    unhandled_exception_handler,
)
from subscription_hub.api import health, messages, organizations, plans, subscriptions
from subscription_hub.features.registry.hub import get_hub

configure_logging(settings.ENV)
validate_config(strict=getattr(settings, "CONFIG_STRICT", False))


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger = logging.getLogger(LOGGER_NAME)
    logger.info("Starting subscription hub...")
    get_hub()
    try:
        yield
    finally:
        logging.getLogger(LOGGER_NAME).info("Stopping subscription hub...")


def create_app() -> FastAPI:
    app = FastAPI(title="Subscription Hub", lifespan=lifespan)

    app.add_middleware(RequestIdMiddleware)

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(HTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # CORS (adjust origins in production)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.CORS_ALLOWED_ORIGINS.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router, tags=["health"])
    app.include_router(organizations.router, tags=["organizations"])
    app.include_router(plans.router, tags=["plans"])
    app.include_router(subscriptions.router, tags=["subscriptions"])
    app.include_router(messages.router, tags=["messages"])
    return app


app = create_app()
