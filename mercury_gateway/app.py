from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from fastapi import FastAPI

from mercury_gateway.core.logging import configure_logging
from mercury_gateway.core.mercury_core.config import MercuryConfig, load_config
from mercury_gateway.core.mercury_core.services import MercuryService
from mercury_gateway.middleware import install_security_headers
from mercury_gateway.routes.subscription_api import router as subscription_router

ROOT_DIR = Path(__file__).resolve().parents[1]

logger = logging.getLogger(__name__)


def load_env() -> None:
    """Load ``.env`` from the working directory, falling back to the repo root."""

    found = find_dotenv(usecwd=True)
    if found:
        load_dotenv(found, override=False)
        return
    candidate = ROOT_DIR / ".env"
    if candidate.exists():
        load_dotenv(candidate, override=False)


def create_app(config: Optional[MercuryConfig] = None, service: Optional[MercuryService] = None) -> FastAPI:
    """Build the API app.

    Without an explicit ``service`` the config is read from the environment;
    a missing ``MERCURY_KEY`` or ``MERCURY_URL`` raises ``ConfigError`` here,
    before anything is served.
    """

    if service is None:
        if config is None:
            load_env()
            config = load_config()
        configure_logging(config.log_level)
        logger.info("Mercury config loaded: %s", config.redacted())
        service = MercuryService.from_config(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        app.state.mercury_service.close()

    app = FastAPI(title="Mercury Gateway API", version="v1", lifespan=lifespan)
    app.state.mercury_service = service
    install_security_headers(app)
    app.include_router(subscription_router)
    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "mercury_gateway.app:create_app",
        factory=True,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3000")),
    )
