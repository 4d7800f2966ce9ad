from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from loguru import logger

from rubrik_stats.api.v1.api import api_router
from rubrik_stats.core.config import settings
from rubrik_stats.core.dependencies import close_rubrik_client, get_rubrik_client
from rubrik_stats.core.exceptions import (
    AuthenticationError,
    RubrikError,
    authentication_error_handler,
    generic_exception_handler,
    http_exception_handler,
    rubrik_error_handler,
    validation_exception_handler,
)
from rubrik_stats.core.logging import setup_logging
from rubrik_stats.schemas.common import HealthResponse


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info(f"Starting Rubrik Stats API for {settings.RUBRIK_BASE_URL}")
    if not settings.API_SECRET_TOKEN:
        logger.warning("API_SECRET_TOKEN is not set, every /api/v1 request will be rejected")

    yield

    logger.info("Shutting down Rubrik Stats API")
    close_rubrik_client()


APP_DESCRIPTION = (
    "Read-only JSON API over the Rubrik internal stats endpoints."
    " Surfaces storage, ingest and archival statistics for monitoring."
)

app = FastAPI(
    title="Rubrik Stats API",
    version="1.0.0",
    description=APP_DESCRIPTION,
    lifespan=lifespan,
)

# Global Error Handling
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(AuthenticationError, authentication_error_handler)
app.add_exception_handler(RubrikError, rubrik_error_handler)
app.add_exception_handler(Exception, generic_exception_handler)

app.include_router(api_router, prefix="/api/v1")


@app.get("/", include_in_schema=False)
def read_root():
    return {"message": "Welcome to the Rubrik Stats API"}


@app.get("/health", tags=["System"], response_model=HealthResponse, response_model_exclude_none=True)
def health_check(check_upstream: bool = False):
    status = {"status": "ok", "app": "up"}
    if check_upstream:
        try:
            client = get_rubrik_client()
            if not client.is_logged_in:
                client.connect()
            status["upstream"] = "connected"
        except RubrikError as e:
            logger.error(f"Upstream health check failed: {e}")
            raise HTTPException(status_code=503, detail=f"Rubrik cluster unreachable: {e}") from e
    return status
