"""
FastAPI microservice for gift curation.
Uses Gemini to generate product suggestions and returns them sanitized,
with approved affiliate links substituted where a partner brand is suggested.
"""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Request  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402

from curation_utils.curation_helpers import get_curation_settings, get_gemini_config  # noqa: E402
from errors import (  # noqa: E402
    GENERATION_FAILURE_MESSAGE,
    CurationError,
    GenerationFailure,
    error_response,
    install_exception_handlers,
)
from models.curation import CurateRequest, CurationSettings, ErrorResponse  # noqa: E402
from models.gift import AffiliatePartner, CurationResult  # noqa: E402
from services.affiliate_resolver import load_affiliate_partners  # noqa: E402
from services.curation_service import curate_gifts  # noqa: E402
from services.generation_client import GeminiGenerationClient, GenerationClient  # noqa: E402

# Load environment variables from .env file in project root (one level up)
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# Configure application-level logger (integrates with Uvicorn's logging)
logger = logging.getLogger(__name__)

log_level_str = os.getenv("LOG_LEVEL", "INFO").upper()
try:
    logging.getLogger().setLevel(log_level_str)
except ValueError:
    # Fallback to INFO if invalid log level is provided
    logging.getLogger().setLevel("INFO")
    logger.warning("Invalid LOG_LEVEL '%s', defaulting to INFO", log_level_str)


def _create_generation_client(settings: CurationSettings) -> Optional[GenerationClient]:
    try:
        api_key, _ = get_gemini_config()
    except ValueError as e:
        # Keep serving /health; /curate answers 500 until the key is configured
        logger.error('{"event": "generation_client_unavailable", "error": "%s"}', str(e))
        return None
    return GeminiGenerationClient(api_key=api_key, model_name=settings.model_name)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_curation_settings()
    app.state.curation_settings = settings
    app.state.affiliate_partners = load_affiliate_partners(os.getenv("AFFILIATE_PARTNERS_FILE"))
    app.state.generation_client = _create_generation_client(settings)
    logger.info(
        '{"event": "service_started", "model": "%s", "link_mode": "%s", "partners": %d}',
        settings.model_name,
        settings.link_mode.value,
        len(app.state.affiliate_partners),
    )
    yield


app = FastAPI(
    title="Gift Curation Service",
    description="Microservice for generating gift suggestions using the Gemini API",
    version="1.0.0",
    lifespan=lifespan,
)

# Static site is served separately and calls /curate cross-origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

install_exception_handlers(app)


def get_generation_client(request: Request) -> Optional[GenerationClient]:
    return getattr(request.app.state, "generation_client", None)


def get_affiliate_partners(request: Request) -> tuple[AffiliatePartner, ...]:
    return request.app.state.affiliate_partners


def get_settings(request: Request) -> CurationSettings:
    return request.app.state.curation_settings


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "ok",
        "message": "Gift Curation Service is running",
        "service": "python-fastapi",
    }


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": "Gift Curation Service",
        "version": "1.0.0",
        "endpoints": {
            "health": "/health",
            "curate": "/curate (POST)",
        },
    }


@app.post(
    "/curate",
    response_model=CurationResult,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def curate_endpoint(
    request: CurateRequest,
    generation_client: Optional[GenerationClient] = Depends(get_generation_client),
    partners: tuple[AffiliatePartner, ...] = Depends(get_affiliate_partners),
    settings: CurationSettings = Depends(get_settings),
):
    """
    Curate gift suggestions for a recipient, occasion and budget.

    This endpoint:
    - Rejects blank fields with 400
    - Builds a budget-aware directive and calls Gemini once (no retry)
    - Sanitizes the output and applies affiliate link overrides
    - Returns 500 with a generic message on any generation or parsing failure;
      raw model output is logged, never returned
    """
    try:
        gift_request = request.to_gift_request()
        if generation_client is None:
            raise GenerationFailure("Generation client is not configured")
        return await curate_gifts(
            request=gift_request,
            generation_client=generation_client,
            partners=partners,
            settings=settings,
        )

    except CurationError as e:
        logger.warning(
            '{"event": "curate_request_failed", "type": "%s", "status": %d}',
            type(e).__name__,
            e.http_status,
        )
        return error_response(e.public_message, e.http_status)

    except Exception as e:
        # Handle unexpected errors
        logger.error(
            '{"event": "curate_unexpected_error", "error": "%s"}',
            str(e).replace('"', '\\"'),
        )
        return error_response(GENERATION_FAILURE_MESSAGE, 500)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
