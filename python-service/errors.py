"""
Error taxonomy for the curation pipeline and FastAPI handlers that map it to HTTP responses.
Every error body has the shape {"error": "<user-facing message>"}.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Missing fields in request."
GENERATION_FAILURE_MESSAGE = "Something went wrong generating suggestions. Try again."
NOT_JSON_MESSAGE = "AI returned non-JSON. Try again."
MISSING_PRODUCTS_MESSAGE = "AI JSON missing products array. Try again."

# Raw model output is only ever logged, and only this much of it
RAW_LOG_LIMIT = 500


class CurationError(Exception):
    """Base class for failures that end a /curate request"""

    public_message = GENERATION_FAILURE_MESSAGE
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.public_message
        super().__init__(self.detail)


class MissingFieldsError(CurationError):
    """A required request field is missing or blank"""

    public_message = MISSING_FIELDS_MESSAGE
    http_status = status.HTTP_400_BAD_REQUEST


class GenerationFailure(CurationError):
    """The generation backend is unreachable, errored, or returned nothing"""


class SanitizeError(CurationError):
    """Generation output failed shape validation"""

    def __init__(self, detail: Optional[str] = None, raw_text: str = ""):
        super().__init__(detail)
        self.raw_text = raw_text

    @property
    def raw_excerpt(self) -> str:
        return self.raw_text[:RAW_LOG_LIMIT]


class NotJSONError(SanitizeError):
    public_message = NOT_JSON_MESSAGE


class MissingProductsArrayError(SanitizeError):
    public_message = MISSING_PRODUCTS_MESSAGE


def error_response(message: str, http_status: int) -> JSONResponse:
    return JSONResponse(status_code=http_status, content={"error": message})


def install_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(CurationError)
    async def curation_error_handler(_: Request, exc: CurationError) -> JSONResponse:
        logger.error(
            '{"event": "curation_error", "type": "%s", "detail": "%s"}',
            type(exc).__name__,
            exc.detail.replace('"', '\\"'),
        )
        return error_response(exc.public_message, exc.http_status)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info(
            '{"event": "request_validation_failed", "error_count": %d}',
            len(exc.errors()),
        )
        return error_response(MISSING_FIELDS_MESSAGE, status.HTTP_400_BAD_REQUEST)
