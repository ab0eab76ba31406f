"""
Translation of MoodTune errors into HTTP responses.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ..utils.errors import ConfigurationError, InvalidInputError, ProviderError

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


async def invalid_input_handler(request: Request, exc: InvalidInputError) -> JSONResponse:
    return _error(status.HTTP_400_BAD_REQUEST, str(exc))


async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    logger.error(f"Configuration error on {request.url.path}: {exc}")
    return _error(status.HTTP_503_SERVICE_UNAVAILABLE, str(exc))


async def provider_error_handler(request: Request, exc: ProviderError) -> JSONResponse:
    logger.error(f"Inference provider failed on {request.url.path}: {exc}")
    return _error(status.HTTP_502_BAD_GATEWAY, str(exc))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(InvalidInputError, invalid_input_handler)
    app.add_exception_handler(ConfigurationError, configuration_error_handler)
    app.add_exception_handler(ProviderError, provider_error_handler)
