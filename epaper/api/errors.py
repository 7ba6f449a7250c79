"""Maps domain exceptions to HTTP responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from epaper.core.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Field-keyed 422 so the admin form can show each message next to its input."""
    logger.info(
        "Validation failed: %s",
        exc.message,
        extra={"event": "request.invalid", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "message": exc.message,
            "errors": exc.errors,
            "blockers": exc.blockers,
        },
    )


async def not_found_error_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": f"{exc.resource} not found"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the domain exception handlers on an app."""
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(NotFoundError, not_found_error_handler)
