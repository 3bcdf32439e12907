"""
Error handling for the API

Domain exceptions become JSON responses with their status code.
Anything unexpected is logged and answered with an opaque 500; the
exception text is only included when API_DEBUG is on.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.config import settings
from app.core.exceptions import OrderingError

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "An internal error occurred."


async def ordering_error_handler(request: Request, exc: OrderingError) -> JSONResponse:
    if exc.status_code >= 409:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


class GlobalExceptionMiddleware(BaseHTTPMiddleware):
    """
    Catch-all for exceptions no handler dealt with

    Response body:
    - message: generic text
    - details: exception text in debug mode, otherwise null
    """

    def __init__(self, app, debug: bool = None):
        super().__init__(app)
        self.debug = settings.API_DEBUG if debug is None else debug

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
            return JSONResponse(
                status_code=500,
                content={
                    "message": INTERNAL_ERROR_MESSAGE,
                    "details": str(exc) if self.debug else None,
                },
            )


def register_error_handlers(app: FastAPI, debug: bool = None) -> None:
    """Install domain exception handlers and the catch-all middleware"""
    app.add_exception_handler(OrderingError, ordering_error_handler)
    app.add_middleware(GlobalExceptionMiddleware, debug=debug)
