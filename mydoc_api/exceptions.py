"""Errors raised by entities, handlers and the persistence gateway.

Each error carries the HTTP status it is reported with, so request
handlers can let domain failures propagate and rely on the handlers
registered by ``register_exception_handlers``.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class MyDocError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(MyDocError):
    """A required field is missing or a value is malformed."""


class NotFoundError(MyDocError):
    """An id addressed by the request path does not resolve."""

    status_code = 404


class UnresolvedReferenceError(NotFoundError):
    """An id referenced from the request body does not resolve."""

    status_code = 400


class ConflictError(MyDocError):
    """The requested change conflicts with the current state."""


class BillAlreadyPaidError(ConflictError):
    pass


class InsufficientStockError(ConflictError):
    pass


class DomainRuleError(MyDocError):
    """An association mutator rejected the change."""


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(MyDocError)
    async def mydoc_error_handler(request: Request, exc: MyDocError):
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
