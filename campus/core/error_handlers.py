from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
import logging

from .exceptions import CampusException

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str, error_type: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message, "type": error_type}
    )

async def campus_exception_handler(request: Request, exc: CampusException):
    """Handle custom campus exceptions"""
    if exc.status_code >= 500:
        logger.error(f"{exc.__class__.__name__}: {exc.message} - Path: {request.url.path}")
    else:
        logger.warning(f"{exc.__class__.__name__}: {exc.message} - Path: {request.url.path}")
    return error_response(exc.status_code, exc.message, exc.__class__.__name__)

async def http_exception_handler(request: Request, exc: HTTPException):
    """Render framework HTTP errors in the same envelope"""
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": str(exc.detail), "type": "HTTPException"},
        headers=getattr(exc, "headers", None)
    )

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle malformed request bodies and parameters"""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    logger.warning(f"Request validation failed: {messages} - Path: {request.url.path}")
    return error_response(400, "; ".join(messages), "ValidationError")

async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions"""
    logger.exception(f"Unexpected error: {str(exc)} - Path: {request.url.path}")
    return error_response(500, "Internal server error", "InternalError")

def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(CampusException, campus_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
