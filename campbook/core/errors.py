from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from campbook.core.exceptions import CampBookError
from campbook.schemas.response import ErrorResponse
from campbook.core.config import settings

logger = logging.getLogger(__name__)


def _describe_validation_errors(errors) -> str:
    parts = []
    for err in errors:
        location = ".".join(str(loc) for loc in err.get("loc", ()) if loc != "body")
        parts.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return "; ".join(parts) or "Input validation failed"


def add_exception_handlers(app: FastAPI):
    """
    Registers exception handlers with the FastAPI app.
    """
    @app.exception_handler(CampBookError)
    async def campbook_exception_handler(request: Request, exc: CampBookError):
        if exc.status_code >= 500:
            logger.error(
                f"{exc.code}: {exc.message}",
                extra={"method": request.method, "path": request.url.path}
            )
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                message=exc.message,
                code=exc.code,
                details=exc.details
            ).model_dump(exclude_none=True)
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """
        Handles standard HTTP exceptions (404, 405, etc.)
        """
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                message=str(exc.detail),
                code="HTTP_ERROR"
            ).model_dump(exclude_none=True)
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """
        Handles Pydantic validation errors as bad requests.
        """
        errors = exc.errors()
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(
                message=_describe_validation_errors(errors),
                code="INVALID_ARGUMENT",
                details=[
                    {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
                    for err in errors
                ]
            ).model_dump(exclude_none=True)
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all for unhandled exceptions.
        """
        logger.error(
            f"Unhandled exception: {str(exc)}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "client": request.client.host if request.client else "unknown"
            },
            exc_info=True
        )

        message = "An internal error occurred. Please try again later." if not settings.DEBUG else str(exc)

        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                message=message,
                code="INTERNAL_ERROR"
            ).model_dump(exclude_none=True)
        )
