"""
Error responses for the parstock API.

Every failure leaves as an ErrorResponse: error_code, message, hint, the
request path and the request id. Domain errors carry their own status and
hint; ValueError from the services is a client mistake (400).
"""

from collections.abc import Awaitable, Callable
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from parstock.application.dto.responses import ErrorResponse
from parstock.config import current_request_id, get_logger
from parstock.core.exceptions import ParstockError

logger = get_logger(__name__)

_BAD_VALUE_HINT = "A parameter value is invalid. Check the request."
_SCHEMA_HINT = "Check the request body against the API schema."


def status_for_exception(exc: Exception) -> int:
    if isinstance(exc, ParstockError):
        return exc.http_status
    if isinstance(exc, ValueError):
        return HTTPStatus.BAD_REQUEST
    return HTTPStatus.INTERNAL_SERVER_ERROR


def _hint_for(exc: Exception) -> str:
    if isinstance(exc, ParstockError):
        return exc.hint
    if isinstance(exc, ValueError):
        return _BAD_VALUE_HINT
    return ParstockError.hint


def _respond(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    hint: str,
    detail: str | None = None,
) -> JSONResponse:
    body = ErrorResponse(
        error_code=error_code,
        message=message,
        hint=hint,
        detail=detail,
        path=request.url.path,
        request_id=current_request_id() or getattr(request.state, "request_id", None),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def error_response(request: Request, exc: Exception) -> JSONResponse:
    """Log an exception and turn it into the standard error body."""
    status_code = status_for_exception(exc)
    if isinstance(exc, ParstockError):
        error_code, message = exc.code, exc.message
    else:
        error_code, message = exc.__class__.__name__, str(exc)

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "request_error",
        path=request.url.path,
        status_code=status_code,
        error_code=error_code,
        error=message,
        exc_info=status_code >= 500,
    )
    return _respond(request, status_code, error_code, message, _hint_for(exc))


async def _on_error(request: Request, exc: Exception) -> JSONResponse:
    return error_response(request, exc)


async def _on_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    logger.info("request_rejected", path=request.url.path, problems=problems)
    return _respond(
        request,
        HTTPStatus.UNPROCESSABLE_ENTITY,
        "VALIDATION_ERROR",
        "Request validation failed",
        _SCHEMA_HINT,
        detail=problems,
    )


async def _on_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
    try:
        status = HTTPStatus(exc.status_code)
    except ValueError:
        error_code, phrase = "HTTP_ERROR", "An error occurred"
    else:
        error_code, phrase = status.name, status.phrase
    return _respond(
        request,
        exc.status_code,
        error_code,
        str(exc.detail) if exc.detail else phrase,
        "Check the URL and method." if exc.status_code < 500 else ParstockError.hint,
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Catches whatever escaped the registered handlers."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            return error_response(request, e)


def setup_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ParstockError, _on_error)
    app.add_exception_handler(ValueError, _on_error)
    app.add_exception_handler(RequestValidationError, _on_request_validation)
    app.add_exception_handler(HTTPException, _on_http_exception)
