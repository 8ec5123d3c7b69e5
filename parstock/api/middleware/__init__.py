"""API middleware."""

from parstock.api.middleware.error_handler import ErrorHandlerMiddleware
from parstock.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
