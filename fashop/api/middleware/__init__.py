"""
Middleware package for FastAPI application.
"""

from fashop.api.middleware.logging_middleware import RequestLoggingMiddleware

__all__ = ["RequestLoggingMiddleware"]
