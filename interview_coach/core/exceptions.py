"""
Custom exceptions for the AI Interview Coach application.

This module defines a hierarchy of exceptions to provide specific error handling
and better error messages throughout the application.
"""
import logging
from typing import Optional
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


# ============================================================================
# Custom Exception Classes
# ============================================================================

class AppError(Exception):
    """Base exception for all application errors."""
    status_code: int = 500

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(AppError):
    """Exception raised when configuration is invalid or missing (e.g. no API key)."""
    pass


class AIServiceError(AppError):
    """Exception raised when a call to the generative-AI service fails."""
    status_code = 502


class AIResponseError(AIServiceError):
    """Exception raised when the AI reply cannot be parsed into the expected shape."""
    pass


class InvalidMediaError(AppError):
    """Exception raised when a recorded answer is not a usable base64 data URL."""
    status_code = 422


class PhaseTransitionError(AppError):
    """Exception raised when an operation is not allowed in the current phase."""
    status_code = 409


class SessionNotFoundError(AppError):
    """Exception raised when an interview session id is unknown."""
    status_code = 404


# ============================================================================
# FastAPI Exception Handlers
# ============================================================================

async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"Application error: {exc.message}", exc_info=True)
    else:
        logger.warning(f"Application error ({type(exc).__name__}): {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": type(exc).__name__, **({"details": exc.details} if exc.details else {})},
    )

async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal Server Error", "error": str(exc)},
    )

async def http_exception_handler(request: Request, exc: HTTPException):
    logger.warning(f"HTTP exception: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )
