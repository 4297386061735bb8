"""Exception handlers for the Directory Listing Service.

This module converts domain exceptions into consistent JSON responses of the
shape ``{"error": ..., "detail": ..., ...}``.
"""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from models.directory_tree import ThresholdUnsatisfiableError
from models.store import TreeNotFoundError
from models.transcript import MalformedSizeError

logger = logging.getLogger(__name__)


async def tree_not_found_handler(request: Request, exc: TreeNotFoundError):
    """Handle TreeNotFoundError exceptions.

    Returns a 404 naming the requested tree and the trees that do exist.

    Args:
        request: The incoming request that triggered the error.
        exc: The TreeNotFoundError exception.

    Returns:
        JSONResponse with 404 status.
    """
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={
            "error": "Tree Not Found",
            "detail": f"The tree '{exc.tree_id}' does not exist",
            "requested_tree": exc.tree_id,
            "available_trees": exc.available_ids,
        },
    )


async def malformed_size_handler(request: Request, exc: MalformedSizeError):
    """Handle MalformedSizeError exceptions.

    The transcript was rejected as a whole; nothing was stored.

    Args:
        request: The incoming request that triggered the error.
        exc: The MalformedSizeError exception.

    Returns:
        JSONResponse with 422 status and the offending line.
    """
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "Malformed Size",
            "detail": str(exc),
            "line": exc.line,
            "line_number": exc.line_number,
        },
    )


async def threshold_unsatisfiable_handler(
    request: Request, exc: ThresholdUnsatisfiableError
):
    """Handle ThresholdUnsatisfiableError exceptions.

    Args:
        request: The incoming request that triggered the error.
        exc: The ThresholdUnsatisfiableError exception.

    Returns:
        JSONResponse with 404 status and the largest available size.
    """
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={
            "error": "Threshold Unsatisfiable",
            "detail": str(exc),
            "required": exc.required,
            "largest_size": exc.largest_size,
        },
    )


async def validation_exception_handler(request: Request, exc: ValidationError):
    """Handle Pydantic validation errors raised outside request parsing.

    Args:
        request: The incoming request that triggered the error.
        exc: The ValidationError exception.

    Returns:
        JSONResponse with validation error details.
    """
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "Validation Error",
            "detail": "The request data failed validation",
            "validation_errors": exc.errors(include_url=False, include_context=False),
        },
    )


async def value_error_handler(request: Request, exc: ValueError):
    """Handle ValueError exceptions.

    Args:
        request: The incoming request that triggered the error.
        exc: The ValueError exception.

    Returns:
        JSONResponse with 400 status.
    """
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Invalid Value",
            "detail": str(exc),
            "type": "ValueError",
        },
    )


async def runtime_error_handler(request: Request, exc: RuntimeError):
    """Handle RuntimeError exceptions.

    Args:
        request: The incoming request that triggered the error.
        exc: The RuntimeError exception.

    Returns:
        JSONResponse with 500 status.
    """
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Runtime Error",
            "detail": str(exc),
            "type": "RuntimeError",
        },
    )


async def generic_exception_handler(request: Request, exc: Exception):
    """Handle any unhandled exceptions without exposing a stack trace.

    Args:
        request: The incoming request that triggered the error.
        exc: The exception that was raised.

    Returns:
        JSONResponse with a generic 500 body.
    """
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}: {exc}",
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal Server Error",
            "detail": "An unexpected error occurred",
            "type": type(exc).__name__,
        },
    )
