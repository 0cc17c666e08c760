"""RFC 7807 Problem Details error response formatting"""

import logging
from typing import Optional, Dict, Any, List

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from tradehub.services.errors import ServiceError
from tradehub.services.s3_service import (
    FileTooLargeError,
    InvalidFileTypeError,
    S3ServiceError,
)

logger = logging.getLogger(__name__)

ERROR_TYPE_BASE = "https://api.tradehub.app/errors"


class ProblemDetail(BaseModel):
    """RFC 7807 Problem Details for HTTP APIs"""
    type: str = Field(..., description="URI reference identifying the problem type")
    title: str = Field(..., description="Short, human-readable summary")
    status: int = Field(..., description="HTTP status code")
    detail: str = Field(..., description="Human-readable explanation")
    instance: Optional[str] = Field(None, description="URI reference identifying the specific occurrence")


def create_error_response(
    status_code: int,
    title: str,
    detail: str,
    error_type: Optional[str] = None,
    instance: Optional[str] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """
    Create an RFC 7807 compliant error response

    Args:
        status_code: HTTP status code
        title: Short error title
        detail: Detailed error message
        error_type: Error type slug (defaults to generic type based on status code)
        instance: Request path or identifier
        headers: Extra response headers

    Returns:
        JSONResponse with problem details
    """
    # Default error types based on status code
    error_type_map = {
        400: "bad_request",
        401: "unauthorized",
        404: "not_found",
        409: "conflict",
        500: "internal_server_error",
    }

    if not error_type:
        error_type = error_type_map.get(status_code, "error")

    problem: Dict[str, Any] = {
        "type": f"{ERROR_TYPE_BASE}/{error_type}",
        "title": title,
        "status": status_code,
        "detail": detail,
    }

    if instance:
        problem["instance"] = instance

    if status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer", **(headers or {})}

    return JSONResponse(
        status_code=status_code,
        content=problem,
        headers=headers,
    )


def internal_server_error(
    detail: str = "An internal server error occurred",
    instance: Optional[str] = None
) -> JSONResponse:
    """Create a 500 Internal Server Error response"""
    return create_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        title="Internal Server Error",
        detail=detail,
        instance=instance
    )


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Render a domain error with the status it declares"""
    return create_error_response(
        status_code=exc.status_code,
        title=exc.title,
        detail=exc.detail,
        error_type=exc.error_type,
        instance=request.url.path,
    )


async def storage_error_handler(request: Request, exc: S3ServiceError) -> JSONResponse:
    """Rejected uploads are client errors; anything else from storage is a 500"""
    if isinstance(exc, (InvalidFileTypeError, FileTooLargeError)):
        error_type = "invalid_file_type" if isinstance(exc, InvalidFileTypeError) else "file_too_large"
        return create_error_response(
            status_code=status.HTTP_400_BAD_REQUEST,
            title="Bad Request",
            detail=str(exc),
            error_type=error_type,
            instance=request.url.path,
        )

    logger.error(f"Storage failure on {request.method} {request.url.path}: {exc}")
    return internal_server_error(detail="File storage is unavailable", instance=request.url.path)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: log the traceback, answer with a generic problem"""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return internal_server_error(instance=request.url.path)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the problem-document handlers to an application"""
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(S3ServiceError, storage_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
