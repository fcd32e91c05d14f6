from fastapi import Request
from starlette.exceptions import HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
import logging

logger = logging.getLogger("uvicorn.error")

class CustomHTTPException(Exception):
    """A custom HTTPException that we can use for additional context."""
    def __init__(self, status_code: int, detail: str, error_code: str = None, headers: dict = None):
        self.status_code = status_code
        self.detail = detail
        self.error_code = error_code
        self.headers = headers
        super().__init__(detail)  # Initialize the base Exception with the detail message


class ValidationError(CustomHTTPException):
    """Required input is missing or blank."""
    def __init__(self, detail: str):
        super().__init__(status_code=400, detail=detail, error_code="MISSING_REQUIRED_FIELDS")


class NotFoundError(CustomHTTPException):
    def __init__(self, detail: str = "Certificate not found"):
        super().__init__(status_code=404, detail=detail, error_code="NOT_FOUND")


class StoreError(CustomHTTPException):
    """
    The document store failed. The detail is what the caller sees, so it stays
    generic; the driver message is logged where the error is raised.
    """
    def __init__(self, detail: str = "Database operation failed"):
        super().__init__(status_code=500, detail=detail, error_code="STORE_ERROR")


class StoreUnavailableError(StoreError):
    def __init__(self, detail: str = "Database is not connected"):
        super().__init__(detail)
        self.error_code = "STORE_UNAVAILABLE"


class ImageDecodeError(CustomHTTPException):
    def __init__(self, detail: str = "Failed to load certificate image"):
        super().__init__(status_code=500, detail=detail, error_code="IMAGE_DECODE_FAILED")


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle validation errors and return a structured JSON response."""
    logger.error(f"Validation error on {request.url}: {exc.errors()}")

    errors = exc.errors()
    # Sanitize un-serializable objects in ctx
    for error in errors:
        ctx = error.get("ctx")
        if ctx and isinstance(ctx.get("error"), Exception):
            ctx["error"] = str(ctx["error"])

    return JSONResponse(
        status_code=422,
        content={
            "detail": errors,
            "message": "Validation failed. Please check your request data.",
        },
    )

async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Custom HTTP exception handler for better error responses."""
    if isinstance(exc, CustomHTTPException):
        logger.error(f"Custom HTTP error on {request.url}: {exc.detail}")
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "error_code": exc.error_code
            },
            headers=exc.headers or {},
        )
    elif isinstance(exc, HTTPException):
        logger.error(f"HTTP error on {request.url}: {exc.detail}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=exc.headers or {},
        )

    logger.error(f"Unexpected error on {request.url}: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={"detail": "An unexpected error occurred"},
    )
