# Third-party imports
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

# Local application imports
from civiclink.core.exceptions import CivicLinkError
from civiclink.core.monitoring.logging import get_contextual_logger
from civiclink.core.monitoring.sentry import capture_exception
from civiclink.schemas.common import BaseResponse

logger = get_contextual_logger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    # Map specific HTTP status codes to custom error codes
    error_map = {
        400: "bad_request",
        401: "unauthorized",
        403: "forbidden",
        404: "not_found",
        405: "method_not_allowed",
        409: "conflict",
        422: "validation_failed",
        429: "too_many_requests",
        500: "internal_server_error",
        503: "upstream_unavailable",
    }

    @app.exception_handler(CivicLinkError)
    async def civiclink_exception_handler(
        request: Request,
        exc: CivicLinkError,
    ) -> JSONResponse:
        if exc.transient:
            logger.warning(f"{request.method} {request.url.path} failed transiently: {exc.message}")
        response = BaseResponse.failure(
            code=exc.code,
            message=exc.message,
            details=exc.details,
            transient=exc.transient,
        )
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return JSONResponse(status_code=exc.status_code, content=response.model_dump(), headers=headers)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request,  # noqa
        exc: HTTPException,
    ) -> JSONResponse:
        # Determine the error code based on the status code
        error_code = error_map.get(exc.status_code, "error")
        # Ensure the detail is a string; if not, convert it
        detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
        response = BaseResponse.failure(code=error_code, message=detail)
        return JSONResponse(status_code=exc.status_code, content=response.model_dump())

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,  # noqa
        exc: RequestValidationError,
    ) -> JSONResponse:
        # Format validation errors into a more readable message
        error_details = []
        for error in exc.errors():
            message = error.get("msg", "")

            # Remove the "Value error, " prefix pydantic puts on custom validator messages
            val_error_prefix = "Value error, "
            if message.startswith(val_error_prefix):
                message = message[len(val_error_prefix) :]

            location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
            error_details.append(f"{location}: {message}" if location else message)

        max_errors = 5
        shown = error_details[:max_errors]
        if len(error_details) > max_errors:
            shown.append("...and more errors")
        detail = "; ".join(shown) if shown else "Invalid request data"

        response = BaseResponse.failure(code="validation_failed", message=detail, details=error_details)
        return JSONResponse(status_code=422, content=response.model_dump())

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        # Capture the exception in Sentry for monitoring
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc!r}")
        capture_exception(exc)
        response = BaseResponse.failure(
            code="internal_server_error",
            message="An unexpected error occurred. Please try again later.",
        )
        return JSONResponse(status_code=500, content=response.model_dump())
