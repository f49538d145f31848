from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class TelemetryError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "Internal Server Error"

    def __init__(self, error: Optional[str] = None):
        super().__init__(error or self.error)
        if error:
            self.error = error


class ValidationError(TelemetryError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Invalid payload"


class Unauthorized(TelemetryError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Unauthorized"


class NotFound(TelemetryError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Not found"


class StorageFailure(TelemetryError):
    # Detail goes to the log, never to the client
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "Internal Server Error"


class AggregationLimitExceeded(TelemetryError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error = "Active user window too large"


def _failure(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(TelemetryError)
    async def _telemetry_error(_: Request, exc: TelemetryError) -> JSONResponse:
        response = _failure(exc.status_code, exc.error)
        if isinstance(exc, Unauthorized):
            response.headers["WWW-Authenticate"] = "Bearer"
        return response

    @app.exception_handler(RequestValidationError)
    async def _request_validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
        return _failure(status.HTTP_400_BAD_REQUEST, ValidationError.error)
